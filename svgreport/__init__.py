"""
svgreport - SVG report template filling library.

Fills designer-authored SVG templates with structured data and emits one
finished SVG document per output page, overflowing long tables onto
repeated pages. A companion analysis module reconstructs the text elements
of an SVG (including glyph-only PDF conversions) for template authoring.

Main Components:
- Renderer: page assembly (``svgreport.renderers``)
- Engine: value resolution, geometry, pagination, text fit, row instantiation
- Analysis: text extraction, glyph clustering, id review, console reports
- Models: template, data source and analysis records
- Utils: lxml helpers and logging setup
"""

from .config import RenderOptions
from .exceptions import (
    BindingWarning,
    ConfigError,
    DataError,
    ExtractionWarning,
    SVGReportError,
    SvgParseError,
)
from .models import (
    CellBinding,
    DataValue,
    JobManifest,
    KvSource,
    PageConfig,
    PageKind,
    RenderResult,
    StaticValue,
    TableBinding,
    TableSource,
    TemplateConfig,
)
from .renderers import Renderer, render_report
from .analysis import extract_text_elements
from .template import load_template, validate_template_match

__version__ = "0.2.0"

__all__ = [
    "RenderOptions",
    "BindingWarning",
    "ConfigError",
    "DataError",
    "ExtractionWarning",
    "SVGReportError",
    "SvgParseError",
    "CellBinding",
    "DataValue",
    "JobManifest",
    "KvSource",
    "PageConfig",
    "PageKind",
    "RenderResult",
    "StaticValue",
    "TableBinding",
    "TableSource",
    "TemplateConfig",
    "Renderer",
    "render_report",
    "extract_text_elements",
    "load_template",
    "validate_template_match",
]
