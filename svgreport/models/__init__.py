"""
Models for svgreport templates, data sources and analysis results.
"""

from .bindings import (
    ALIGN_MODES,
    DEFAULT_PAGE_NUMBER_FORMAT,
    FIT_MODES,
    CellBinding,
    DataValue,
    FieldBinding,
    FormatterDef,
    JobManifest,
    PageConfig,
    PageKind,
    PageNumberConfig,
    StaticValue,
    TableBinding,
    TemplateConfig,
    ValueBinding,
    value_binding_from_dict,
)
from .data import (
    BindingOutcome,
    DataSource,
    KvSource,
    PageInfo,
    RenderedPage,
    RenderResult,
    Row,
    TableChunk,
    TableSource,
)
from .text_element import BBox, PageSize, SvgTextAnalysis, TextElementInfo, TextStatistics

__all__ = [
    "ALIGN_MODES",
    "DEFAULT_PAGE_NUMBER_FORMAT",
    "FIT_MODES",
    "CellBinding",
    "DataValue",
    "FieldBinding",
    "FormatterDef",
    "JobManifest",
    "PageConfig",
    "PageKind",
    "PageNumberConfig",
    "StaticValue",
    "TableBinding",
    "TemplateConfig",
    "ValueBinding",
    "value_binding_from_dict",
    "BindingOutcome",
    "DataSource",
    "KvSource",
    "PageInfo",
    "RenderedPage",
    "RenderResult",
    "Row",
    "TableChunk",
    "TableSource",
    "BBox",
    "PageSize",
    "SvgTextAnalysis",
    "TextElementInfo",
    "TextStatistics",
]
