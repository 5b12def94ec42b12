"""
Engine module: value resolution, geometry, pagination and text layout.

Only the leaf modules are re-exported here; ``text_fit`` and ``row_engine``
depend on :mod:`svgreport.config` and are imported from their own modules.
"""

from .formatter import FormatterRegistry
from .geometry import MM_TO_UNITS, AffineMatrix, cumulative_transform, mm_to_units, parse_transform, to_absolute
from .paginator import build_page_plan, calculate_total_pages, chunk_table_rows
from .text_metrics import TextMetricsEngine, estimate_text_width
from .value_resolver import ValueResolver

__all__ = [
    "FormatterRegistry",
    "MM_TO_UNITS",
    "AffineMatrix",
    "cumulative_transform",
    "mm_to_units",
    "parse_transform",
    "to_absolute",
    "build_page_plan",
    "calculate_total_pages",
    "chunk_table_rows",
    "TextMetricsEngine",
    "estimate_text_width",
    "ValueResolver",
]
