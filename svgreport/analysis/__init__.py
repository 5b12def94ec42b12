"""
Analysis module: text geometry extraction, glyph clustering, id review and reports.
"""

from .id_reindexer import ReindexResult, find_duplicate_ids, reindex_text_ids
from .report import print_text_report
from .text_extractor import analyze_template_svgs, export_text_elements, extract_text_elements, generate_suggested_id

__all__ = [
    "ReindexResult",
    "find_duplicate_ids",
    "reindex_text_ids",
    "print_text_report",
    "analyze_template_svgs",
    "export_text_elements",
    "extract_text_elements",
    "generate_suggested_id",
]
