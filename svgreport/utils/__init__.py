"""Utility helpers: lxml SVG handling and logging setup."""

from .logger import configure_logging, get_logger, setup_rich_logging
from .xml_utils import clone_document, find_by_id, parse_svg, serialize_svg

__all__ = [
    "configure_logging",
    "get_logger",
    "setup_rich_logging",
    "clone_document",
    "find_by_id",
    "parse_svg",
    "serialize_svg",
]
