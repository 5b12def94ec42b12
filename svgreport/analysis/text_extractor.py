"""
Text geometry extraction for SVG templates.

Lists every logical text element of a page with its absolute position, font
size and a suggested identifier, so a template author can decide which
elements to bind. Documents without ``<text>`` nodes fall back to glyph
clustering (see :mod:`svgreport.analysis.glyph_clustering`).
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Dict, List, Mapping, Optional

from lxml import etree

from ..config import GLYPH_SPLIT_PROFILES, RenderOptions
from ..engine.geometry import parse_length, to_absolute
from ..exceptions import ConfigError, ExtractionWarning
from ..models.text_element import PageSize, SvgTextAnalysis, TextElementInfo, TextStatistics
from ..utils.xml_utils import (
    SvgSource,
    find_parent_group_id,
    get_href,
    get_text_content,
    inline_font_size,
    iter_elements,
    parse_svg,
)
from .glyph_clustering import GlyphUse, cluster_glyphs, fallback_suggested_id, id_backed_elements, is_id_backed

logger = logging.getLogger(__name__)

SUGGESTED_ID_MAX_LENGTH = 40
SAME_ROW_TOLERANCE = 5.0

_GLYPH_HREF = re.compile(r"^#glyph-", re.IGNORECASE)
_CLASS_RULE = re.compile(r"\.([A-Za-z0-9_-]+)\s*\{([^}]*)\}")
_FONT_SIZE_DECL = re.compile(r"font-size\s*:\s*([0-9.]+)(px|pt|mm|cm)?", re.IGNORECASE)
_PATH_TEXT_ID = re.compile(r"text|label|caption|title|header", re.IGNORECASE)
_PATH_TEXT_CLASS = re.compile(r"text|font", re.IGNORECASE)

_LEADING_NUMBERING = (
    re.compile(r"^\d+[).]\s*"),
    re.compile(r"^[(\[]\d+[)\]]\s*"),
    re.compile(r"^No\.?\s*", re.IGNORECASE),
)


def generate_suggested_id(content: str, x: float, y: float) -> str:
    """Snake-case identifier derived from ``content``, or ``text_<x>_<y>``.

    Leading list numbering (``1.``, ``(2)``, ``No.``) is dropped first.

    Examples:
        >>> generate_suggested_id("1. Invoice Number", 0, 0)
        'invoice_number'
        >>> generate_suggested_id("", 10.4, 20.6)
        'text_10_21'
    """
    if not content:
        return fallback_suggested_id(x, y)

    cleaned = content
    for pattern in _LEADING_NUMBERING:
        cleaned = pattern.sub("", cleaned, count=1)
    cleaned = cleaned.strip().lower()

    suggested = re.sub(r"[^a-z0-9\s_-]", "", cleaned)
    suggested = re.sub(r"\s+", "_", suggested)
    suggested = re.sub(r"_+", "_", suggested)
    suggested = suggested[:SUGGESTED_ID_MAX_LENGTH]
    if suggested.endswith("_"):
        suggested = suggested[:-1]

    if len(suggested) < 2:
        return fallback_suggested_id(x, y)
    return suggested


def extract_class_font_sizes(root: etree._Element) -> Dict[str, float]:
    """``font-size`` of every ``.class { ... }`` rule in the document's ``<style>`` blocks."""
    sizes: Dict[str, float] = {}
    for style in iter_elements(root, "style"):
        css = get_text_content(style)
        for rule in _CLASS_RULE.finditer(css):
            declaration = _FONT_SIZE_DECL.search(rule.group(2))
            if declaration:
                sizes[rule.group(1)] = float(declaration.group(1))
    return sizes


def resolve_font_size(element: etree._Element, class_sizes: Mapping[str, float]) -> Optional[float]:
    size = inline_font_size(element)
    if size is not None:
        return size
    for name in (element.get("class") or "").split():
        if name in class_sizes:
            return class_sizes[name]
    return None


def read_page_size(root: etree._Element) -> PageSize:
    width_attr = root.get("width") or "0"
    height_attr = root.get("height") or "0"
    width = parse_length(width_attr, default=0.0) or 0.0
    height = parse_length(height_attr, default=0.0) or 0.0

    view_box = root.get("viewBox")
    if (not width or not height) and view_box:
        parts = [parse_length(part, default=None) for part in view_box.replace(",", " ").split()]
        if len(parts) == 4 and None not in parts:
            width, height = parts[2], parts[3]

    unit = "px"
    for suffix in ("mm", "pt", "cm"):
        if suffix in width_attr:
            unit = suffix
            break
    return PageSize(width=width, height=height, unit=unit)


def _text_element_info(element: etree._Element, dom_index: int, class_sizes: Mapping[str, float]) -> TextElementInfo:
    content = get_text_content(element).strip()
    point = to_absolute(
        element,
        parse_length(element.get("x"), default=0.0),
        parse_length(element.get("y"), default=0.0),
    )
    return TextElementInfo(
        id=element.get("id"),
        content=content,
        x=point.x,
        y=point.y,
        dom_index=dom_index,
        suggested_id=generate_suggested_id(content, point.x, point.y),
        text_anchor=element.get("text-anchor"),
        font_size=resolve_font_size(element, class_sizes),
        font_family=element.get("font-family"),
        is_synthetic_from_glyphs=False,
        parent_group=find_parent_group_id(element),
    )


def collect_glyph_uses(root: etree._Element) -> List[GlyphUse]:
    """Every ``<use>`` that references a ``#glyph-*`` definition, at absolute position."""
    glyphs: List[GlyphUse] = []
    for dom_index, use in enumerate(iter_elements(root, "use"), start=1):
        href = get_href(use)
        if not href or not _GLYPH_HREF.match(href):
            continue
        point = to_absolute(
            use,
            parse_length(use.get("x"), default=0.0),
            parse_length(use.get("y"), default=0.0),
        )
        glyphs.append(
            GlyphUse(
                x=point.x,
                y=point.y,
                dom_index=dom_index,
                id=use.get("id"),
                parent_group=find_parent_group_id(use),
            )
        )
    return glyphs


def count_path_text(root: etree._Element) -> int:
    """Paths whose id or class suggests they are outlined text."""
    count = 0
    for path in iter_elements(root, "path"):
        if _PATH_TEXT_ID.search(path.get("id") or "") or _PATH_TEXT_CLASS.search(path.get("class") or ""):
            count += 1
    return count


def _compare_reading_order(a: TextElementInfo, b: TextElementInfo) -> float:
    if abs(a.y - b.y) < SAME_ROW_TOLERANCE:
        return a.x - b.x
    return a.y - b.y


def sort_reading_order(elements: List[TextElementInfo]) -> List[TextElementInfo]:
    """Top to bottom, left to right within a 5-unit row band; ``dom_index`` renumbered from 1."""
    ordered = sorted(elements, key=functools.cmp_to_key(_compare_reading_order))
    for index, element in enumerate(ordered, start=1):
        element.dom_index = index
    return ordered


def extract_text_elements(
    svg_source: SvgSource,
    profile: Optional[str] = None,
    name: Optional[str] = None,
    options: Optional[RenderOptions] = None,
) -> SvgTextAnalysis:
    """Analyse the text of one SVG page.

    Args:
        svg_source: SVG text/bytes or a parsed lxml tree/element
        profile: Glyph clustering profile ("balanced", "split" or "merge");
            defaults to ``options.glyph_split_profile``
        name: Label stored on the result (file name, page id)
        options: Render options supplying the default profile

    Raises:
        SvgParseError: the source is not well-formed SVG
        ConfigError: unknown clustering profile
    """
    if profile is None:
        profile = (options or RenderOptions()).glyph_split_profile
    if profile not in GLYPH_SPLIT_PROFILES:
        raise ConfigError("Unknown glyph split profile", "config", repr(profile))

    root = parse_svg(svg_source).getroot()
    page_size = read_page_size(root)
    class_sizes = extract_class_font_sizes(root)
    findings: List[ExtractionWarning] = []
    elements: List[TextElementInfo] = []
    glyph_count = 0

    text_nodes = list(iter_elements(root, "text"))
    if text_nodes:
        for dom_index, text in enumerate(text_nodes, start=1):
            elements.append(_text_element_info(text, dom_index, class_sizes))
    else:
        glyphs = collect_glyph_uses(root)
        glyph_count = len(glyphs)
        if glyphs:
            findings.append(ExtractionWarning(
                f"No <text> elements found. Fallback detected {glyph_count} glyph nodes from <use> references.",
                "glyph-fallback",
            ))
            if is_id_backed(glyphs):
                elements = id_backed_elements(glyphs)
                findings.append(ExtractionWarning(
                    f"Detected ID-backed glyph uses. Kept {len(elements)} <use> nodes as separate candidates.",
                    "glyph-fallback",
                ))
            else:
                elements = cluster_glyphs(glyphs, profile)
                findings.append(ExtractionWarning(
                    f"Grouped glyph nodes into {len(elements)} candidate text segments.",
                    "glyph-fallback",
                ))

    path_text = max(count_path_text(root), glyph_count)
    if path_text > 0 and glyph_count == 0:
        findings.append(ExtractionWarning(
            f"Found {path_text} potential text-as-path elements. "
            "These may need to be converted to <text> elements for data binding.",
            "path-text",
        ))

    elements = sort_reading_order(elements)

    sizes = [el.font_size for el in elements if el.font_size]
    with_id = sum(1 for el in elements if el.id)
    statistics = TextStatistics(
        total=len(elements),
        with_id=with_id,
        without_id=len(elements) - with_id,
        path_text=path_text,
        average_font_size=sum(sizes) / len(sizes) if sizes else None,
    )

    for finding in findings:
        logger.debug(f"{name or 'svg'} [{finding.context}]: {finding.message}")
    logger.info(f"Extracted {statistics.total} text element(s) from {name or 'svg'}")

    return SvgTextAnalysis(
        page_size=page_size,
        text_elements=elements,
        statistics=statistics,
        warnings=[finding.message for finding in findings],
        name=name,
    )


def analyze_template_svgs(
    svg_sources: Mapping[str, SvgSource],
    profile: Optional[str] = None,
    options: Optional[RenderOptions] = None,
) -> List[SvgTextAnalysis]:
    """Analyse several pages in name order."""
    if not svg_sources:
        raise ConfigError("No SVG pages to analyse", "template")
    return [
        extract_text_elements(svg_sources[name], profile=profile, name=name, options=options)
        for name in sorted(svg_sources)
    ]


def export_text_elements(analysis: SvgTextAnalysis) -> Dict:
    """JSON-ready dictionary for external tools (the template editor)."""
    return analysis.to_dict()
