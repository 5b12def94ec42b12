"""
XML utilities for SVG documents.

Parsing, serialisation, id lookup and text/style manipulation on lxml trees.
SVG is handled as XML: elements are matched by local name so documents with
and without the SVG default namespace behave the same.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Iterator, List, Optional, Union

from lxml import etree

from ..engine.geometry import parse_length
from ..exceptions import BindingWarning, SvgParseError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

SvgSource = Union[str, bytes, etree._ElementTree, etree._Element]

_FONT_SIZE_DECL = re.compile(r"font-size\s*:\s*([0-9.]+)(px|pt|mm|cm)?", re.IGNORECASE)


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)


def parse_svg(content: SvgSource) -> etree._ElementTree:
    """Parse SVG text or bytes into an lxml tree; trees and elements pass through."""
    if isinstance(content, etree._ElementTree):
        return content
    if isinstance(content, etree._Element):
        return content.getroottree()

    data = content.encode("utf-8") if isinstance(content, str) else content
    try:
        root = etree.fromstring(data, _parser())
    except etree.XMLSyntaxError as exc:
        raise SvgParseError("SVG parse error", "svg", str(exc)) from exc

    if root is None or local_name(root) != "svg":
        raise SvgParseError("Invalid SVG", "svg", "document has no root <svg> element")
    return root.getroottree()


def serialize_svg(doc: Union[etree._ElementTree, etree._Element]) -> str:
    return etree.tostring(doc, encoding="unicode")


def clone_document(doc: etree._ElementTree) -> etree._ElementTree:
    """Structurally independent deep copy of ``doc``."""
    return copy.deepcopy(doc)


def local_name(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def svg_tag(reference: etree._Element, name: str) -> str:
    """Tag for a new element named ``name`` in ``reference``'s namespace."""
    namespace = etree.QName(reference).namespace if isinstance(reference.tag, str) else None
    return f"{{{namespace}}}{name}" if namespace else name


def iter_elements(root: Union[etree._ElementTree, etree._Element], name: str) -> Iterator[etree._Element]:
    """Document-order iteration over elements with local name ``name``."""
    return root.iter(f"{{{SVG_NS}}}{name}", name)


def find_by_id(root: Union[etree._ElementTree, etree._Element], svg_id: str) -> Optional[etree._Element]:
    """First element (``root`` included) whose ``id`` equals ``svg_id``."""
    if isinstance(root, etree._ElementTree):
        root = root.getroot()
    matches = root.xpath("descendant-or-self::*[@id=$svg_id]", svg_id=svg_id)
    return matches[0] if matches else None


def require_element_by_id(
    root: Union[etree._ElementTree, etree._Element],
    svg_id: str,
    context: str,
) -> etree._Element:
    element = find_by_id(root, svg_id)
    if element is None:
        raise BindingWarning(
            f"Required element not found: #{svg_id}",
            svg_id=svg_id,
            context=context,
            details=f'Element with id="{svg_id}" does not exist in SVG',
        )
    return element


def collect_ids(root: Union[etree._ElementTree, etree._Element]) -> List[str]:
    """Every ``id`` attribute value in document order (duplicates kept)."""
    if isinstance(root, etree._ElementTree):
        root = root.getroot()
    return [str(v) for v in root.xpath("descendant-or-self::*/@id")]


def get_text_content(element: etree._Element) -> str:
    return "".join(element.itertext())


def set_text_content(element: etree._Element, text: str) -> None:
    for child in list(element):
        element.remove(child)
    element.text = text


def get_href(element: etree._Element) -> Optional[str]:
    return element.get("href") or element.get(f"{{{XLINK_NS}}}href")


def inline_font_size(element: etree._Element) -> Optional[float]:
    """Font size from the ``font-size`` attribute, then the ``style`` declaration."""
    value = parse_length(element.get("font-size"), default=None)
    if value is not None:
        return value
    match = _FONT_SIZE_DECL.search(element.get("style") or "")
    if match:
        return float(match.group(1))
    return None


def get_font_size(element: etree._Element, fallback: float = 12.0) -> float:
    size = inline_font_size(element)
    return fallback if size is None else size


def format_number(value: float) -> str:
    """Compact attribute rendering: ``14.4`` rather than ``14.399999999999999``."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def set_inline_font_size(element: etree._Element, size: float) -> None:
    declarations = [
        part.strip()
        for part in (element.get("style") or "").split(";")
        if part.strip() and not part.strip().lower().startswith("font-size")
    ]
    declarations.append(f"font-size:{format_number(size)}px")
    element.set("style", "; ".join(declarations))
    element.set("font-size", format_number(size))


def find_parent_group_id(element: etree._Element) -> Optional[str]:
    parent = element.getparent()
    while parent is not None:
        if local_name(parent) == "g" and parent.get("id"):
            return parent.get("id")
        parent = parent.getparent()
    return None
