"""Renumber ``<text>`` ids and review duplicate ids in SVG templates."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from ..utils.xml_utils import SvgSource, collect_ids, iter_elements, parse_svg, serialize_svg

logger = logging.getLogger(__name__)

DEFAULT_ID_PREFIX = "text_"


@dataclass(slots=True)
class IdMapping:
    old_id: Optional[str]
    new_id: str
    dom_index: int


@dataclass(slots=True)
class ReindexResult:
    updated: bool
    svg_string: str
    mapping: List[IdMapping] = field(default_factory=list)
    duplicate_old_ids: List[str] = field(default_factory=list)


def find_duplicate_ids(svg_source: SvgSource) -> List[str]:
    """Ids used by more than one element, in first-seen order."""
    counts = Counter(collect_ids(parse_svg(svg_source)))
    return [svg_id for svg_id, count in counts.items() if count > 1]


def reindex_text_ids(svg_source: SvgSource, prefix: str = DEFAULT_ID_PREFIX) -> ReindexResult:
    """Give every ``<text>`` the id ``<prefix><n>`` in document order.

    Ids held by non-text elements are never reused; a clash gets a ``_2``,
    ``_3`` ... suffix. The source tree is modified in place when a parsed
    tree is passed.
    """
    prefix = prefix or DEFAULT_ID_PREFIX
    doc = parse_svg(svg_source)
    root = doc.getroot()

    text_nodes = list(iter_elements(root, "text"))
    text_set = set(text_nodes)
    taken = {el.get("id") for el in root.iter() if el not in text_set and isinstance(el.tag, str) and el.get("id")}

    old_counts = Counter(el.get("id") for el in text_nodes if el.get("id"))
    duplicates = [svg_id for svg_id, count in old_counts.items() if count > 1]

    mapping: List[IdMapping] = []
    updated = False
    for dom_index, text in enumerate(text_nodes, start=1):
        old_id = text.get("id")
        base = f"{prefix}{dom_index}"
        candidate = base
        counter = 2
        while candidate in taken:
            candidate = f"{base}_{counter}"
            counter += 1
        taken.add(candidate)

        if old_id != candidate:
            text.set("id", candidate)
            updated = True
        mapping.append(IdMapping(old_id=old_id or None, new_id=candidate, dom_index=dom_index))

    if duplicates:
        logger.warning(f"Duplicate text ids replaced: {', '.join(duplicates)}")
    logger.info(f"Reindexed {len(mapping)} text element(s) (changed: {updated})")

    return ReindexResult(
        updated=updated,
        svg_string=serialize_svg(doc),
        mapping=mapping,
        duplicate_old_ids=duplicates,
    )
