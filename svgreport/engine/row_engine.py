"""
Row instantiation for table bindings.

A table body is drawn by cloning a designer-authored row template once per
data row and stacking the clones vertically inside the template's parent.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Callable, List, Optional, Union

from lxml import etree

from ..exceptions import ConfigError
from ..models.bindings import CellBinding, TableBinding
from ..models.data import Row, TableChunk
from ..utils.xml_utils import find_by_id, format_number
from .geometry import MM_TO_UNITS, mm_to_units, parse_length, parse_numbers
from .text_fit import TextFitEngine

logger = logging.getLogger(__name__)

DATA_ROW_TYPE = "data"

_TRANSLATE = re.compile(r"translate\s*\(([^)]*)\)")

CellResolver = Callable[[CellBinding, Row], str]


def get_row_y_position(element: etree._Element) -> float:
    """Vertical offset of a row: ``translate`` y, then ``y`` attribute, else 0."""
    match = _TRANSLATE.search(element.get("transform") or "")
    if match:
        values = parse_numbers(match.group(1))
        if values:
            return values[1] if len(values) > 1 else 0.0
    y = parse_length(element.get("y"), default=None)
    return y if y is not None else 0.0


def set_row_y_position(element: etree._Element, y: float) -> None:
    """Move ``element`` to vertical offset ``y`` keeping its horizontal offset.

    The first ``translate(...)`` is rewritten in place; without one, a
    translate built from the ``x`` attribute is put in front of any other
    transform.
    """
    transform = element.get("transform") or ""
    match = _TRANSLATE.search(transform)
    if match:
        values = parse_numbers(match.group(1))
        x = format_number(values[0]) if values else "0"
        translate = f"translate({x}, {format_number(y)})"
        element.set("transform", transform[: match.start()] + translate + transform[match.end():])
        return

    x = element.get("x") or "0"
    element.set("transform", f"translate({x}, {format_number(y)}) {transform}".strip())
    if "x" in element.attrib:
        del element.attrib["x"]


def find_row_template(doc: Union[etree._ElementTree, etree._Element], row_group_id: str) -> etree._Element:
    template = find_by_id(doc, row_group_id)
    if template is None:
        raise ConfigError(
            f"Row template not found: #{row_group_id}",
            "row-template",
            "Row group id does not exist",
        )
    return template


def find_row_container(doc: Union[etree._ElementTree, etree._Element], row_group_id: str) -> etree._Element:
    template = find_row_template(doc, row_group_id)
    parent = template.getparent()
    if parent is None:
        raise ConfigError(
            f"Row template #{row_group_id} has no parent container",
            "row-template",
            "Row template must be inside a group or container",
        )
    return parent


def clone_row_template(template: etree._Element) -> etree._Element:
    clone = copy.deepcopy(template)
    # deepcopy of an lxml element also copies its tail
    clone.tail = None
    if "id" in clone.attrib:
        del clone.attrib["id"]
    return clone


class RowInstantiationEngine:
    """Clones a table's row template once per row of a page chunk."""

    def __init__(self, text_fit: Optional[TextFitEngine] = None, mm_factor: float = MM_TO_UNITS) -> None:
        self.text_fit = text_fit or TextFitEngine()
        self.mm_factor = mm_factor

    def apply(
        self,
        doc: Union[etree._ElementTree, etree._Element],
        binding: TableBinding,
        chunk: TableChunk,
        resolve: CellResolver,
    ) -> List[etree._Element]:
        """Instantiate one row clone per row of ``chunk``.

        ``resolve`` turns a cell binding plus its row record into text. Returns
        the clones in the order they were appended.

        Raises:
            ConfigError: the row template or its container is missing
        """
        template = find_row_template(doc, binding.row_group_id)
        container = find_row_container(doc, binding.row_group_id)

        row_height = mm_to_units(binding.row_height_mm, self.mm_factor)
        if binding.start_y_mm:
            baseline = mm_to_units(binding.start_y_mm, self.mm_factor)
        else:
            baseline = get_row_y_position(template)

        removed = self.clear_data_rows(container)
        if removed:
            logger.debug(f"Removed {removed} previous data row(s) from #{binding.row_group_id}")

        clones: List[etree._Element] = []
        for offset, row in enumerate(chunk.rows):
            clone = clone_row_template(template)
            clone.set("data-row-type", DATA_ROW_TYPE)
            clone.set("data-row-index", str(chunk.start_index + offset))
            set_row_y_position(clone, baseline + offset * row_height)

            for cell in binding.cells:
                element = find_by_id(clone, cell.svg_id)
                if element is None:
                    logger.debug(f"Cell #{cell.svg_id} not inside row template #{binding.row_group_id}")
                    continue
                # Clones must not repeat the template's ids
                del element.attrib["id"]
                if not cell.enabled:
                    continue
                value = resolve(cell, row)
                self.text_fit.apply_to_element(element, cell, value, lookup_root=doc)

            container.append(clone)
            clones.append(clone)

        logger.debug(
            f"Instantiated {len(clones)} row(s) for table {binding.source!r} "
            f"(rows {chunk.start_index}..{chunk.end_index} of {chunk.total_rows})"
        )
        return clones

    @staticmethod
    def clear_data_rows(container: etree._Element) -> int:
        stale = [child for child in container if isinstance(child.tag, str) and child.get("data-row-type") == DATA_ROW_TYPE]
        for child in stale:
            container.remove(child)
        return len(stale)
