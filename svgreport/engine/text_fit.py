"""
Text fit and layout for bound SVG text elements.

Decides, per element, between literal placement, shrink-to-fit and
multi-line wrap. Layout hints come from the binding (``fit``, ``align``,
``format``) and from data attributes on the element itself:

- ``data-fit-width``: maximum width in user units
- ``data-fit-label``: id of a label element whose text width is the maximum
- ``data-fit-lines``: maximum number of lines
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from lxml import etree

from ..config import RenderOptions
from ..models.bindings import CellBinding
from ..utils.xml_utils import (
    find_by_id,
    format_number,
    get_font_size,
    get_text_content,
    require_element_by_id,
    set_inline_font_size,
    set_text_content,
    svg_tag,
)
from .formatter import FormatterRegistry
from .geometry import parse_length
from .line_breaker import LineBreaker, split_explicit_lines
from .text_metrics import TextMetricsEngine

logger = logging.getLogger(__name__)

ANCHOR_MAP = {
    "left": "start",
    "center": "middle",
    "right": "end",
}

# Shrink without a known width: long strings lose 20%, never below this size
COARSE_SHRINK_MIN_LENGTH = 20
COARSE_SHRINK_FLOOR = 8.0
COARSE_SHRINK_RATIO = 0.8


def apply_text_alignment(element: etree._Element, align: Optional[str]) -> None:
    anchor = ANCHOR_MAP.get(align or "")
    if anchor:
        element.set("text-anchor", anchor)


class TextFitEngine:
    """Places a formatted value into a text element and makes it fit."""

    def __init__(
        self,
        metrics: Optional[TextMetricsEngine] = None,
        formatters: Optional[FormatterRegistry] = None,
        options: Optional[RenderOptions] = None,
    ) -> None:
        self.options = options or RenderOptions()
        self.metrics = metrics or TextMetricsEngine(line_spacing=self.options.line_height_ratio)
        self.formatters = formatters or FormatterRegistry()
        self.line_breaker = LineBreaker(self.metrics)

    def apply(
        self,
        doc: Union[etree._ElementTree, etree._Element],
        binding: CellBinding,
        value: str,
    ) -> etree._Element:
        """Apply ``binding`` to the element it targets in ``doc``.

        Raises:
            BindingWarning: the target id is not present in ``doc``
        """
        element = require_element_by_id(doc, binding.svg_id, f"binding:{binding.svg_id}")
        self.apply_to_element(element, binding, value, lookup_root=doc)
        return element

    def apply_to_element(
        self,
        element: etree._Element,
        binding: CellBinding,
        value: str,
        lookup_root: Optional[Union[etree._ElementTree, etree._Element]] = None,
    ) -> None:
        text = self.formatters.format(value, binding.format)

        if binding.align:
            apply_text_alignment(element, binding.align)

        max_width = self._max_width(element, lookup_root)
        max_lines = self._max_lines(element)
        single_line = max_lines == 1

        if binding.fit == "wrap" or "\n" in text or (max_lines is not None and max_lines > 1):
            self.wrap(element, text, max_width, max_lines)
            return

        set_text_content(element, text)

        if binding.fit == "shrink" or single_line or max_width is not None:
            self.shrink(element, text, max_width)

    # ------------------------------------------------------------------
    # hints

    def _max_width(
        self,
        element: etree._Element,
        lookup_root: Optional[Union[etree._ElementTree, etree._Element]],
    ) -> Optional[float]:
        width = parse_length(element.get("data-fit-width"), default=None)
        if width is not None and width > 0:
            return width

        label_id = element.get("data-fit-label")
        if not label_id:
            return None

        label = find_by_id(element.getroottree(), label_id)
        if label is None and lookup_root is not None:
            label = find_by_id(lookup_root, label_id)
        if label is None:
            logger.debug(f"Fit label #{label_id} not found; width unconstrained")
            return None

        label_text = get_text_content(label)
        if not label_text:
            return None
        return self.metrics.width(label_text, get_font_size(label, self.options.default_font_size))

    @staticmethod
    def _max_lines(element: etree._Element) -> Optional[int]:
        value = parse_length(element.get("data-fit-lines"), default=None)
        if value is None:
            return None
        lines = int(value)
        return lines if lines > 0 else None

    # ------------------------------------------------------------------
    # layout modes

    def wrap_lines(self, text: str, font_size: float, max_width: Optional[float] = None) -> List[str]:
        lines: List[str] = []
        for raw in split_explicit_lines(text):
            if max_width is not None:
                lines.extend(self.line_breaker.break_text(raw, max_width, font_size))
            else:
                lines.append(raw)
        return lines

    def wrap(
        self,
        element: etree._Element,
        text: str,
        max_width: Optional[float] = None,
        max_lines: Optional[int] = None,
    ) -> List[str]:
        """Render ``text`` as one ``<tspan>`` per visual line."""
        font_size = get_font_size(element, self.options.default_font_size)
        line_height = self.metrics.line_height(font_size)
        lines = self.wrap_lines(text, font_size, max_width)
        if max_lines is not None and len(lines) > max_lines:
            logger.debug(f"Truncating {len(lines)} lines to {max_lines} for #{element.get('id')}")
            lines = lines[:max_lines]

        set_text_content(element, "")
        element.text = None
        x = element.get("x")
        tag = svg_tag(element, "tspan")
        for index, line in enumerate(lines):
            tspan = etree.SubElement(element, tag)
            if x is not None:
                tspan.set("x", x)
            tspan.set("dy", "0" if index == 0 else format_number(line_height))
            tspan.text = line
        return lines

    def shrink(self, element: etree._Element, text: str, max_width: Optional[float] = None) -> float:
        """Reduce the font size so ``text`` fits; never enlarges. Returns the resulting size."""
        font_size = get_font_size(element, self.options.default_font_size)

        if max_width is not None:
            units = self.metrics.unit_width(text)
            if units <= 0:
                return font_size
            desired = max(self.options.min_font_size, max_width / units)
            new_size = min(font_size, desired)
            set_inline_font_size(element, new_size)
            return new_size

        if len(text) > COARSE_SHRINK_MIN_LENGTH and font_size > COARSE_SHRINK_FLOOR:
            new_size = max(COARSE_SHRINK_FLOOR, font_size * COARSE_SHRINK_RATIO)
            set_inline_font_size(element, new_size)
            return new_size

        return font_size

