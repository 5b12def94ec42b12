"""Greedy line breaking for bound text values."""

from __future__ import annotations

import logging
import re
from typing import List

from .text_metrics import TextMetricsEngine

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")
_LINE_BREAK = re.compile(r"\r?\n")


def split_explicit_lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text)


class LineBreaker:
    """Simple greedy line breaker.

    Breaks at word boundaries; text without whitespace (CJK, long codes) and
    single words wider than the line are broken between characters.
    """

    def __init__(self, metrics_engine: TextMetricsEngine) -> None:
        self.metrics_engine = metrics_engine

    def break_text(self, text: str, max_width: float, font_size: float) -> List[str]:
        if not text:
            return [""]

        if not _WHITESPACE.search(text):
            return self._break_characters(text, max_width, font_size)

        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if self.metrics_engine.width(candidate, font_size) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = word
                if self.metrics_engine.width(word, font_size) <= max_width:
                    continue

            # Word alone does not fit
            pieces = self._break_characters(word, max_width, font_size)
            lines.extend(pieces[:-1])
            current = pieces[-1]

        if current:
            lines.append(current)

        return lines or [""]

    def _break_characters(self, text: str, max_width: float, font_size: float) -> List[str]:
        lines: List[str] = []
        current = ""
        for ch in text:
            candidate = current + ch
            # A line always takes at least one character
            if not current or self.metrics_engine.width(candidate, font_size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = ch
        if current:
            lines.append(current)
        return lines or [""]
