"""
TextMetricsEngine - heuristic text width and height estimation.

No font files are consulted: width is the sum of per-character weights
multiplied by the font size. The weights approximate a proportional
Latin font next to full-width CJK glyphs and are good enough to decide
shrink and wrap, not to typeset.
"""

from __future__ import annotations

from typing import Callable, Dict, Sequence, Tuple


# (predicate, weight) pairs checked in order; the first match wins.
CharClass = Tuple[Callable[[str], bool], float]


def _is_wide(ch: str) -> bool:
    code = ord(ch)
    return (
        0x3000 <= code <= 0x9FFF      # CJK punctuation, kana, unified ideographs
        or 0xAC00 <= code <= 0xD7AF   # Hangul syllables
        or 0xF900 <= code <= 0xFAFF   # CJK compatibility ideographs
        or 0xFF01 <= code <= 0xFF60   # full-width ASCII variants
        or 0xFFE0 <= code <= 0xFFE6   # full-width signs
    )


def _is_upper_or_digit(ch: str) -> bool:
    return ("A" <= ch <= "Z") or ("0" <= ch <= "9")


FIT_WEIGHTS: Sequence[CharClass] = (
    (_is_wide, 1.0),
    (_is_upper_or_digit, 0.75),
)
DEFAULT_WEIGHT = 0.6
DEFAULT_LINE_SPACING = 1.2


def char_weight(ch: str, weights: Sequence[CharClass] = FIT_WEIGHTS, default: float = DEFAULT_WEIGHT) -> float:
    for predicate, weight in weights:
        if predicate(ch):
            return weight
    return default


def estimate_text_width(text: str, font_size: float = 1.0) -> float:
    """Estimated advance width of ``text`` at ``font_size``; 0 for empty text."""
    if not text:
        return 0.0
    return sum(char_weight(ch) for ch in text) * font_size


class TextMetricsEngine:
    """Measures single lines with the weight table; widths are cached per (text, size)."""

    def __init__(self, line_spacing: float = DEFAULT_LINE_SPACING) -> None:
        self.line_spacing = line_spacing
        self._cache: Dict[Tuple[str, float], float] = {}

    def width(self, text: str, font_size: float) -> float:
        key = (text, font_size)
        width = self._cache.get(key)
        if width is None:
            width = estimate_text_width(text, font_size)
            self._cache[key] = width
        return width

    def unit_width(self, text: str) -> float:
        """Width of ``text`` at font size 1."""
        return self.width(text, 1.0)

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_spacing
