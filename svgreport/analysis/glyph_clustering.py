"""
Glyph clustering for SVGs without ``<text>`` nodes.

PDF-to-SVG converters usually draw text as one ``<use href="#glyph-N">`` per
character. This module groups those positioned glyphs into lines, then into
horizontal runs, and turns every run into a synthetic text candidate with an
estimated font size and bounding box. Glyph content is not recovered; the
candidates only locate where text sits on the page.

Three profiles tune the run splitting:

- ``split``: strict thresholds, long runs are refined at large internal gaps
- ``merge``: loose thresholds, favours whole phrases
- ``balanced``: strict first pass, relaxed only when a line looks over-split
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from statistics import median
from typing import Iterable, List, Optional, Sequence

from ..models.text_element import BBox, TextElementInfo

logger = logging.getLogger(__name__)

LINE_Y_TOLERANCE = 1.5
ID_BACKED_RATIO = 0.7
DEFAULT_STEP = 6.0
MIN_GAP = 0.1

MIN_FONT_SIZE = 8.0
MAX_FONT_SIZE = 24.0
MIN_BOX_HEIGHT = 6.0
LINE_HEIGHT_RATIO = 1.2

RUN_FONT_RATIO = 1.8
ID_BACKED_FONT_RATIO = 1.6
ID_BACKED_MIN_WIDTH = 4.5
ID_BACKED_MAX_WIDTH = 24.0
ID_BACKED_STEP_RATIO = 0.95

OVER_SPLIT_MIN_RUNS = 3
OVER_SPLIT_SINGLE_RATIO = 0.6
SHORT_RUN_AVERAGE = 2.35


@dataclass(slots=True)
class GlyphUse:
    """A glyph reference at its absolute page position."""

    x: float
    y: float
    dom_index: int
    id: Optional[str] = None
    parent_group: Optional[str] = None


@dataclass(slots=True)
class GlyphLine:
    y: float
    glyphs: List[GlyphUse]


def clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def compute_typical_step(values: Iterable[float]) -> float:
    """Median of the smaller half of the positive ``values`` (6 when none)."""
    normalized = sorted(v for v in values if v > 0 and v != float("inf"))
    if not normalized:
        return DEFAULT_STEP
    sample_count = max(1, (len(normalized) + 1) // 2)
    return float(median(normalized[:sample_count]))


def positive_gaps(glyphs: Sequence[GlyphUse]) -> List[float]:
    gaps = []
    for previous, current in zip(glyphs, glyphs[1:]):
        gap = current.x - previous.x
        if gap > MIN_GAP:
            gaps.append(gap)
    return gaps


def _reading_order_key(glyph: GlyphUse):
    return (glyph.y, glyph.x)


def group_lines(glyphs: Iterable[GlyphUse], tolerance: float = LINE_Y_TOLERANCE) -> List[GlyphLine]:
    """Group glyphs into text lines by y, tracking each line's running mean y.

    Glyphs within each returned line are ordered left to right.
    """
    lines: List[GlyphLine] = []
    for glyph in sorted(glyphs, key=_reading_order_key):
        last = lines[-1] if lines else None
        if last is None or abs(glyph.y - last.y) > tolerance:
            lines.append(GlyphLine(y=glyph.y, glyphs=[glyph]))
            continue
        last.glyphs.append(glyph)
        count = len(last.glyphs)
        last.y = (last.y * (count - 1) + glyph.y) / count

    for line in lines:
        line.glyphs.sort(key=lambda g: g.x)
    return lines


def split_glyph_runs(glyphs: Sequence[GlyphUse], split_gap: float) -> List[List[GlyphUse]]:
    runs: List[List[GlyphUse]] = []
    current: List[GlyphUse] = []
    for glyph in glyphs:
        if current and glyph.x - current[-1].x > split_gap:
            runs.append(current)
            current = []
        current.append(glyph)
    if current:
        runs.append(current)
    return runs


def split_run_by_large_gaps(run: List[GlyphUse], typical_step: float) -> List[List[GlyphUse]]:
    """Split a run of three or more glyphs where a gap is large relative to the run's own pitch."""
    if len(run) < 3:
        return [run]
    gaps = positive_gaps(run)
    if not gaps:
        return [run]

    base_gap = compute_typical_step(gaps)
    threshold = max(typical_step * 1.15, base_gap * 1.9, base_gap + 1.5)
    return split_glyph_runs(run, threshold) or [run]


def merge_nearby_runs(runs: List[List[GlyphUse]], merge_gap: float, typical_step: float) -> List[List[GlyphUse]]:
    """Re-join adjacent runs separated by at most ``merge_gap``.

    Two multi-glyph runs only join under the tighter of ``merge_gap`` and
    ``max(step*1.45, step+2)`` so real column gaps survive.
    """
    if len(runs) <= 1:
        return runs

    strict_gap = max(typical_step * 1.45, typical_step + 2)
    merged: List[List[GlyphUse]] = []
    current = list(runs[0])
    for following in runs[1:]:
        if not following:
            continue
        gap = following[0].x - current[-1].x
        both_multi = len(current) >= 2 and len(following) >= 2
        allowed = min(merge_gap, strict_gap) if both_multi else merge_gap
        if gap <= allowed:
            current.extend(following)
            continue
        merged.append(current)
        current = list(following)
    if current:
        merged.append(current)
    return merged


def split_threshold(profile: str, step: float) -> float:
    if profile == "split":
        return max(6.0, step * 1.15, step + 1)
    if profile == "merge":
        return max(12.0, step * 1.9, step + 5)
    return max(6.8, step * 1.22, step + 1.2)


def cluster_line(glyphs: Sequence[GlyphUse], profile: str = "balanced") -> List[List[GlyphUse]]:
    """Split one line's glyphs (sorted by x) into runs according to ``profile``."""
    if not glyphs:
        return []

    step = compute_typical_step(positive_gaps(glyphs))
    base_gap = split_threshold(profile, step)
    runs = split_glyph_runs(glyphs, base_gap)

    if profile == "split":
        runs = [piece for run in runs for piece in split_run_by_large_gaps(run, step)]

    single_runs = sum(1 for run in runs if len(run) == 1)
    over_split = len(runs) >= OVER_SPLIT_MIN_RUNS and single_runs / len(runs) >= OVER_SPLIT_SINGLE_RATIO
    if over_split and profile != "split":
        relaxed_gap = max(12.0, step * 1.8, step + 5)
        if relaxed_gap > base_gap:
            relaxed = split_glyph_runs(glyphs, relaxed_gap)
            if len(relaxed) < len(runs):
                runs = relaxed

    average_run = len(glyphs) / len(runs) if runs else len(glyphs)
    if profile != "split" and len(runs) >= OVER_SPLIT_MIN_RUNS and (over_split or average_run <= SHORT_RUN_AVERAGE):
        merge_gap = max(14.2, step * 2.0, step + 6.2)
        merged = merge_nearby_runs(runs, merge_gap, step)
        if len(merged) < len(runs):
            runs = merged

    return runs


def fallback_suggested_id(x: float, y: float) -> str:
    return f"text_{round(x)}_{round(y)}"


def _synthetic_element(glyph: GlyphUse, font_size: float, width: float) -> TextElementInfo:
    return TextElementInfo(
        id=glyph.id,
        content="",
        x=glyph.x,
        y=glyph.y,
        dom_index=glyph.dom_index,
        suggested_id=fallback_suggested_id(glyph.x, glyph.y),
        text_anchor="start",
        font_size=font_size,
        font_family=None,
        is_synthetic_from_glyphs=True,
        parent_group=glyph.parent_group,
        bbox=BBox(
            x=glyph.x,
            y=glyph.y - font_size,
            w=width,
            h=max(MIN_BOX_HEIGHT, font_size * LINE_HEIGHT_RATIO),
        ),
    )


def run_to_element(run: Sequence[GlyphUse], line_step: float) -> TextElementInfo:
    first, last = run[0], run[-1]
    gaps = positive_gaps(run)
    run_step = compute_typical_step(gaps if gaps else [line_step])
    font_size = clamp(run_step * RUN_FONT_RATIO, MIN_FONT_SIZE, MAX_FONT_SIZE)
    width = max(run_step, (last.x - first.x) + run_step)
    return _synthetic_element(first, font_size, width)


def is_id_backed(glyphs: Sequence[GlyphUse]) -> bool:
    if not glyphs:
        return False
    with_id = sum(1 for glyph in glyphs if glyph.id)
    return with_id / len(glyphs) >= ID_BACKED_RATIO


def id_backed_elements(glyphs: Iterable[GlyphUse]) -> List[TextElementInfo]:
    """One candidate per glyph, sized from its distance to its neighbours.

    Identifier-backed glyphs are never merged; their ids are what a template
    binds to.
    """
    elements: List[TextElementInfo] = []
    for line in group_lines(glyphs):
        row = line.glyphs
        line_step = compute_typical_step(positive_gaps(row))
        for index, glyph in enumerate(row):
            prev_gap = glyph.x - row[index - 1].x if index > 0 else line_step
            next_gap = row[index + 1].x - glyph.x if index < len(row) - 1 else line_step
            local_step = compute_typical_step([prev_gap, next_gap, line_step])
            font_size = clamp(local_step * ID_BACKED_FONT_RATIO, MIN_FONT_SIZE, MAX_FONT_SIZE)
            width = clamp(
                min(prev_gap, next_gap, line_step * ID_BACKED_STEP_RATIO),
                ID_BACKED_MIN_WIDTH,
                ID_BACKED_MAX_WIDTH,
            )
            elements.append(_synthetic_element(glyph, font_size, width))
    return elements


def cluster_glyphs(glyphs: Sequence[GlyphUse], profile: str = "balanced") -> List[TextElementInfo]:
    """Turn grouped glyph runs into synthetic text candidates."""
    elements: List[TextElementInfo] = []
    for line in group_lines(glyphs):
        line_step = compute_typical_step(positive_gaps(line.glyphs))
        runs = cluster_line(line.glyphs, profile)
        logger.debug(f"Glyph line y={line.y:.1f}: {len(line.glyphs)} glyph(s) -> {len(runs)} run(s)")
        elements.extend(run_to_element(run, line_step) for run in runs)
    return elements
