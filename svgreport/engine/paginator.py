"""
Table row pagination.

Pure functions that split table sources into per-page chunks and decide
which page configuration (first / repeat) each output page uses.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..exceptions import ConfigError, DataError
from ..models.bindings import PageConfig, PageKind
from ..models.data import PageInfo, Row, TableChunk

logger = logging.getLogger(__name__)


def _require_positive(rows_per_page: int, source: Optional[str] = None) -> None:
    if rows_per_page <= 0:
        where = f" for table {source!r}" if source else ""
        raise ConfigError(
            "Invalid rows_per_page",
            "table",
            f"rows_per_page must be > 0{where}, got {rows_per_page}",
        )


def chunk_table_rows(rows: Sequence[Row], rows_per_page: int) -> List[TableChunk]:
    """Split ``rows`` into contiguous chunks of ``rows_per_page``.

    Every chunk but the last holds exactly ``rows_per_page`` rows; indices are
    absolute and 0-based; ``total_rows`` is the length of the whole source.
    """
    _require_positive(rows_per_page)

    total = len(rows)
    chunks: List[TableChunk] = []
    for start in range(0, total, rows_per_page):
        end = min(start + rows_per_page, total)
        chunks.append(
            TableChunk(
                rows=list(rows[start:end]),
                start_index=start,
                end_index=end - 1,
                total_rows=total,
            )
        )
    return chunks


def calculate_total_pages(table_data: Mapping[str, Sequence[Row]], first_page: PageConfig) -> int:
    """Number of pages needed for the tables bound on the first page (at least 1)."""
    total = 1
    for table in first_page.tables:
        _require_positive(table.rows_per_page, table.source)
        rows = table_data.get(table.source) or []
        total = max(total, math.ceil(len(rows) / table.rows_per_page))
    return total


def page_config_for(page_number: int, first_page: PageConfig, repeat_page: Optional[PageConfig]) -> PageConfig:
    if page_number == 1:
        return first_page
    return repeat_page if repeat_page is not None else first_page


def build_page_plan(
    table_data: Mapping[str, Sequence[Row]],
    first_page: PageConfig,
    repeat_page: Optional[PageConfig],
    total_pages: int,
) -> List[PageInfo]:
    """Assign a chunk of every active table to each page ``1..total_pages``.

    Only tables of the first page are chunked. Tables bound only on the first
    page get no chunk on later pages; a table bound only on the repeat page,
    or whose rows ran out, receives an empty chunk carrying its real
    ``total_rows``.
    """
    chunks_by_source: Dict[str, List[TableChunk]] = {}
    for table in first_page.tables:
        rows = table_data.get(table.source) or []
        chunks_by_source[table.source] = chunk_table_rows(rows, table.rows_per_page)

    pages: List[PageInfo] = []
    for page_number in range(1, total_pages + 1):
        config = page_config_for(page_number, first_page, repeat_page)
        kind = PageKind.FIRST if page_number == 1 else (
            PageKind.REPEAT if repeat_page is not None else PageKind.FIRST
        )
        info = PageInfo(page_number=page_number, kind=kind)

        for table in config.tables:
            rows = table_data.get(table.source) or []
            # only first-page tables are chunked; others always get an empty chunk
            chunks = chunks_by_source.get(table.source, [])
            index = page_number - 1
            if index < len(chunks):
                info.table_chunks[table.source] = chunks[index]
            else:
                info.table_chunks[table.source] = TableChunk.empty(total_rows=len(rows))

        pages.append(info)

    logger.debug(f"Built page plan: {total_pages} page(s), repeat config={'yes' if repeat_page else 'no'}")
    return pages


def get_rows_per_page(
    table_source: str,
    page_kind: PageKind,
    first_page: PageConfig,
    repeat_page: Optional[PageConfig],
) -> int:
    config = first_page if page_kind == PageKind.FIRST else (repeat_page or first_page)
    for table in config.tables:
        if table.source == table_source:
            return table.rows_per_page
    return 0


def validate_table_sources(page_configs: Iterable[PageConfig], available_sources: Iterable[str]) -> None:
    """Raise ``DataError`` when a bound table source has no data."""
    available = set(available_sources)
    required = []
    for page in page_configs:
        for table in page.tables:
            if table.source not in required:
                required.append(table.source)

    missing = [name for name in required if name not in available]
    if missing:
        raise DataError(
            f"Missing table data sources: {', '.join(missing)}",
            "template",
            f"Available sources: {', '.join(sorted(available))}",
        )
