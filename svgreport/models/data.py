"""Data source models and per-render pagination records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Union

from .bindings import PageKind


Row = Dict[str, str]


@dataclass(slots=True)
class KvSource:
    """Key-value data source (e.g. the mandatory ``meta`` record)."""

    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str:
        return self.fields.get(key, "")


@dataclass(slots=True)
class TableSource:
    """Tabular data source: ordered headers plus ordered row records."""

    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: List[Mapping[str, str]]) -> "TableSource":
        normalized = [{str(k): "" if v is None else str(v) for k, v in row.items()} for row in rows]
        headers = list(normalized[0].keys()) if normalized else []
        return cls(headers=headers, rows=normalized)

    def first_value(self, key: str) -> str:
        if not self.rows:
            return ""
        return self.rows[0].get(key, "")


DataSource = Union[KvSource, TableSource]


@dataclass(slots=True)
class TableChunk:
    """Contiguous slice of a table source assigned to one page."""

    rows: List[Row]
    start_index: int
    end_index: int
    total_rows: int

    @classmethod
    def empty(cls, total_rows: int) -> "TableChunk":
        return cls(rows=[], start_index=0, end_index=-1, total_rows=total_rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(slots=True)
class PageInfo:
    page_number: int
    kind: PageKind
    table_chunks: Dict[str, TableChunk] = field(default_factory=dict)


@dataclass(slots=True)
class RenderedPage:
    page_number: int
    svg_string: str


@dataclass(slots=True)
class BindingOutcome:
    """Result of applying a single binding on a page."""

    page_number: int
    svg_id: str
    applied: bool
    message: Optional[str] = None


@dataclass(slots=True)
class RenderResult:
    job_id: str
    template_id: str
    template_version: str
    total_pages: int
    pages: List[RenderedPage] = field(default_factory=list)
    outcomes: List[BindingOutcome] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [
            f"page {o.page_number}: {o.message}"
            for o in self.outcomes
            if not o.applied and o.message
        ]
