"""Tests for table row pagination."""

import pytest

from svgreport.engine.paginator import (
    build_page_plan,
    calculate_total_pages,
    chunk_table_rows,
    get_rows_per_page,
    page_config_for,
    validate_table_sources,
)
from svgreport.exceptions import ConfigError, DataError
from svgreport.models import PageConfig, PageKind, TableBinding


def make_rows(count, prefix="r"):
    return [{"name": f"{prefix}{i}"} for i in range(count)]


def make_page(kind, *tables, page_id=None):
    return PageConfig(
        id=page_id or kind.value,
        svg=f"{kind.value}.svg",
        kind=kind,
        tables=list(tables),
    )


def make_table(source, rows_per_page):
    return TableBinding(source=source, row_group_id=f"{source}_row", row_height_mm=5, rows_per_page=rows_per_page)


class TestChunkTableRows:
    """Test splitting rows into page chunks."""

    def test_partition(self):
        rows = make_rows(5)
        chunks = chunk_table_rows(rows, 2)

        assert [len(c) for c in chunks] == [2, 2, 1]
        assert [(c.start_index, c.end_index) for c in chunks] == [(0, 1), (2, 3), (4, 4)]
        assert all(c.total_rows == 5 for c in chunks)
        # Concatenation gives back the source in order
        assert [row for c in chunks for row in c.rows] == rows

    def test_exact_multiple(self):
        chunks = chunk_table_rows(make_rows(4), 2)
        assert [len(c) for c in chunks] == [2, 2]

    def test_empty_rows(self):
        assert chunk_table_rows([], 3) == []

    @pytest.mark.parametrize("rows_per_page", [0, -1])
    def test_rejects_non_positive(self, rows_per_page):
        with pytest.raises(ConfigError) as excinfo:
            chunk_table_rows(make_rows(3), rows_per_page)
        assert excinfo.value.context == "table"


class TestCalculateTotalPages:
    """Test total page computation."""

    def test_at_least_one_page(self):
        first = make_page(PageKind.FIRST, make_table("items", 10))
        assert calculate_total_pages({}, first) == 1
        assert calculate_total_pages({"items": []}, first) == 1

    def test_max_over_tables(self):
        first = make_page(PageKind.FIRST, make_table("items", 2), make_table("notes", 10))
        data = {"items": make_rows(5), "notes": make_rows(3)}
        assert calculate_total_pages(data, first) == 3

    def test_no_tables(self):
        assert calculate_total_pages({"items": make_rows(50)}, make_page(PageKind.FIRST)) == 1

    def test_invalid_rows_per_page(self):
        first = make_page(PageKind.FIRST, make_table("items", 0))
        with pytest.raises(ConfigError):
            calculate_total_pages({"items": make_rows(2)}, first)


class TestBuildPagePlan:
    """Test the per-page plan."""

    def test_plan_length_and_kinds_with_repeat(self):
        table = make_table("items", 2)
        first = make_page(PageKind.FIRST, table)
        repeat = make_page(PageKind.REPEAT, table)
        data = {"items": make_rows(5)}

        plan = build_page_plan(data, first, repeat, 3)

        assert [p.page_number for p in plan] == [1, 2, 3]
        assert [p.kind for p in plan] == [PageKind.FIRST, PageKind.REPEAT, PageKind.REPEAT]
        assert [p.table_chunks["items"].start_index for p in plan] == [0, 2, 4]

    def test_first_config_reused_without_repeat(self):
        first = make_page(PageKind.FIRST, make_table("items", 2))
        plan = build_page_plan({"items": make_rows(3)}, first, None, 2)

        assert [p.kind for p in plan] == [PageKind.FIRST, PageKind.FIRST]
        assert len(plan[1].table_chunks["items"]) == 1

    def test_exhausted_table_gets_empty_chunk(self):
        first = make_page(PageKind.FIRST, make_table("items", 2), make_table("notes", 2))
        data = {"items": make_rows(5), "notes": make_rows(1)}

        plan = build_page_plan(data, first, None, 3)
        empty = plan[1].table_chunks["notes"]

        assert empty.rows == []
        assert (empty.start_index, empty.end_index) == (0, -1)
        assert empty.total_rows == 1

    def test_first_only_tables_have_no_chunk_later(self):
        first = make_page(PageKind.FIRST, make_table("items", 2))
        repeat = make_page(PageKind.REPEAT)
        plan = build_page_plan({"items": make_rows(4)}, first, repeat, 2)

        assert "items" in plan[0].table_chunks
        assert plan[1].table_chunks == {}

    def test_repeat_only_table_gets_empty_chunks(self):
        first = make_page(PageKind.FIRST, make_table("items", 2))
        repeat = make_page(PageKind.REPEAT, make_table("items", 2), make_table("extra", 1))
        data = {"items": make_rows(6), "extra": make_rows(3)}

        plan = build_page_plan(data, first, repeat, 3)

        assert "extra" not in plan[0].table_chunks
        for info in plan[1:]:
            chunk = info.table_chunks["extra"]
            assert chunk.rows == []
            assert (chunk.start_index, chunk.end_index, chunk.total_rows) == (0, -1, 3)
        assert plan[1].table_chunks["items"].start_index == 2


class TestPageHelpers:
    """Test config lookup helpers."""

    def test_page_config_for(self):
        first = make_page(PageKind.FIRST)
        repeat = make_page(PageKind.REPEAT)
        assert page_config_for(1, first, repeat) is first
        assert page_config_for(2, first, repeat) is repeat
        assert page_config_for(2, first, None) is first

    def test_get_rows_per_page(self):
        first = make_page(PageKind.FIRST, make_table("items", 10))
        repeat = make_page(PageKind.REPEAT, make_table("items", 25))
        assert get_rows_per_page("items", PageKind.FIRST, first, repeat) == 10
        assert get_rows_per_page("items", PageKind.REPEAT, first, repeat) == 25
        assert get_rows_per_page("items", PageKind.REPEAT, first, None) == 10
        assert get_rows_per_page("unknown", PageKind.FIRST, first, repeat) == 0

    def test_validate_table_sources(self):
        pages = [make_page(PageKind.FIRST, make_table("items", 2), make_table("notes", 2))]
        validate_table_sources(pages, ["items", "notes", "meta"])

        with pytest.raises(DataError) as excinfo:
            validate_table_sources(pages, ["items"])
        assert "notes" in str(excinfo.value)
