"""Tests for value formatters."""

import logging

import pytest

from svgreport.engine.formatter import (
    FormatterRegistry,
    date_formatter,
    number_formatter,
    raw_formatter,
    yen_formatter,
)
from svgreport.models import FormatterDef


class TestBuiltinFormatters:
    """Test the built-in formatters."""

    def test_raw(self):
        assert raw_formatter(" as is ") == " as is "

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-03-05", "2024年3月5日"),
            ("2024/12/31", "2024年12月31日"),
            ("not a date", "not a date"),
            ("", ""),
        ],
    )
    def test_date(self, value, expected):
        assert date_formatter(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1234567", "1,234,567"),
            ("1234567.5", "1,234,567.5"),
            ("1,000", "1,000"),
            ("0.125", "0.125"),
            ("abc", "abc"),
            ("", ""),
        ],
    )
    def test_number(self, value, expected):
        assert number_formatter(value) == expected

    def test_yen(self):
        assert yen_formatter("1500") == "¥1,500"
        assert yen_formatter("n/a") == "n/a"


class TestFormatterRegistry:
    """Test named formatter lookup."""

    def test_unknown_name_falls_back_to_raw(self):
        registry = FormatterRegistry()
        assert registry.format("1000", "no-such-formatter") == "1000"
        assert registry.format("1000", None) == "1000"

    def test_builtin_names(self):
        registry = FormatterRegistry()
        assert registry.format("1000", "number") == "1,000"
        assert registry.format("1000", "currency") == "¥1,000"

    def test_template_definitions(self):
        registry = FormatterRegistry(
            {
                "slash_date": FormatterDef(kind="date", pattern="YYYY/MM/DD"),
                "usd": FormatterDef(kind="currency", currency="$"),
                "plain_number": FormatterDef(kind="number"),
            }
        )
        assert registry.format("2024-03-05", "slash_date") == "2024/03/05"
        assert registry.format("42", "usd") == "$42"
        assert registry.format("4200", "plain_number") == "4,200"

    def test_definitions_override_builtins_per_registry(self):
        custom = FormatterRegistry({"date": FormatterDef(kind="date", pattern="D.M.YYYY")})
        assert custom.format("2024-03-05", "date") == "5.3.2024"
        assert FormatterRegistry().format("2024-03-05", "date") == "2024年3月5日"

    def test_unsupported_definition_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            registry = FormatterRegistry({"odd": FormatterDef(kind="roman")})
        assert registry.format("12", "odd") == "12"
        assert "odd" in caplog.text
