"""Value formatters applied before text is placed (date, number, currency)."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Dict, Mapping, Optional

from ..models.bindings import FormatterDef

logger = logging.getLogger(__name__)

Formatter = Callable[[str], str]

DEFAULT_DATE_PATTERN = "YYYY年M月D日"
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DATE_TOKEN = re.compile(r"YYYY|MM|M|DD|D")


def _parse_date(value: str) -> Optional[datetime]:
    match = _ISO_DATE.match(value)
    if match:
        year, month, day = (int(g) for g in match.groups())
        try:
            return datetime(year, month, day)
        except ValueError:
            return None
    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _format_date(value: str, pattern: str) -> str:
    if not value:
        return ""
    parsed = _parse_date(value.strip())
    if parsed is None:
        return value

    tokens = {
        "YYYY": f"{parsed.year:04d}",
        "MM": f"{parsed.month:02d}",
        "M": str(parsed.month),
        "DD": f"{parsed.day:02d}",
        "D": str(parsed.day),
    }
    return _DATE_TOKEN.sub(lambda m: tokens[m.group(0)], pattern)


def _format_number(value: str) -> str:
    if not value:
        return ""
    try:
        number = float(value.replace(",", ""))
    except ValueError:
        return value
    if number.is_integer():
        return f"{int(number):,}"
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return text


def raw_formatter(value: str) -> str:
    return value


def date_formatter(value: str) -> str:
    return _format_date(value, DEFAULT_DATE_PATTERN)


def number_formatter(value: str) -> str:
    return _format_number(value)


def make_currency_formatter(symbol: str) -> Formatter:
    def currency_formatter(value: str) -> str:
        if not value or not _looks_numeric(value):
            return value or ""
        return f"{symbol}{_format_number(value)}"

    return currency_formatter


def _looks_numeric(value: str) -> bool:
    try:
        float(value.replace(",", ""))
        return True
    except ValueError:
        return False


yen_formatter = make_currency_formatter("¥")

BUILTIN_FORMATTERS: Dict[str, Formatter] = {
    "raw": raw_formatter,
    "date": date_formatter,
    "number": number_formatter,
    "currency": yen_formatter,
    "yen": yen_formatter,
}


class FormatterRegistry:
    """Named formatters: built-ins plus the presets a template declares.

    Lookups never fail; unknown names fall back to the raw formatter.
    """

    def __init__(self, definitions: Optional[Mapping[str, FormatterDef]] = None) -> None:
        self._formatters: Dict[str, Formatter] = {}
        if definitions:
            self.register_definitions(definitions)

    def register(self, name: str, formatter: Formatter) -> None:
        self._formatters[name] = formatter

    def register_definitions(self, definitions: Mapping[str, FormatterDef]) -> None:
        for name, definition in definitions.items():
            formatter = self._build(definition)
            if formatter is None:
                logger.warning(f"Ignoring formatter {name!r}: unsupported definition {definition!r}")
                continue
            self.register(name, formatter)

    def get(self, name: Optional[str]) -> Formatter:
        if not name or name == "raw":
            return raw_formatter
        if name in self._formatters:
            return self._formatters[name]
        return BUILTIN_FORMATTERS.get(name, raw_formatter)

    def format(self, value: str, name: Optional[str]) -> str:
        return self.get(name)(value)

    @staticmethod
    def _build(definition: FormatterDef) -> Optional[Formatter]:
        if definition.kind == "date":
            pattern = definition.pattern or DEFAULT_DATE_PATTERN
            return lambda value: _format_date(value, pattern)
        if definition.kind == "number":
            return number_formatter
        if definition.kind == "currency" and definition.currency:
            return make_currency_formatter(definition.currency)
        return None
