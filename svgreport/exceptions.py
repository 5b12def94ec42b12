"""Custom exceptions for svgreport."""

from typing import Optional


class SVGReportError(Exception):
    """Base exception for svgreport errors.

    Every error carries a context tag naming the subsystem that raised it
    (``"table"``, ``"svg"``, ``"template"``, ``"inputs"`` ...) and an optional
    detail string.
    """

    def __init__(self, message: str, context: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.context = context
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigError(SVGReportError):
    """Fatal template misconfiguration (bad rows_per_page, missing row template, missing page SVG)."""

    pass


class DataError(SVGReportError):
    """Fatal input data problem (missing or malformed mandatory source)."""

    pass


class SvgParseError(SVGReportError):
    """Raised when an SVG document cannot be parsed."""

    pass


class BindingWarning(SVGReportError):
    """Recoverable: a bound element id is absent from a page document."""

    def __init__(self, message: str, svg_id: Optional[str] = None,
                 context: Optional[str] = "binding", details: Optional[str] = None):
        super().__init__(message, context, details)
        self.svg_id = svg_id


class ExtractionWarning(SVGReportError):
    """Informational finding produced while analysing SVG text."""

    pass
