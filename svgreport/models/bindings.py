"""Template binding models: value bindings, cells, tables, pages and the template itself."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..exceptions import ConfigError


FIT_MODES = ("none", "shrink", "wrap", "clip")
ALIGN_MODES = ("left", "center", "right")
DEFAULT_PAGE_NUMBER_FORMAT = "{current}/{total}"


class PageKind(str, Enum):
    FIRST = "first"
    REPEAT = "repeat"


@dataclass(frozen=True, slots=True)
class StaticValue:
    """Literal text bound to an element."""

    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DataValue:
    """Lookup of ``key`` in the data source named ``source``."""

    source: str
    key: str

    def __post_init__(self):
        if not self.key:
            raise ValueError("DataValue.key must be a non-empty string")


ValueBinding = Union[StaticValue, DataValue]


def value_binding_from_dict(data: Mapping[str, Any]) -> ValueBinding:
    """Build a value binding from ``{"type": "static"|"data", ...}``."""
    kind = data.get("type", "data")
    if kind == "static":
        return StaticValue(text=data.get("text"))
    if kind == "data":
        source = data.get("source")
        key = data.get("key")
        if not source or not key:
            raise ConfigError(
                "Invalid data value binding",
                "template",
                f"source and key are required, got source={source!r} key={key!r}",
            )
        return DataValue(source=str(source), key=str(key))
    raise ConfigError("Unknown value binding type", "template", f"type={kind!r}")


@dataclass(slots=True)
class CellBinding:
    """Text element bound to a value, with optional layout hints."""

    svg_id: str
    value: ValueBinding
    fit: Optional[str] = None
    align: Optional[str] = None
    format: Optional[str] = None
    enabled: bool = True

    def __post_init__(self):
        if self.fit is not None and self.fit not in FIT_MODES:
            raise ConfigError("Invalid fit mode", "template", f"{self.svg_id}: fit={self.fit!r}")
        if self.align is not None and self.align not in ALIGN_MODES:
            raise ConfigError("Invalid align mode", "template", f"{self.svg_id}: align={self.align!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default_source: Optional[str] = None) -> "CellBinding":
        svg_id = data.get("svg_id")
        if not svg_id:
            raise ConfigError("Binding without svg_id", "template", repr(dict(data)))

        if isinstance(data.get("value"), Mapping):
            value = value_binding_from_dict(data["value"])
        else:
            # v0.1 shorthand: source/key on fields, column on table cells
            source = data.get("source") or default_source
            key = data.get("key") or data.get("column")
            if not source or not key:
                raise ConfigError(
                    "Binding has no value",
                    "template",
                    f"{svg_id}: expected 'value' or 'source' + 'key'/'column'",
                )
            value = DataValue(source=str(source), key=str(key))

        return cls(
            svg_id=str(svg_id),
            value=value,
            fit=data.get("fit"),
            align=data.get("align"),
            format=data.get("format"),
            enabled=data.get("enabled", True) is not False,
        )


# Non-repeating fields share the cell shape.
FieldBinding = CellBinding


@dataclass(slots=True)
class TableBinding:
    source: str
    row_group_id: str
    row_height_mm: float
    rows_per_page: int
    cells: List[CellBinding] = field(default_factory=list)
    header_cells: List[CellBinding] = field(default_factory=list)
    start_y_mm: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TableBinding":
        source = data.get("source")
        row_group_id = data.get("row_group_id")
        if not source:
            raise ConfigError("Table binding without source", "table")
        if not row_group_id:
            raise ConfigError("Missing row group id", "table", f"table source={source!r}")

        header = data.get("header") or {}
        start_y = data.get("start_y_mm")
        return cls(
            source=str(source),
            row_group_id=str(row_group_id),
            row_height_mm=float(data.get("row_height_mm", 0.0)),
            rows_per_page=int(data.get("rows_per_page", 0)),
            cells=[CellBinding.from_dict(c, default_source=source) for c in data.get("cells", [])],
            header_cells=[CellBinding.from_dict(c, default_source=source) for c in header.get("cells", [])],
            start_y_mm=float(start_y) if start_y is not None else None,
        )


@dataclass(slots=True)
class PageNumberConfig:
    """Page number target; ``format`` is ``None`` when the template gives none."""

    svg_id: str
    format: Optional[str] = None

    def render(self, current: int, total: int, default_format: str = DEFAULT_PAGE_NUMBER_FORMAT) -> str:
        fmt = self.format or default_format
        return fmt.replace("{current}", str(current)).replace("{total}", str(total))


@dataclass(slots=True)
class PageConfig:
    id: str
    svg: str
    kind: PageKind
    tables: List[TableBinding] = field(default_factory=list)
    fields: List[FieldBinding] = field(default_factory=list)
    page_number: Optional[PageNumberConfig] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageConfig":
        try:
            kind = PageKind(data.get("kind", "first"))
        except ValueError as exc:
            raise ConfigError("Invalid page kind", "template", str(exc)) from exc

        page_number = None
        pn = data.get("page_number")
        if pn and pn.get("svg_id"):
            page_number = PageNumberConfig(
                svg_id=str(pn["svg_id"]),
                format=pn.get("format") or None,
            )

        return cls(
            id=str(data.get("id", "")),
            svg=str(data.get("svg", "")),
            kind=kind,
            tables=[TableBinding.from_dict(t) for t in data.get("tables", [])],
            fields=[CellBinding.from_dict(f) for f in data.get("fields", [])],
            page_number=page_number,
        )


@dataclass(slots=True)
class FormatterDef:
    kind: Optional[str] = None  # "date", "number" or "currency"
    pattern: Optional[str] = None
    currency: Optional[str] = None


@dataclass(slots=True)
class TemplateConfig:
    template_id: str
    version: str
    pages: List[PageConfig]
    fields: List[FieldBinding] = field(default_factory=list)
    formatters: Dict[str, FormatterDef] = field(default_factory=dict)
    schema: str = "svgreport-template/v0.2"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateConfig":
        ref = data.get("template") or {}
        return cls(
            template_id=str(ref.get("id", "")),
            version=str(ref.get("version", "")),
            pages=[PageConfig.from_dict(p) for p in data.get("pages", [])],
            fields=[CellBinding.from_dict(f) for f in data.get("fields", [])],
            formatters={
                name: FormatterDef(
                    kind=d.get("kind"),
                    pattern=d.get("pattern"),
                    currency=d.get("currency"),
                )
                for name, d in (data.get("formatters") or {}).items()
            },
            schema=str(data.get("schema", "svgreport-template/v0.2")),
        )


@dataclass(slots=True)
class JobManifest:
    job_id: str
    template_id: str
    template_version: str
    locale: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobManifest":
        ref = data.get("template") or {}
        return cls(
            job_id=str(data.get("job_id", "")),
            template_id=str(ref.get("id", "")),
            template_version=str(ref.get("version", "")),
            locale=data.get("locale"),
        )
