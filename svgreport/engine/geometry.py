"""Geometry primitives and SVG transform helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


MM_TO_UNITS = 3.7795  # SVG user units per millimetre at 96 dpi

_TRANSFORM_FN = re.compile(r"([a-zA-Z]+)\s*\(([^)]*)\)")
_NUMBER_SEP = re.compile(r"[,\s]+")


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class AffineMatrix:
    """2D affine transform ``[a c e; b d f; 0 0 1]`` in SVG order."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "AffineMatrix":
        return cls()

    @classmethod
    def translate(cls, tx: float, ty: float = 0.0) -> "AffineMatrix":
        return cls(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def scale(cls, sx: float, sy: Optional[float] = None) -> "AffineMatrix":
        return cls(sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0)

    def multiply(self, other: "AffineMatrix") -> "AffineMatrix":
        """Return ``self × other`` (``other`` applied first)."""
        return AffineMatrix(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.e + self.c * other.f + self.e,
            self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, x: float, y: float) -> Point:
        return Point(
            self.a * x + self.c * y + self.e,
            self.b * x + self.d * y + self.f,
        )

    def as_tuple(self) -> tuple:
        return (self.a, self.b, self.c, self.d, self.e, self.f)


def parse_numbers(raw: str) -> List[float]:
    """Numbers of a transform argument list, comma or whitespace separated."""
    values: List[float] = []
    for part in _NUMBER_SEP.split(raw.strip()):
        if not part:
            continue
        try:
            values.append(float(part))
        except ValueError:
            continue
    return values


def parse_transform(value: Optional[str]) -> AffineMatrix:
    """Parse an SVG ``transform`` attribute.

    Only ``matrix``, ``translate`` and ``scale`` are recognised; any other
    function (``rotate``, ``skewX`` ...) contributes identity. Functions are
    composed left to right, as SVG specifies.
    """
    matrix = AffineMatrix.identity()
    if not value:
        return matrix

    for match in _TRANSFORM_FN.finditer(value):
        name = match.group(1).lower()
        values = parse_numbers(match.group(2))

        if name == "matrix" and len(values) >= 6:
            local = AffineMatrix(*values[:6])
        elif name == "translate" and values:
            local = AffineMatrix.translate(values[0], values[1] if len(values) > 1 else 0.0)
        elif name == "scale" and values:
            local = AffineMatrix.scale(values[0], values[1] if len(values) > 1 else None)
        else:
            continue

        matrix = matrix.multiply(local)

    return matrix


def ancestor_chain(element: Any) -> List[Any]:
    """Return ``element`` and its ancestors ordered outermost first."""
    chain: List[Any] = []
    current = element
    while current is not None:
        chain.append(current)
        current = current.getparent()
    chain.reverse()
    return chain


def compose(matrices: Iterable[AffineMatrix]) -> AffineMatrix:
    result = AffineMatrix.identity()
    for matrix in matrices:
        result = result.multiply(matrix)
    return result


def cumulative_transform(element: Any) -> AffineMatrix:
    """Compose every ``transform`` from the document root down to ``element``."""
    return compose(
        parse_transform(node.get("transform"))
        for node in ancestor_chain(element)
        if node.get("transform")
    )


def to_absolute(element: Any, x: float, y: float) -> Point:
    return cumulative_transform(element).apply(x, y)


def mm_to_units(value: Optional[float], factor: float = MM_TO_UNITS) -> float:
    if value is None:
        return 0.0
    return float(value) * factor


def parse_length(value: Optional[str], default: Optional[float] = 0.0) -> Optional[float]:
    """Leading float of an SVG length (``"12.5px"`` → 12.5)."""
    if value is None:
        return default
    match = re.match(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)", str(value))
    if not match:
        return default
    return float(match.group(1))
