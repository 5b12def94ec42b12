"""Tests for geometry and SVG transform helpers."""

import pytest

from svgreport.engine.geometry import (
    MM_TO_UNITS,
    AffineMatrix,
    Point,
    compose,
    parse_numbers,
    cumulative_transform,
    mm_to_units,
    parse_length,
    parse_transform,
    to_absolute,
)
from svgreport.utils.xml_utils import find_by_id, parse_svg


NESTED_SVG = """<svg xmlns="http://www.w3.org/2000/svg">
  <g transform="translate(100, 0)">
    <g transform="scale(2)">
      <text id="t" x="5" y="5">A</text>
    </g>
  </g>
</svg>"""


class TestParseTransform:
    """Test parsing of transform attributes."""

    def test_translate(self):
        assert parse_transform("translate(10, 20)").apply(1, 2) == Point(11, 22)

    def test_translate_single_value(self):
        assert parse_transform("translate(7)").as_tuple() == (1, 0, 0, 1, 7, 0)

    def test_scale_uniform_and_whitespace_separated_matrix(self):
        assert parse_transform("scale(2)").apply(3, 4) == Point(6, 8)
        assert parse_transform("matrix(1 0 0 1 5 5)").apply(0, 0) == Point(5, 5)

    def test_unsupported_functions_are_identity(self):
        assert parse_transform("rotate(45)") == AffineMatrix.identity()
        assert parse_transform("skewX(10) translate(3, 4)").apply(0, 0) == Point(3, 4)

    def test_empty(self):
        assert parse_transform(None) == AffineMatrix.identity()
        assert parse_transform("") == AffineMatrix.identity()

    def test_functions_compose_left_to_right(self):
        # scale applies to the point first, then translate
        matrix = parse_transform("translate(10, 0) scale(2)")
        assert matrix.apply(1, 1) == Point(12, 2)


class TestAffineMatrix:
    """Test matrix arithmetic."""

    def test_identity_is_neutral(self):
        m = AffineMatrix(2, 0, 0, 3, 4, 5)
        assert AffineMatrix.identity().multiply(m) == m
        assert m.multiply(AffineMatrix.identity()) == m

    def test_multiply_applies_right_operand_first(self):
        t = AffineMatrix.translate(1, 1)
        s = AffineMatrix.scale(3)
        assert t.multiply(s).apply(1, 1) == Point(4, 4)

    def test_compose(self):
        result = compose([AffineMatrix.translate(5, 0), AffineMatrix.translate(0, 5)])
        assert result.apply(0, 0) == Point(5, 5)


class TestCumulativeTransform:
    """Test ancestor chain composition."""

    def test_nested_groups(self):
        doc = parse_svg(NESTED_SVG)
        text = find_by_id(doc, "t")
        assert to_absolute(text, 5, 5) == Point(110, 10)

    def test_no_transforms(self):
        doc = parse_svg('<svg xmlns="http://www.w3.org/2000/svg"><text id="t" x="1" y="2"/></svg>')
        assert cumulative_transform(find_by_id(doc, "t")) == AffineMatrix.identity()


class TestUnits:
    """Test unit helpers."""

    def test_mm_to_units(self):
        assert MM_TO_UNITS == 3.7795
        assert mm_to_units(10) == pytest.approx(37.795)
        assert mm_to_units(None) == 0.0
        assert mm_to_units(2, factor=2.0) == 4.0

    def test_parse_length(self):
        assert parse_length("12.5px") == 12.5
        assert parse_length("210mm") == 210.0
        assert parse_length(None) == 0.0
        assert parse_length("auto", default=None) is None

    def test_parse_numbers(self):
        assert parse_numbers("0 -20") == [0.0, -20.0]
        assert parse_numbers(" 1.5, 2e1 ") == [1.5, 20.0]
        assert parse_numbers("") == []
