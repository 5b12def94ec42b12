"""Tests for the text fit and layout engine."""

import pytest

from svgreport.config import RenderOptions
from svgreport.engine.formatter import FormatterRegistry
from svgreport.engine.line_breaker import LineBreaker
from svgreport.engine.text_fit import TextFitEngine
from svgreport.engine.text_metrics import TextMetricsEngine, char_weight, estimate_text_width
from svgreport.exceptions import BindingWarning
from svgreport.models import CellBinding, FormatterDef, StaticValue
from svgreport.utils.xml_utils import find_by_id, get_text_content, parse_svg


def make_doc(attrs='font-size="12"', extra=""):
    return parse_svg(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        f'<text id="t" x="10" y="20" {attrs}>old</text>{extra}'
        "</svg>"
    )


def binding(fit=None, align=None, fmt=None):
    return CellBinding(svg_id="t", value=StaticValue("unused"), fit=fit, align=align, format=fmt)


def tspans(element):
    return [child for child in element if child.tag.endswith("tspan")]


@pytest.fixture
def engine():
    return TextFitEngine()


class TestTextMetrics:
    """Test width estimation."""

    def test_char_weights(self):
        assert char_weight("漢") == 1.0
        assert char_weight("Ａ") == 1.0
        assert char_weight("A") == 0.75
        assert char_weight("7") == 0.75
        assert char_weight("a") == 0.6

    def test_estimate_width(self):
        assert estimate_text_width("", 12) == 0.0
        assert estimate_text_width("Ab", 10) == pytest.approx(13.5)

    def test_metrics_engine(self):
        metrics = TextMetricsEngine(line_spacing=1.5)
        assert metrics.width("Ab", 10) == pytest.approx(13.5)
        assert metrics.unit_width("Ab") == pytest.approx(1.35)
        assert metrics.line_height(10) == 15.0

    def test_line_breaker_words_and_characters(self):
        breaker = LineBreaker(TextMetricsEngine())
        # 6 units per latin lower-case char at size 10
        assert breaker.break_text("aaa bbb", 40, 10) == ["aaa", "bbb"]
        assert breaker.break_text("漢字漢字", 25, 10) == ["漢字", "漢字"]
        assert breaker.break_text("", 40, 10) == [""]


class TestPlainApply:
    """Test literal placement and alignment."""

    def test_sets_text(self, engine):
        doc = make_doc()
        element = engine.apply(doc, binding(), "Hello")
        assert element.text == "Hello"
        assert element.get("font-size") == "12"

    @pytest.mark.parametrize("align,anchor", [("left", "start"), ("center", "middle"), ("right", "end")])
    def test_alignment(self, engine, align, anchor):
        doc = make_doc()
        element = engine.apply(doc, binding(align=align), "x")
        assert element.get("text-anchor") == anchor

    def test_formatter_runs_first(self, engine):
        element = engine.apply(make_doc(), binding(fmt="date"), "2024-03-05")
        assert element.text == "2024年3月5日"

    def test_custom_formatter_registry(self):
        formatters = FormatterRegistry({"usd": FormatterDef(kind="currency", currency="$")})
        engine = TextFitEngine(formatters=formatters)
        element = engine.apply(make_doc(), binding(fmt="usd"), "1200")
        assert element.text == "$1,200"

    def test_missing_target(self, engine):
        doc = make_doc()
        missing = CellBinding(svg_id="nope", value=StaticValue("x"))
        with pytest.raises(BindingWarning) as excinfo:
            engine.apply(doc, missing, "x")
        assert excinfo.value.svg_id == "nope"


class TestShrink:
    """Test shrink-to-fit."""

    def test_shrinks_to_max_width(self, engine):
        doc = make_doc('font-size="12" data-fit-width="60"')
        # 10 upper-case chars -> 7.5 units at size 1
        element = engine.apply(doc, binding(fit="shrink"), "ABCDEFGHIJ")
        assert element.get("font-size") == "8"
        assert "font-size:8px" in element.get("style")

    def test_never_below_minimum(self, engine):
        doc = make_doc('font-size="12" data-fit-width="10"')
        element = engine.apply(doc, binding(fit="shrink"), "ABCDEFGHIJ")
        assert element.get("font-size") == "4"

    def test_never_enlarges(self, engine):
        doc = make_doc('font-size="12" data-fit-width="1000"')
        element = engine.apply(doc, binding(fit="shrink"), "ab")
        assert float(element.get("font-size")) <= 12

    def test_width_hint_alone_triggers_shrink(self, engine):
        doc = make_doc('font-size="12" data-fit-width="60"')
        element = engine.apply(doc, binding(), "ABCDEFGHIJ")
        assert element.get("font-size") == "8"

    def test_coarse_shrink_without_width(self, engine):
        doc = make_doc('style="font-size:12px"')
        element = engine.apply(doc, binding(fit="shrink"), "x" * 25)
        assert element.get("font-size") == "9.6"
        assert element.get("style") == "font-size:9.6px"

    def test_coarse_shrink_floor(self, engine):
        doc = make_doc('font-size="9"')
        element = engine.apply(doc, binding(fit="shrink"), "x" * 25)
        assert element.get("font-size") == "8"

    def test_short_text_untouched(self, engine):
        doc = make_doc('font-size="12"')
        element = engine.apply(doc, binding(fit="shrink"), "short")
        assert element.get("font-size") == "12"
        assert element.get("style") is None

    def test_fit_label_width(self, engine):
        label = '<text id="lbl" font-size="10">WWWWW</text>'
        doc = make_doc('font-size="12" data-fit-label="lbl"', extra=label)
        # label: 5 * 0.75 * 10 = 37.5; value: 7.5 units -> size 5
        element = engine.apply(doc, binding(), "ABCDEFGHIJ")
        assert element.get("font-size") == "5"

    def test_missing_fit_label_is_ignored(self, engine):
        doc = make_doc('font-size="12" data-fit-label="absent"')
        element = engine.apply(doc, binding(), "ABCDEFGHIJ")
        assert element.get("font-size") == "12"

    def test_custom_minimum(self):
        engine = TextFitEngine(options=RenderOptions(min_font_size=6.0))
        doc = make_doc('font-size="12" data-fit-width="10"')
        element = engine.apply(doc, binding(fit="shrink"), "ABCDEFGHIJ")
        assert element.get("font-size") == "6"


class TestWrap:
    """Test multi-line wrapping."""

    def test_wrap_respects_line_cap(self, engine):
        doc = make_doc('font-size="10" data-fit-width="50" data-fit-lines="2"')
        element = engine.apply(doc, binding(fit="wrap"), "alpha beta gamma delta")

        lines = tspans(element)
        assert len(lines) == 2
        assert [t.text for t in lines] == ["alpha", "beta"]
        assert [t.get("dy") for t in lines] == ["0", "12"]
        assert all(t.get("x") == "10" for t in lines)
        assert element.text is None

    @pytest.mark.parametrize("hint", ["2.5", "2px", " 2"])
    def test_fractional_line_cap_truncates(self, engine, hint):
        doc = make_doc(f'font-size="10" data-fit-width="50" data-fit-lines="{hint}"')
        element = engine.apply(doc, binding(fit="wrap"), "alpha beta gamma delta")
        assert [t.text for t in tspans(element)] == ["alpha", "beta"]

    def test_newline_forces_wrap(self, engine):
        doc = make_doc('font-size="12"')
        element = engine.apply(doc, binding(), "line one\nline two")

        lines = tspans(element)
        assert [t.text for t in lines] == ["line one", "line two"]
        assert lines[1].get("dy") == "14.4"
        assert get_text_content(element) == "line oneline two"

    def test_multiple_lines_hint_forces_wrap(self, engine):
        doc = make_doc('font-size="10" data-fit-width="40" data-fit-lines="3"')
        element = engine.apply(doc, binding(), "aaa bbb ccc")
        assert [t.text for t in tspans(element)] == ["aaa", "bbb", "ccc"]

    def test_wrap_replaces_previous_content(self, engine):
        doc = make_doc('font-size="10"')
        engine.apply(doc, binding(fit="wrap"), "a\nb")
        element = engine.apply(doc, binding(fit="wrap"), "c")
        assert [t.text for t in tspans(find_by_id(doc, "t"))] == ["c"]
        assert element is find_by_id(doc, "t")

    def test_wrap_lines_without_width(self, engine):
        assert engine.wrap_lines("a b c", 10) == ["a b c"]
