"""Tests for the model output parser."""
import pytest

from app.models import IntervalResult, ScalarResult
from app.parsers import ModelOutputError, ModelOutputParser


@pytest.fixture
def parser():
    return ModelOutputParser()


class TestModelOutputParser:
    """Test suite for ModelOutputParser."""

    def test_two_fields_give_a_scalar(self, parser):
        results = parser.parse("result,3.14")
        assert results == {"result": ScalarResult(value=3.14)}
        assert results["result"].model_dump() == {"type": "scalar", "value": 3.14}

    def test_three_fields_give_an_interval(self, parser):
        results = parser.parse("band,1.0,2.0")
        assert results["band"].model_dump() == {"type": "ci", "low": 1.0, "high": 2.0}

    def test_whitespace_around_fields_is_ignored(self, parser):
        results = parser.parse("EV of far future, 1e+40, 2.5e+80\n")
        assert results["EV of far future"] == IntervalResult(low=1e40, high=2.5e80)

    def test_blank_lines_are_skipped(self, parser):
        results = parser.parse("a,1\n\nb,2,3\n\n")
        assert list(results) == ["a", "b"]

    def test_empty_output_gives_no_results(self, parser):
        assert parser.parse("") == {}

    def test_duplicate_names_keep_the_last_value(self, parser):
        results = parser.parse("a,1\nb,2\na,3,4")
        assert results["a"] == IntervalResult(low=3.0, high=4.0)
        assert list(results) == ["a", "b"]

    def test_parse_line_is_idempotent(self, parser):
        line = "GiveDirectly posterior,0.0123"
        assert parser.parse_line(line) == parser.parse_line(line)

    @pytest.mark.parametrize("line", ["lonely", "a,1,2,3", "a,1,2,3,4"])
    def test_bad_field_count_fails_whole_parse(self, parser, line):
        source = f"good,1\n{line}\nalso good,2"
        with pytest.raises(ModelOutputError) as excinfo:
            parser.parse(source)
        assert excinfo.value.line == line
        assert excinfo.value.line_number == 2
        assert "line 2" in str(excinfo.value)

    @pytest.mark.parametrize("line", ["a,abc", "a,1,high", "a,nan", "a,-inf,1", "a,"])
    def test_unparseable_numbers_fail(self, parser, line):
        with pytest.raises(ModelOutputError) as excinfo:
            parser.parse(line)
        assert excinfo.value.line_number == 1

    def test_only_newlines_separate_lines(self, parser):
        results = parser.parse("form\x0cfeed,1\nsep name,2,3")
        assert list(results) == ["form\x0cfeed", "sep name"]

    def test_carriage_returns_are_dropped(self, parser):
        results = parser.parse("a,1\r\nb,2,3\r\n")
        assert results == {"a": ScalarResult(value=1.0), "b": IntervalResult(low=2.0, high=3.0)}

    def test_line_numbers_count_blank_lines(self, parser):
        with pytest.raises(ModelOutputError) as excinfo:
            parser.parse("a,1\n\nbad")
        assert excinfo.value.line_number == 3
