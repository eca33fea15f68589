"""Tests for the JSON repair steps."""

import json

import pytest

from blogsmith.core.extractor import JSONRepairer


class TestJSONRepairer:
    """Test each repair step and the full sequence."""

    @pytest.fixture
    def repairer(self) -> JSONRepairer:
        return JSONRepairer(["title", "content"])

    @pytest.fixture
    def nested_repairer(self) -> JSONRepairer:
        return JSONRepairer(["english", "title", "content"])

    def test_requires_keys(self) -> None:
        with pytest.raises(ValueError):
            JSONRepairer([])

    def test_close_values_inserts_missing_quote(self, repairer: JSONRepairer) -> None:
        text = '{"title":"Hello,"content":"World"}'

        assert repairer.close_values(text) == '{"title":"Hello","content":"World"}'

    def test_close_values_leaves_closed_values(self, repairer: JSONRepairer) -> None:
        text = '{"title":"Hello","content":"World"}'

        assert repairer.close_values(text) == text

    def test_close_values_respects_escaped_quote(self, repairer: JSONRepairer) -> None:
        """A trailing escaped quote does not close the value."""
        text = r'{"title":"say \"hi\","content":"x"}'

        repaired = repairer.close_values(text)

        assert json.loads(repaired)["title"] == 'say "hi"'

    def test_close_object_terminates_string(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A","content":"B'

        assert repairer.close_object(text) == '{"title":"A","content":"B"}'

    def test_close_object_moves_swallowed_brace(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A","content":"B}'

        assert repairer.close_object(text) == '{"title":"A","content":"B"}'

    def test_close_object_closes_nested(self, nested_repairer: JSONRepairer) -> None:
        text = '{"english":{"title":"T","content":"C'

        assert nested_repairer.close_object(text) == '{"english":{"title":"T","content":"C"}}'

    def test_close_object_drops_leading_text(self, repairer: JSONRepairer) -> None:
        assert repairer.close_object('x {"title":1') == '{"title":1}'

    def test_close_object_leaves_closed_object(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A","content":"B"}'

        assert repairer.close_object(text) == text

    def test_rebuild_escapes_interior_quotes(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A"B","content":"C"}'

        assert repairer.rebuild(text) == r'{"title":"A\"B","content":"C"}'

    def test_rebuild_collapses_whitespace(self, repairer: JSONRepairer) -> None:
        text = '{"title" :  "A "B" ",  "content":"C   D"}'

        rebuilt = repairer.rebuild(text)

        assert rebuilt == r'{"title":"A \"B\"","content":"C D"}'
        assert json.loads(rebuilt) == {"title": 'A "B"', "content": "C D"}

    def test_rebuild_keeps_non_string_values(self, repairer: JSONRepairer) -> None:
        assert repairer.rebuild('{"title": 5, "content":"x"}') == '{"title":5,"content":"x"}'

    def test_rebuild_keeps_nesting(self, nested_repairer: JSONRepairer) -> None:
        text = '{"english":{"title":"T","content":"C"}}'

        assert nested_repairer.rebuild(text) == text

    def test_close_object_drops_trailing_comma(self, repairer: JSONRepairer) -> None:
        text = '{"title": "T", "content": "C", }'

        assert repairer.close_object(text) == '{"title": "T", "content": "C"}'

    def test_close_object_keeps_comma_inside_string(self, repairer: JSONRepairer) -> None:
        text = '{"title":"T","content":"C,'

        assert repairer.close_object(text) == '{"title":"T","content":"C,"}'

    def test_rebuild_accepts_comma_before_brace(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A"B","content":"C",}'

        assert repairer.rebuild(text) == r'{"title":"A\"B","content":"C"}'

    def test_rebuild_refuses_duplicate_keys(self, repairer: JSONRepairer) -> None:
        text = '{"title":"T","content":"C"} trailing {"title":"X"}'

        assert repairer.rebuild(text) == text

    def test_rebuild_without_keys_only_collapses(self, repairer: JSONRepairer) -> None:
        assert repairer.rebuild("no   keys\there") == "no keys here"

    def test_repair_reports_steps(self, repairer: JSONRepairer) -> None:
        text, repairs = repairer.repair('{"title":"Hello,"content":"World"}')

        assert repairs == ["closed_values"]
        assert json.loads(text) == {"title": "Hello", "content": "World"}

    def test_repair_rebuilds_only_when_needed(self, repairer: JSONRepairer) -> None:
        text, repairs = repairer.repair('{"title":"A"B","content":"C"}')

        assert repairs == ["rebuilt"]
        assert json.loads(text) == {"title": 'A"B', "content": "C"}

    def test_repair_valid_json_is_untouched(self, repairer: JSONRepairer) -> None:
        text = '{"title":"A","content":"B"}'

        assert repairer.repair(text) == (text, [])

    @pytest.mark.parametrize(
        "text",
        [
            '{"title":"Hello,"content":"World"}',
            '{"title":"A","content":"B',
            '{"title":"A"B","content":"C"}',
            '{"title" :  "A "B" ",  "content":"C   D"}',
        ],
    )
    def test_repair_is_idempotent(self, repairer: JSONRepairer, text: str) -> None:
        once, _ = repairer.repair(text)
        twice, repairs = repairer.repair(once)

        assert twice == once
        assert repairs == []
