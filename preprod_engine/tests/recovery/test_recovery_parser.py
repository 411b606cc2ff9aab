"""Tests for the recovery ladder entry points.

Covers: the strategy that wins for each class of damage, failure as a typed
ParseFailure, and the explicit fallback path.
"""
from __future__ import annotations

import json
import logging

import pytest

from preprod_engine.recovery import (
    STRATEGIES,
    ParseFailure,
    clean_and_parse_json,
    parse_with_fallback,
    recover_json,
)


class TestLadder:

    def test_strategy_order(self):
        assert [s.name for s in STRATEGIES] == [
            "direct", "cleanup", "smart_quotes", "escape_controls", "inner_quotes", "balance",
        ]

    def test_strategies_are_pure(self):
        text = '{"a": "b",}'
        for strategy in STRATEGIES:
            strategy.apply(text)
        assert text == '{"a": "b",}'


class TestRecoverJson:

    def test_valid_json(self):
        r = recover_json('{"a": 1}')
        assert r.value == {"a": 1}
        assert r.strategy == "direct"

    def test_valid_scalar(self):
        assert recover_json("true").value is True

    def test_fenced(self):
        assert recover_json('```json\n{"a": [1, 2]}\n```').value == {"a": [1, 2]}

    def test_prose_around_payload(self):
        r = recover_json('Here is your JSON: {"a": 1} Hope it helps!')
        assert r.value == {"a": 1}
        assert r.candidate == '{"a": 1}'

    def test_first_of_two_documents(self):
        assert recover_json('{"a": 1} {"b": 2}').value == {"a": 1}

    def test_trailing_commas(self):
        r = recover_json('{"a": 1, "b": [1, 2,],}')
        assert r.value == {"a": 1, "b": [1, 2]}
        assert r.strategy == "cleanup"

    def test_smart_quotes(self):
        r = recover_json("{“title”: “Pilot”}")
        assert r.value == {"title": "Pilot"}
        assert r.strategy == "smart_quotes"

    def test_literal_newline_in_string(self):
        r = recover_json('{"line": "first\nsecond"}')
        assert r.value == {"line": "first\nsecond"}
        assert r.strategy == "escape_controls"

    def test_inner_quotes(self):
        r = recover_json('{"line": "She said "run" and left", "character": "ANA"}')
        assert r.value == {"line": 'She said "run" and left', "character": "ANA"}
        assert r.strategy == "inner_quotes"

    def test_truncated_output(self):
        r = recover_json('{"title": "Ep", "scenes": [{"sceneNumber": 1, "sceneTitle": "Hal')
        assert r.value == {"title": "Ep", "scenes": [{"sceneNumber": 1, "sceneTitle": "Hal"}]}
        assert r.strategy == "balance"

    def test_truncated_inside_unicode_escape(self):
        r = recover_json('{"title": "Pilot", "line": "caf\\u00')
        assert r.value == {"title": "Pilot", "line": "caf"}
        assert r.strategy == "balance"

    def test_dangling_open_brace(self):
        r = recover_json('{"a": {"b": 1}')
        assert r.value == {"a": {"b": 1}}
        assert r.strategy == "balance"


class TestFailures:

    @pytest.mark.parametrize("raw", ["", "   \n", None, 42])
    def test_empty_or_non_string_input(self, raw):
        with pytest.raises(ParseFailure) as exc_info:
            recover_json(raw)
        assert exc_info.value.stage == "input"

    def test_prose_only(self):
        with pytest.raises(ParseFailure) as exc_info:
            clean_and_parse_json("I am unable to produce that breakdown right now.")
        failure = exc_info.value
        assert failure.stage == "strategies"
        assert failure.last_error
        assert str(failure).startswith("ERROR: JSON recovery failed")

    def test_parse_failure_is_value_error(self):
        with pytest.raises(ValueError):
            clean_and_parse_json("no json at all")

    def test_excerpt_is_bounded(self):
        with pytest.raises(ParseFailure) as exc_info:
            clean_and_parse_json("word " * 500)
        assert len(exc_info.value.excerpt) <= 300

    def test_total_failure_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="preprod_engine.recovery.parser"):
            with pytest.raises(ParseFailure):
                clean_and_parse_json("nothing to see")
        assert "all JSON recovery strategies failed" in caplog.text


class TestParseWithFallback:

    def test_recoverable_input_is_not_replaced(self):
        assert parse_with_fallback('{"a": 1,}') == {"a": 1}

    def test_generic_fallback(self):
        value = parse_with_fallback("The model refused.")
        assert value["rawContent"] == "The model refused."
        assert "error" in value

    def test_explicit_type(self):
        value = parse_with_fallback("broken", "marketing")
        assert "marketing" in value

    def test_detected_type(self):
        value = parse_with_fallback('The episode "title": "Pilot" was cut off')
        assert value["title"] == "Pilot"
        assert value["scenes"][0]["dialogue"]

    def test_non_string_input(self):
        value = parse_with_fallback(None)
        assert value["rawContent"] == ""

    @pytest.mark.parametrize("raw", ["null", "42", '"just text"', "true"])
    def test_scalar_is_replaced(self, raw, caplog):
        with caplog.at_level(logging.WARNING):
            value = parse_with_fallback(raw)
        assert value["rawContent"] == raw
        assert "expected an object or array" in caplog.text

    def test_scalar_still_parses_without_fallback(self):
        assert clean_and_parse_json("42") == 42


_VALID_DOCUMENTS = [
    '{"a": 1}',
    '[1, "two", null, false, 3.5]',
    '{"nested": {"list": [{"k": "v,}]"}], "esc": "quote \\" and \\\\n"}}',
    '"just a string"',
    "0",
    '{"unicode": "caf\\u00e9 \\u2014 done"}',
    "[]",
]


class TestProperties:

    @pytest.mark.parametrize("doc", _VALID_DOCUMENTS)
    def test_valid_json_never_regresses(self, doc):
        assert clean_and_parse_json(doc) == json.loads(doc)

    @pytest.mark.parametrize("doc", _VALID_DOCUMENTS)
    def test_fencing_is_transparent(self, doc):
        assert clean_and_parse_json(f"```json\n{doc}\n```") == clean_and_parse_json(doc)

    @pytest.mark.parametrize("doc", _VALID_DOCUMENTS)
    def test_prose_wrapped_containers(self, doc):
        if doc[0] not in "{[":
            pytest.skip("scalars have no boundary to extract")
        assert clean_and_parse_json(f"Result:\n{doc}\nDone.") == json.loads(doc)
