"""Tests for fallback placeholder structures."""
from __future__ import annotations

import pytest

from preprod_engine.recovery import create_fallback_json, detect_content_type


class TestDetectContentType:

    @pytest.mark.parametrize("raw, expected", [
        ('{"episode": "2", "title": ', "episode"),
        ('{"scenes": [', "episode"),
        ('{"marketing": {"hooks"', "marketing"),
        ('{"postProduction": {', "postProduction"),
        ("plain refusal", "generic"),
    ])
    def test_detection(self, raw, expected):
        assert detect_content_type(raw) == expected


class TestEpisodeFallback:

    def test_fields_pulled_from_raw_text(self):
        raw = (
            '{"episode": "3", "title": "The Heist", "scenes": [{"dialogue": ['
            '{"character": "MAYA", "line": "We go tonight."}, '
            '{"character": "LEO", "line": "Not without'
        )
        value = create_fallback_json("episode", raw)
        assert value["episode"] == "3"
        assert value["title"] == "The Heist"
        dialogue = value["scenes"][0]["dialogue"]
        assert dialogue[0] == {"character": "MAYA", "line": "We go tonight."}
        assert dialogue[1]["character"] == "LEO"
        assert "regenerated" in dialogue[1]["line"]

    def test_placeholders_when_nothing_matches(self):
        value = create_fallback_json("script-expansion", "garbage")
        assert value["episode"] == "1"
        assert value["title"] == "Episode Title"
        assert len(value["scenes"][0]["dialogue"]) == 1


class TestOtherShapes:

    def test_marketing(self):
        value = create_fallback_json("marketing")
        assert value["marketing"]["marketingHooks"]

    def test_post_production(self):
        assert "overallStyle" in create_fallback_json("postProduction")["postProduction"]

    def test_storyboard(self):
        scenes = create_fallback_json("storyboard")["episodes"][0]["scenes"]
        assert scenes[0]["visualElements"]

    def test_props(self):
        assert create_fallback_json("props")["props"]["mainProps"][0]["importance"] == "high"

    def test_unknown_type_is_generic(self):
        value = create_fallback_json("nonsense", "x" * 2000)
        assert len(value["rawContent"]) == 1000
        assert set(value) == {"content", "rawContent", "error"}
