"""Shared screenplay fixtures for breakdown tests."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from preprod_engine.breakdown import GeneratedScript, ScriptScene, parse_script_to_scenes


def _el(type_: str, content: str, scene: Optional[int] = None) -> Dict[str, Any]:
    element: Dict[str, Any] = {"type": type_, "content": content}
    if scene is not None:
        element["metadata"] = {"sceneNumber": scene}
    return element


def three_scene_script_dict() -> Dict[str, Any]:
    pages: List[Dict[str, Any]] = [
        {
            "pageNumber": 1,
            "elements": [
                _el("slug", "INT. KITCHEN - NIGHT", 1),
                _el("action", "Maya pours coffee with shaking hands."),
                _el("character", "MAYA"),
                _el("dialogue", "We go tonight."),
                _el("slug", "EXT. ROOFTOP - SUNSET", 2),
                _el("character", "LEO"),
                _el("dialogue", "Not without the keys."),
            ],
        },
        {
            "pageNumber": 2,
            "elements": [
                _el("action", "Wind howls across the roof."),
                _el("slug", "INT. VAN - DAY", 3),
                _el("action", "   "),
                _el("character", "MAYA"),
                _el("dialogue", "Drive."),
                _el("character", "DR. KIM"),
                _el("dialogue", "Where to?"),
            ],
        },
    ]
    return {
        "title": "The Heist",
        "episodeNumber": 5,
        "pages": pages,
        "metadata": {"sceneCount": 3},
    }


@pytest.fixture
def script_dict() -> Dict[str, Any]:
    return three_scene_script_dict()


@pytest.fixture
def script(script_dict) -> GeneratedScript:
    return GeneratedScript.model_validate(script_dict)


@pytest.fixture
def scenes(script) -> List[ScriptScene]:
    return parse_script_to_scenes(script)
