"""Placeholder structures for model output that could not be recovered.

A fallback keeps a content-generation request alive: the caller gets a
well-typed value of the expected shape, populated with whatever fields a
regex could still pull out of the raw text.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

LOGGER = logging.getLogger(__name__)

_RAW_CONTENT_MAX = 1000  # chars kept in the generic fallback

_TITLE_RE = re.compile(r'"title":\s*"([^"]+)"')
_EPISODE_RE = re.compile(r'"episode":\s*"([^"]+)"')
_LINE_RE = re.compile(r'"line":\s*"([^"]+)"')
_CHARACTER_RE = re.compile(r'"character":\s*"([^"]+)"')

_MISSING_LINE = (
    "Dialogue content was generated but needs to be regenerated due to "
    "formatting issues."
)


def detect_content_type(raw_content: str) -> str:
    """Guess which fallback shape suits *raw_content*."""
    if "episode" in raw_content or "scenes" in raw_content:
        return "episode"
    if "marketing" in raw_content:
        return "marketing"
    if "postProduction" in raw_content:
        return "postProduction"
    return "generic"


def _episode(raw_content: str) -> Dict[str, Any]:
    title = _TITLE_RE.search(raw_content)
    episode = _EPISODE_RE.search(raw_content)
    lines = _LINE_RE.findall(raw_content)
    characters = _CHARACTER_RE.findall(raw_content)

    dialogue: List[Dict[str, str]] = []
    for i in range(max(len(lines), len(characters), 1)):
        dialogue.append({
            "character": characters[i] if i < len(characters) else "CHARACTER",
            "line": lines[i] if i < len(lines) else _MISSING_LINE,
        })

    return {
        "episode": episode.group(1) if episode else "1",
        "title": title.group(1) if title else "Episode Title",
        "scenes": [
            {
                "number": "1",
                "location": "LOCATION - TIME",
                "description": (
                    "Scene description was generated but couldn't be parsed "
                    "properly due to JSON formatting issues."
                ),
                "dialogue": dialogue,
            }
        ],
    }


def _marketing(_raw: str) -> Dict[str, Any]:
    return {
        "marketing": {
            "targetAudience": {
                "primaryDemographic": "General audience",
                "secondaryDemographics": ["Young adults", "Tech enthusiasts"],
            },
            "marketingHooks": [
                {
                    "tagline": "Compelling Story",
                    "supportingCopy": (
                        "Marketing content was generated but couldn't be parsed properly."
                    ),
                }
            ],
        }
    }


def _post_production(_raw: str) -> Dict[str, Any]:
    return {
        "postProduction": {
            "overallStyle": {
                "colorGrading": (
                    "Post-production content was generated but couldn't be parsed properly."
                ),
                "cinematography": "Please regenerate this content for proper formatting.",
            }
        }
    }


def _storyboard(_raw: str) -> Dict[str, Any]:
    return {
        "episodes": [
            {
                "number": "1",
                "title": "Episode 1",
                "summary": "Storyboard content was generated but couldn't be parsed properly",
                "scenes": [
                    {
                        "sceneNumber": "1",
                        "location": "Location",
                        "description": "Scene description",
                        "visualElements": ["Visual element 1", "Visual element 2"],
                    }
                ],
            }
        ]
    }


def _props(_raw: str) -> Dict[str, Any]:
    return {
        "props": {
            "mainProps": [
                {
                    "name": "Main Prop",
                    "description": "Props content was generated but couldn't be parsed properly",
                    "importance": "high",
                }
            ]
        }
    }


def _generic(raw_content: str) -> Dict[str, Any]:
    return {
        "content": "Content was generated but couldn't be parsed properly",
        "rawContent": raw_content[:_RAW_CONTENT_MAX],
        "error": "JSON parsing failed - content available in rawContent field",
    }


_BUILDERS = {
    "episode": _episode,
    "script-expansion": _episode,
    "marketing": _marketing,
    "postProduction": _post_production,
    "storyboard": _storyboard,
    "props": _props,
}


def create_fallback_json(content_type: str, raw_content: str = "") -> Dict[str, Any]:
    """Build the placeholder for *content_type*; unknown types get the generic shape."""
    LOGGER.info("creating %s fallback structure", content_type)
    return _BUILDERS.get(content_type, _generic)(raw_content or "")
