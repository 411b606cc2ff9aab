"""Split a generated screenplay into numbered scenes."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from preprod_engine.breakdown.models import GeneratedScript, ScriptScene

LOGGER = logging.getLogger(__name__)


def parse_script_to_scenes(script: GeneratedScript) -> List[ScriptScene]:
    """Group screenplay elements into scenes.

    A slug element carrying a scene number opens a new scene; every later
    non-blank element is appended to it until the next numbered slug.
    Slugs without a number and duplicate numbers are logged, not rejected.
    """
    scenes: List[ScriptScene] = []
    current: Optional[dict] = None
    content: List[str] = []
    seen: set = set()

    for page in script.pages:
        for element in page.elements:
            number = element.scene_number
            if element.type == "slug" and number is not None:
                if number in seen:
                    LOGGER.warning(
                        "duplicate scene number %d on page %d", number, page.page_number
                    )
                seen.add(number)
                if current is not None:
                    current["content"] = "\n".join(content)
                    current["page_end"] = page.page_number
                    scenes.append(ScriptScene(**current))
                current = {
                    "scene_number": number,
                    "heading": element.content,
                    "page_start": page.page_number,
                    "page_end": page.page_number,
                }
                content = [element.content]
            else:
                if element.type == "slug":
                    LOGGER.warning(
                        "slug without scene number on page %d: %.50s",
                        page.page_number, element.content,
                    )
                if current is not None and element.content.strip():
                    content.append(element.content)

    if current is not None:
        current["content"] = "\n".join(content)
        if script.pages:
            current["page_end"] = script.pages[-1].page_number
        scenes.append(ScriptScene(**current))

    expected = script.metadata.get("sceneCount")
    if isinstance(expected, int):
        missing = find_missing_scene_numbers((s.scene_number for s in scenes), expected)
        if missing:
            LOGGER.warning("missing scene numbers: %s", ", ".join(map(str, missing)))
    return scenes


def find_missing_scene_numbers(found: Iterable[int], expected_count: int) -> List[int]:
    """Scene numbers in ``1..expected_count`` that are absent from *found*."""
    present = set(found)
    return [n for n in range(1, expected_count + 1) if n not in present]
