"""Heuristic breakdown for scenes the model did not cover."""
from __future__ import annotations

import re
from typing import List

from preprod_engine.breakdown.models import (
    BreakdownCharacter,
    BreakdownScene,
    BudgetDetails,
    Coverage,
    Logistics,
    ScriptScene,
)

BASIC_BREAKDOWN_WARNING = "Basic breakdown - AI generation failed for this scene"

_LOCATION_RE = re.compile(r"(?:INT\.|EXT\.)\s+(.+?)(?:\s+-\s+|$)", re.IGNORECASE)
_CUE_RE = re.compile(r"^([A-Z][A-Z .']*[A-Z])[ \t]*$", re.MULTILINE)
_SLUG_PREFIXES = ("INT.", "EXT.", "INT/EXT", "I/E")
_MAX_CHARACTERS = 5

# Checked in order; the first keyword found in the heading wins.
_TIME_KEYWORDS = (
    ("NIGHT", "NIGHT"),
    ("SUNRISE", "SUNRISE"),
    ("SUNSET", "SUNSET"),
    ("MAGIC HOUR", "MAGIC_HOUR"),
)


def _time_of_day(heading: str) -> str:
    upper = heading.upper()
    for keyword, value in _TIME_KEYWORDS:
        if keyword in upper:
            return value
    return "DAY"


def _character_cues(content: str) -> List[str]:
    names: List[str] = []
    for match in _CUE_RE.finditer(content):
        name = match.group(1).strip()
        if name.startswith(_SLUG_PREFIXES) or name in names:
            continue
        names.append(name)
        if len(names) == _MAX_CHARACTERS:
            break
    return names


def create_basic_breakdown(scene: ScriptScene, episode_number: int) -> BreakdownScene:
    """Build a minimal breakdown for *scene* from its slug line and cues."""
    m = _LOCATION_RE.search(scene.heading)
    time_of_day = _time_of_day(scene.heading)
    return BreakdownScene(
        id=f"scene-{episode_number}-{scene.scene_number}",
        scene_number=scene.scene_number,
        scene_title=scene.heading,
        location=m.group(1).strip() if m else "Unknown Location",
        time_of_day=time_of_day,
        estimated_shoot_time=30,
        characters=[
            BreakdownCharacter(name=name, line_count=1, importance="supporting")
            for name in _character_cues(scene.content)
        ],
        budget_impact=10,
        budget_details=BudgetDetails(
            savings_tips=["Basic scene - minimal costs"],
            assumptions=["Location is free or actor-owned"],
        ),
        logistics=Logistics(night_shoot=time_of_day == "NIGHT"),
        coverage=Coverage(suggested_setup_count=2, complexity="simple"),
        warnings=[BASIC_BREAKDOWN_WARNING],
        notes=(
            "Basic breakdown created automatically. "
            "Please review and update with full details."
        ),
        linked_episode=episode_number,
        linked_scene_content=scene.content,
    )
