"""Model response → ScriptBreakdown.

Public entry point
------------------
    structure_breakdown(ai_response, script_scenes, episode_number,
                        episode_title, *, regenerate=None, last_updated=0)

The response is recovered with the array parser, checked against the
BreakdownScenes contract, then coerced into BreakdownScene models.  Script
scenes the model skipped are regenerated through the optional *regenerate*
callback; whatever is still missing gets a heuristic basic breakdown, so
every script scene ends up in the result exactly once.
A returned scene that fails model validation counts as missing.

No clock reads: scene ids derive from episode and scene number, and
last_updated is caller-supplied.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import jsonschema
from pydantic import ValidationError

from preprod_engine.breakdown.basic import create_basic_breakdown
from preprod_engine.breakdown.models import BreakdownScene, ScriptBreakdown, ScriptScene
from preprod_engine.contract_validate import validate_breakdown_scenes
from preprod_engine.recovery import ParseFailure, clean_and_parse_json_array

LOGGER = logging.getLogger(__name__)

MAX_EPISODE_BUDGET = 625
MAX_SCENE_BUDGET = 250

Regenerate = Callable[[List[ScriptScene]], str]


def _parse_scenes(text: str) -> List[Dict[str, Any]]:
    items = [item for item in clean_and_parse_json_array(text) if isinstance(item, dict)]
    validate_breakdown_scenes(items)
    return items


def _to_scene(
    raw: Dict[str, Any],
    script_scenes: Dict[int, ScriptScene],
    episode_number: int,
) -> BreakdownScene:
    scene = BreakdownScene.model_validate(raw)
    warnings = list(scene.warnings)
    budget = scene.budget_impact
    if budget > MAX_SCENE_BUDGET:
        warnings.append(f"Scene budget capped at ${MAX_SCENE_BUDGET}")
        budget = MAX_SCENE_BUDGET

    source = script_scenes.get(scene.scene_number)
    return scene.model_copy(update={
        "id": f"scene-{episode_number}-{scene.scene_number}",
        "budget_impact": budget,
        "warnings": warnings,
        "status": "not-started",
        "comments": [],
        "linked_episode": episode_number,
        "linked_scene_content": source.content if source else scene.scene_title,
    })


def _to_scenes(
    raws: List[Dict[str, Any]],
    script_scenes: Dict[int, ScriptScene],
    episode_number: int,
) -> List[BreakdownScene]:
    """Coerce each raw scene; one that still fails validation is dropped."""
    scenes = []
    for raw in raws:
        try:
            scenes.append(_to_scene(raw, script_scenes, episode_number))
        except ValidationError as exc:
            LOGGER.warning(
                "dropping scene %s with %d invalid field(s): %s",
                raw.get("sceneNumber"), exc.error_count(), exc.errors()[0]["loc"],
            )
    return scenes


def _fill_missing(
    missing: List[ScriptScene],
    script_scenes: Dict[int, ScriptScene],
    episode_number: int,
    regenerate: Optional[Regenerate],
) -> List[BreakdownScene]:
    """Breakdowns for *missing* scenes: regenerated first, heuristics for the rest."""
    wanted = {s.scene_number for s in missing}
    recovered: List[BreakdownScene] = []
    if regenerate is not None:
        try:
            raws = _parse_scenes(regenerate(missing))
            for scene in _to_scenes(raws, script_scenes, episode_number):
                if scene.scene_number in wanted:
                    recovered.append(scene)
                    wanted.discard(scene.scene_number)
            LOGGER.info("regenerated %d missing scene(s)", len(recovered))
        except (ValueError, RuntimeError, OSError, jsonschema.ValidationError) as exc:
            LOGGER.error("regenerating missing scenes failed: %s", exc)

    for scene in missing:
        if scene.scene_number in wanted:
            LOGGER.warning("using basic breakdown for scene %d", scene.scene_number)
            recovered.append(create_basic_breakdown(scene, episode_number))
    return recovered


def structure_breakdown(
    ai_response: str,
    script_scenes: Sequence[ScriptScene],
    episode_number: int,
    episode_title: str,
    *,
    regenerate: Optional[Regenerate] = None,
    last_updated: int = 0,
) -> ScriptBreakdown:
    """Turn a breakdown response into a complete ScriptBreakdown.

    Raises:
        ValueError: "Failed to parse breakdown data: ..." when no scene
            object could be recovered from *ai_response*.
        jsonschema.ValidationError: the recovered array does not conform to
            BreakdownScenes.v1.json.
    """
    try:
        raw_scenes = _parse_scenes(ai_response)
    except ParseFailure as exc:
        raise ValueError(f"Failed to parse breakdown data: {exc.last_error}") from exc

    by_number = {s.scene_number: s for s in script_scenes}
    scenes = _to_scenes(raw_scenes, by_number, episode_number)
    LOGGER.info(
        "model returned %d scene(s), script has %d", len(scenes), len(by_number)
    )

    present = {s.scene_number for s in scenes}
    missing = [s for s in script_scenes if s.scene_number not in present]
    if missing:
        LOGGER.warning(
            "response is missing scene(s): %s",
            ", ".join(str(s.scene_number) for s in missing),
        )
        scenes.extend(_fill_missing(missing, by_number, episode_number, regenerate))
        scenes.sort(key=lambda s: s.scene_number)

    total_budget = sum(s.budget_impact for s in scenes)
    warnings: List[str] = []
    if total_budget > MAX_EPISODE_BUDGET:
        warnings.append(
            f"Episode budget target ${MAX_EPISODE_BUDGET} exceeded: ${total_budget:g}"
        )

    return ScriptBreakdown(
        episode_number=episode_number,
        episode_title=episode_title,
        total_scenes=len(scenes),
        total_estimated_time=sum(s.estimated_shoot_time for s in scenes),
        total_budget_impact=total_budget,
        scenes=scenes,
        last_updated=last_updated,
        warnings=warnings,
    )
