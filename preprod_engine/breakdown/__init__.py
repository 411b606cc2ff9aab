"""Script breakdown package: screenplay scenes → production breakdown."""

from preprod_engine.breakdown.basic import create_basic_breakdown
from preprod_engine.breakdown.models import (
    BreakdownCharacter,
    BreakdownProp,
    BreakdownScene,
    BudgetDetails,
    Continuity,
    Coverage,
    GeneratedScript,
    Logistics,
    ScriptBreakdown,
    ScriptElement,
    ScriptPage,
    ScriptScene,
)
from preprod_engine.breakdown.scenes import find_missing_scene_numbers, parse_script_to_scenes
from preprod_engine.breakdown.structurer import structure_breakdown

__all__ = [
    "BreakdownCharacter",
    "BreakdownProp",
    "BreakdownScene",
    "BudgetDetails",
    "Continuity",
    "Coverage",
    "create_basic_breakdown",
    "find_missing_scene_numbers",
    "GeneratedScript",
    "Logistics",
    "parse_script_to_scenes",
    "ScriptBreakdown",
    "ScriptElement",
    "ScriptPage",
    "ScriptScene",
    "structure_breakdown",
]
