"""Screenplay and script-breakdown data models.

Field names are snake_case in Python and camelCase on the wire, matching the
documents the generation endpoints produce.  extra="ignore" on all models
lets model output carry additional fields without being rejected, and null
values fall back to the field default instead of failing validation.

Enumerated and numeric fields are coerced rather than validated strictly:
an unknown importance or time of day, a fractional count or a range like
"20-30" is replaced by its default (whole-number fields round floats).
"""
from __future__ import annotations

import math
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

TIMES_OF_DAY: FrozenSet[str] = frozenset({"DAY", "NIGHT", "SUNRISE", "SUNSET", "MAGIC_HOUR"})
CHARACTER_IMPORTANCE: FrozenSet[str] = frozenset({"lead", "supporting", "background"})
PROP_IMPORTANCE: FrozenSet[str] = frozenset({"hero", "secondary", "background"})
PROP_SOURCES: FrozenSet[str] = frozenset({"buy", "rent", "borrow", "actor-owned"})
COMPLEXITIES: FrozenSet[str] = frozenset({"simple", "moderate", "complex"})
TIME_PRESSURES: FrozenSet[str] = frozenset({"low", "medium", "high"})


def coerce_choice(value: Any, choices: FrozenSet[str], default: str, *, upper: bool = False) -> str:
    """Return *value* normalised into *choices*, or *default*."""
    text = str(value or "").strip()
    text = text.upper() if upper else text.lower()
    return text if text in choices else default


def coerce_number(value: Any, default: Any, *, whole: bool = False) -> Any:
    """Return *value* as a finite number, or *default* when it is not one.

    Numeric strings are accepted.  Booleans are not numbers here.
    """
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    if whole:
        return round(value)
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ── Screenplay models ─────────────────────────────────────────────────────────


class ScriptElement(_WireModel):
    """One screenplay element: slug, action, character cue, dialogue, ..."""

    type: str
    content: str = ""
    metadata: Dict[str, Any] = {}

    @property
    def scene_number(self) -> Optional[int]:
        number = self.metadata.get("sceneNumber")
        return number if isinstance(number, int) and number > 0 else None


class ScriptPage(_WireModel):
    page_number: int
    elements: List[ScriptElement] = []


class GeneratedScript(_WireModel):
    title: str
    episode_number: int
    pages: List[ScriptPage] = []
    metadata: Dict[str, Any] = {}


class ScriptScene(_WireModel):
    """A scene extracted from a GeneratedScript, with its raw text."""

    scene_number: int
    heading: str
    content: str = ""
    page_start: int = 0
    page_end: int = 0


# ── Breakdown models ──────────────────────────────────────────────────────────


class BreakdownCharacter(_WireModel):
    name: str = "Unknown"
    line_count: int = 0
    importance: str = "supporting"
    entrance_beat: str = ""
    exit_beat: str = ""
    emotional_beat: str = ""
    goal: str = ""
    conflict: str = ""
    stakes: str = ""
    continuity_notes: str = ""
    returning_from_prev_scene: bool = False

    @field_validator("line_count", mode="before")
    @classmethod
    def _line_count(cls, v: Any) -> int:
        return coerce_number(v, 0, whole=True)

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, v: Any) -> str:
        return coerce_choice(v, CHARACTER_IMPORTANCE, "supporting")


class BreakdownProp(_WireModel):
    item: str = "Unknown Item"
    importance: str = "secondary"
    source: str = "buy"
    estimated_cost: float = 0
    is_critical_for_story: bool = False
    reusability_across_scenes: List[Any] = []
    sourcing_notes: str = ""
    rent_days: Optional[int] = None

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, v: Any) -> str:
        return coerce_choice(v, PROP_IMPORTANCE, "secondary")

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, v: Any) -> str:
        return coerce_choice(v, PROP_SOURCES, "buy")

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def _estimated_cost(cls, v: Any) -> float:
        return coerce_number(v, 0)

    @field_validator("rent_days", mode="before")
    @classmethod
    def _rent_days(cls, v: Any) -> Optional[int]:
        return coerce_number(v, None, whole=True)


class BudgetDetails(_WireModel):
    location_cost: float = 0
    prop_cost: float = 0
    extras_cost: float = 0
    special_eq_cost: float = 0
    contingency: float = 0
    savings_tips: List[str] = []
    assumptions: List[str] = []

    @field_validator(
        "location_cost", "prop_cost", "extras_cost", "special_eq_cost", "contingency",
        mode="before",
    )
    @classmethod
    def _costs(cls, v: Any) -> float:
        return coerce_number(v, 0)


class Logistics(_WireModel):
    night_shoot: bool = False
    stunts: bool = False
    vfx: bool = False
    crowd_size: Optional[int] = None
    vehicle: Optional[str] = None
    child_actor: bool = False
    animal: bool = False
    fx_makeup: bool = False
    company_move_required: bool = False
    weather_risk: Optional[str] = None
    time_pressure: str = "medium"

    @field_validator("time_pressure", mode="before")
    @classmethod
    def _time_pressure(cls, v: Any) -> str:
        return coerce_choice(v, TIME_PRESSURES, "medium")

    @field_validator("crowd_size", mode="before")
    @classmethod
    def _crowd_size(cls, v: Any) -> Optional[int]:
        return coerce_number(v, None, whole=True)


class Coverage(_WireModel):
    suggested_setup_count: int = 0
    complexity: str = "simple"
    blocking_notes: str = ""
    continuity_risks: List[str] = []
    alt_location: str = ""

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity(cls, v: Any) -> str:
        return coerce_choice(v, COMPLEXITIES, "simple")

    @field_validator("suggested_setup_count", mode="before")
    @classmethod
    def _setup_count(cls, v: Any) -> int:
        return coerce_number(v, 0, whole=True)


class Continuity(_WireModel):
    key_props_carried: List[str] = []
    wardrobe_notes: str = ""
    reusability_across_scenes: List[Any] = []


class BreakdownScene(_WireModel):
    """Production breakdown of one scene: cast, props, logistics, budget."""

    id: str = ""
    scene_number: int = 0
    scene_title: str = "Untitled Scene"
    location: str = "Unknown Location"
    time_of_day: str = "DAY"
    estimated_shoot_time: int = 20  # minutes
    characters: List[BreakdownCharacter] = []
    props: List[BreakdownProp] = []
    special_requirements: List[str] = []
    budget_impact: float = 0
    budget_details: BudgetDetails = Field(default_factory=BudgetDetails)
    logistics: Logistics = Field(default_factory=Logistics)
    coverage: Coverage = Field(default_factory=Coverage)
    continuity: Continuity = Field(default_factory=Continuity)
    warnings: List[str] = []
    status: str = "not-started"
    notes: str = ""
    comments: List[Dict[str, Any]] = []
    linked_episode: Optional[int] = None
    linked_scene_content: str = ""

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _time_of_day(cls, v: Any) -> str:
        return coerce_choice(v, TIMES_OF_DAY, "DAY", upper=True)

    @field_validator("estimated_shoot_time", mode="before")
    @classmethod
    def _whole_minutes(cls, v: Any) -> int:
        return coerce_number(v, 20, whole=True)

    @field_validator("budget_impact", mode="before")
    @classmethod
    def _budget_impact(cls, v: Any) -> float:
        return coerce_number(v, 0)


class ScriptBreakdown(_WireModel):
    """Scene-by-scene breakdown of one episode with rolled-up totals."""

    schema_version: str = "v2"
    episode_number: int
    episode_title: str
    total_scenes: int
    total_estimated_time: int
    total_budget_impact: float
    scenes: List[BreakdownScene]
    last_updated: int = 0  # epoch milliseconds, caller-supplied
    updated_by: str = "ai-generator"
    warnings: List[str] = []
