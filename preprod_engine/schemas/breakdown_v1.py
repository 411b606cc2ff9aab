"""ScriptBreakdown schema v2: load, dump, validate.

Canonical JSON (sort_keys=True, camelCase keys) ensures byte-identical
serialization of identical models regardless of dict insertion order.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from preprod_engine.breakdown.models import ScriptBreakdown

SCHEMA_VERSION = "v2"


def load_breakdown(source: Union[str, bytes, dict, Path]) -> ScriptBreakdown:
    """Parse a ScriptBreakdown from JSON string, bytes, dict, or file Path.

    Raises:
        ValidationError: data does not conform to the ScriptBreakdown schema.
        FileNotFoundError: Path does not exist.
    """
    if isinstance(source, Path):
        data = json.loads(source.read_text(encoding="utf-8"))
    elif isinstance(source, (str, bytes)):
        data = json.loads(source)
    else:
        data = source
    return ScriptBreakdown.model_validate(data)


def dump_breakdown(breakdown: ScriptBreakdown, *, indent: int = 2) -> str:
    """Serialize a ScriptBreakdown to canonical JSON with camelCase keys."""
    raw = json.loads(breakdown.model_dump_json(by_alias=True))
    return json.dumps(raw, sort_keys=True, indent=indent, ensure_ascii=False)


def validate_breakdown(data: dict) -> List[str]:
    """Validate a raw dict against the ScriptBreakdown schema.

    Returns a list of human-readable error strings (empty list = valid).
    Does not raise.
    """
    try:
        ScriptBreakdown.model_validate(data)
        return []
    except ValidationError as exc:
        return [f"{e['loc']}: {e['msg']}" for e in exc.errors()]
