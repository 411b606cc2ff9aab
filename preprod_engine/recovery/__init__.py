"""Defensive JSON recovery for model-generated text."""

from preprod_engine.recovery.arrays import clean_and_parse_json_array, salvage_objects
from preprod_engine.recovery.errors import ParseFailure
from preprod_engine.recovery.extract import extract_candidates, strip_markdown_fences
from preprod_engine.recovery.fallbacks import create_fallback_json, detect_content_type
from preprod_engine.recovery.parser import (
    Recovery,
    clean_and_parse_json,
    parse_with_fallback,
    recover_json,
)
from preprod_engine.recovery.repairs import complete_json_structure
from preprod_engine.recovery.strategies import STRATEGIES, Strategy

__all__ = [
    "clean_and_parse_json",
    "clean_and_parse_json_array",
    "complete_json_structure",
    "create_fallback_json",
    "detect_content_type",
    "extract_candidates",
    "parse_with_fallback",
    "ParseFailure",
    "recover_json",
    "Recovery",
    "salvage_objects",
    "STRATEGIES",
    "Strategy",
    "strip_markdown_fences",
]
