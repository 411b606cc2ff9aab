"""Array-specialised recovery with per-object salvage.

Breakdown-style responses are arrays of many similar objects.  When the
array as a whole cannot be recovered, the well-formed objects inside it
usually can: ``salvage_objects`` isolates each ``{...}`` span, parses it on
its own, and keeps the ones that carry the expected key.  Only the objects
that stay malformed are lost.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from preprod_engine.recovery.errors import ParseFailure
from preprod_engine.recovery.extract import find_matching_close, strip_markdown_fences
from preprod_engine.recovery.parser import recover_json

LOGGER = logging.getLogger(__name__)

DEFAULT_ITEM_KEY = "sceneNumber"


def _as_list(value: Any, item_key: str) -> Optional[List[Any]]:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        if item_key in value:
            return [value]
        lists = [v for v in value.values() if isinstance(v, list)]
        if len(lists) == 1:
            return lists[0]
    return None


def _parse_fragment(fragment: str) -> Optional[Any]:
    try:
        return recover_json(fragment).value
    except ParseFailure:
        return None


def salvage_objects(raw_content: str, item_key: str = DEFAULT_ITEM_KEY) -> List[Dict[str, Any]]:
    """Recover every parseable object carrying *item_key* from *raw_content*.

    Objects are scanned left to right.  A span that parses to a dict with
    *item_key* is kept and skipped over; any other span is descended into so
    that nested items inside a broken wrapper are still found.
    """
    text = strip_markdown_fences(raw_content)
    recovered: List[Dict[str, Any]] = []
    pos = 0
    while True:
        start = text.find("{", pos)
        if start == -1:
            break
        end = find_matching_close(text, start)
        fragment = text[start:end + 1] if end is not None else text[start:]
        value = _parse_fragment(fragment)
        if isinstance(value, dict) and item_key in value:
            recovered.append(value)
            if end is None:
                break
            pos = end + 1
            continue
        if value is None and item_key in fragment and _is_leaf(fragment):
            LOGGER.warning("skipping malformed object: %s...", fragment[:50])
        pos = start + 1
    return recovered


def _is_leaf(fragment: str) -> bool:
    return "{" not in fragment[1:]


def clean_and_parse_json_array(
    raw_content: str,
    item_key: str = DEFAULT_ITEM_KEY,
) -> List[Any]:
    """Recover a JSON array from *raw_content*.

    A top-level array is returned as-is.  A wrapper object with exactly one
    list field is unwrapped, and a single object carrying *item_key*
    becomes a one-element list.  When the document cannot be recovered as a
    whole, individual objects are salvaged.

    Raises:
        ParseFailure: stage "shape" when the recovered value is not
            array-like; the pipeline's own failure when nothing could be
            salvaged either.
    """
    try:
        value = recover_json(raw_content).value
    except ParseFailure as exc:
        if exc.stage == "input":
            raise
        salvaged = salvage_objects(raw_content, item_key)
        if not salvaged:
            raise
        LOGGER.info("recovered %d objects from malformed array", len(salvaged))
        return salvaged

    items = _as_list(value, item_key)
    if items is None:
        raise ParseFailure(
            "shape",
            f"expected an array, got {type(value).__name__}",
            raw_content,
        )
    return items
