"""Best-effort JSON recovery for model-generated text.

Public entry points
-------------------
    recover_json(raw)            -> Recovery   (value + winning strategy)
    clean_and_parse_json(raw)    -> value      (raises ParseFailure)
    parse_with_fallback(raw, t)  -> dict | list (never raises for str input)

Pipeline: fence stripping, boundary extraction, then the strategy ladder
from ``strategies.STRATEGIES`` on each candidate span.  The first strategy
that yields a JSON value wins.  ``clean_and_parse_json`` always raises on
total failure; substituting a placeholder is the caller's decision, made
explicit through ``parse_with_fallback``.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from preprod_engine.recovery.errors import ParseFailure
from preprod_engine.recovery.extract import extract_candidates, strip_markdown_fences
from preprod_engine.recovery.fallbacks import create_fallback_json, detect_content_type
from preprod_engine.recovery.strategies import STRATEGIES

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recovery:
    value: Any
    strategy: str
    candidate: str


def recover_json(raw_content: str) -> Recovery:
    """Recover a JSON value from *raw_content*.

    Raises:
        ParseFailure: stage "input" for empty or non-string input, stage
            "strategies" when every strategy failed on every candidate.
    """
    if not isinstance(raw_content, str) or not raw_content.strip():
        raise ParseFailure("input", "content must be a non-empty string")

    body = strip_markdown_fences(raw_content)
    try:
        return Recovery(json.loads(body), "direct", body)
    except (ValueError, RecursionError):
        pass

    last_error = "no candidate"
    candidates = extract_candidates(body)
    for candidate in candidates:
        for strategy in STRATEGIES:
            try:
                value = json.loads(strategy.apply(candidate))
            except (ValueError, RecursionError) as exc:
                last_error = str(exc)
                LOGGER.debug("strategy %s failed: %s", strategy.name, last_error)
                continue
            LOGGER.debug("parsed JSON with strategy %s", strategy.name)
            return Recovery(value, strategy.name, candidate)

    LOGGER.warning(
        "all JSON recovery strategies failed (%d chars): %s",
        len(raw_content), last_error,
    )
    raise ParseFailure("strategies", last_error, candidates[0] if candidates else body)


def clean_and_parse_json(raw_content: str) -> Any:
    """Return the JSON value recovered from *raw_content*.

    Raises:
        ParseFailure: nothing could be recovered.
    """
    return recover_json(raw_content).value


def parse_with_fallback(raw_content: str, content_type: Optional[str] = None) -> Any:
    """Like clean_and_parse_json, but substitute a placeholder on failure.

    A bare scalar (``null``, ``42``, ``"text"``) is not a usable result here
    and is replaced as well.  The placeholder shape follows *content_type*, or
    the type guessed from the text itself when no type is given.
    """
    try:
        value = clean_and_parse_json(raw_content)
    except ParseFailure as exc:
        reason = exc.last_error
    else:
        if isinstance(value, (dict, list)):
            return value
        reason = f"expected an object or array, got {type(value).__name__}"

    text = raw_content if isinstance(raw_content, str) else ""
    kind = content_type or detect_content_type(text)
    LOGGER.warning("substituting %s fallback structure: %s", kind, reason)
    return create_fallback_json(kind, text)
