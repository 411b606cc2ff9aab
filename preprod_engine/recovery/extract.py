"""Locate the JSON payload inside free-form model output.

LLM responses usually wrap the payload in a markdown fence and surround it
with prose ("Here is the breakdown you asked for: ...").  The helpers here
peel those layers off without attempting any repair.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

_FENCED_RE = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n?([\s\S]*?)```")
_OPEN_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?[ \t]*\r?\n?")

_CLOSERS = {"{": "}", "[": "]"}


def scan(text: str, start: int = 0) -> Iterator[Tuple[int, str, bool]]:
    """Yield ``(index, char, in_string)`` for each character from *start*.

    *in_string* is the state *before* the character is consumed, so the
    opening quote of a string reports ``False`` and its closing quote
    reports ``True``.  Backslash escapes are honoured inside strings.
    """
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        yield i, ch, in_string
        if escape:
            escape = False
        elif in_string and ch == "\\":
            escape = True
        elif ch == '"':
            in_string = not in_string


def strip_markdown_fences(text: str) -> str:
    """Return the body of the first fenced code block, or *text* unchanged.

    An opening fence without its closing partner (truncated output) is
    removed as well.
    """
    m = _FENCED_RE.search(text)
    if m:
        return m.group(1).strip()
    m = _OPEN_FENCE_RE.match(text)
    if m:
        return text[m.end():].strip()
    return text.strip()


def find_matching_close(text: str, start: int) -> Optional[int]:
    """Index of the bracket closing the one at *start*, or None if it never closes."""
    depth = 0
    for i, ch, in_string in scan(text, start):
        if in_string:
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i
    return None


def _first_opener(text: str) -> int:
    positions = [p for p in (text.find("{"), text.find("[")) if p != -1]
    return min(positions) if positions else -1


def extract_candidates(text: str) -> List[str]:
    """Return the candidate JSON spans of *text*, most likely first.

    The payload starts at the first ``{`` or ``[``.  When the structure
    closes, the primary candidate ends at its matching closer.  When it
    never closes (truncation, or quotes that confuse the scanner) the
    primary candidate runs to the end of the text and a secondary candidate
    ends at the last closer of the same kind.
    """
    body = text.strip()
    start = _first_opener(body)
    if start == -1:
        return [body]

    end = find_matching_close(body, start)
    if end is not None:
        return [body[start:end + 1]]

    candidates = [body[start:].rstrip()]
    last = body.rfind(_CLOSERS[body[start]])
    if last > start:
        bounded = body[start:last + 1]
        if bounded != candidates[0]:
            candidates.append(bounded)
    return candidates
