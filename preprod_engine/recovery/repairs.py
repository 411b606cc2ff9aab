"""Text repair steps used by the recovery ladder.

Every step is a pure ``str -> str`` function.  Steps never parse; they only
rewrite the candidate so that a later ``json.loads`` has a chance.  All of
them track string state so that content inside string literals is only
touched where the step explicitly targets it.
"""
from __future__ import annotations

import re
from typing import List

from preprod_engine.recovery.extract import scan

_CLOSERS = {"{": "}", "[": "]"}

_SMART_QUOTES = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"', "″": '"',
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'",
})

_STRING_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\b": "\\b", "\f": "\\f"}

# Value starts that may legitimately follow ``,`` after a closing quote.
_VALUE_STARTS = frozenset('"{[]}-0123456789tfn')

# A literal or number cut off by truncation: ``tru``, ``nul``, ``12.``, ``3e``.
_PARTIAL_LITERAL_RE = re.compile(
    r"([:\[,]\s*)(?:t|tr|tru|f|fa|fal|fals|n|nu|nul|-|-?\d+\.|-?\d+(?:\.\d+)?[eE][+-]?)$"
)
# An object key with no value yet: ``{"a": 1, "b"`` or ``{"b":``.
_DANGLING_KEY_RE = re.compile(r'([{,])\s*"(?:[^"\\]|\\.)*"\s*:?\s*$')
# A \uXXXX escape cut off before its fourth hex digit.
_PARTIAL_UNICODE_RE = re.compile(r"(?<!\\)((?:\\\\)*)\\u[0-9a-fA-F]{0,3}$")


def _is_control(ch: str) -> bool:
    code = ord(ch)
    return code < 0x20 or 0x7F <= code <= 0x9F


def normalize_outside_strings(text: str) -> str:
    """Replace control characters that sit outside string literals with spaces."""
    out: List[str] = []
    for _, ch, in_string in scan(text):
        if not in_string and ch not in "\n\r\t" and _is_control(ch):
            out.append(" ")
        else:
            out.append(ch)
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede ``}`` or ``]`` (outside strings)."""
    out: List[str] = []
    n = len(text)
    for i, ch, in_string in scan(text):
        if ch == "," and not in_string:
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                continue
        out.append(ch)
    return "".join(out)


def normalize_smart_quotes(text: str) -> str:
    """Map typographic quotes onto their ASCII equivalents."""
    return text.translate(_SMART_QUOTES)


def escape_string_controls(text: str) -> str:
    """Escape raw control characters that occur inside string literals.

    Models routinely emit literal newlines inside dialogue strings; those
    become ``\\n`` so the line break survives as string content.  Control
    characters outside strings become plain spaces.
    """
    out: List[str] = []
    in_string = False
    escape = False
    for ch in text:
        if in_string:
            if escape:
                escape = False
                if ch in _STRING_ESCAPES:
                    # backslash already emitted: keep only the escape letter
                    out.append(_STRING_ESCAPES[ch][1])
                    continue
                if _is_control(ch):
                    out.append(f"u{ord(ch):04x}")
                    continue
                out.append(ch)
            elif ch == "\\":
                escape = True
                out.append(ch)
            elif ch == '"':
                in_string = False
                out.append(ch)
            elif ch in _STRING_ESCAPES:
                out.append(_STRING_ESCAPES[ch])
            elif _is_control(ch):
                out.append(f"\\u{ord(ch):04x}")
            else:
                out.append(ch)
        else:
            if ch == '"':
                in_string = True
                out.append(ch)
            elif ch not in "\n\r\t" and _is_control(ch):
                out.append(" ")
            else:
                out.append(ch)
    return "".join(out)


def _closes_string(text: str, j: int) -> bool:
    """Decide whether a quote whose successor is at *j* ends a string."""
    n = len(text)
    while j < n and text[j].isspace():
        j += 1
    if j >= n or text[j] in ":}]":
        return True
    if text[j] != ",":
        return False
    j += 1
    while j < n and text[j].isspace():
        j += 1
    return j >= n or text[j] in _VALUE_STARTS


def repair_inner_quotes(text: str) -> str:
    """Escape double quotes that appear inside a string value.

    A quote is taken as closing only when it is followed by ``:``, ``}``,
    ``]``, the end of input, or a comma that introduces another value.
    Every other quote inside a string is escaped.
    """
    out: List[str] = []
    in_string = False
    escape = False
    for i, ch in enumerate(text):
        if escape:
            escape = False
            out.append(ch)
        elif not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
        elif ch == "\\":
            escape = True
            out.append(ch)
        elif ch == '"':
            if _closes_string(text, i + 1):
                in_string = False
                out.append(ch)
            else:
                out.append('\\"')
        else:
            out.append(ch)
    return "".join(out)


def _trim_dangling_tail(text: str, innermost: str) -> str:
    """Remove a trailing comma, partial literal, or value-less key."""
    while True:
        before = text
        text = text.rstrip()
        text = _PARTIAL_LITERAL_RE.sub(r"\1", text).rstrip()
        if innermost == "{":
            m = _DANGLING_KEY_RE.search(text)
            if m:
                text = text[:m.start()] + ("{" if m.group(1) == "{" else "")
        if text.endswith(","):
            text = text[:-1]
        if text == before:
            return text


def complete_json_structure(text: str) -> str:
    """Close whatever a truncated JSON document left open.

    Walks *text* tracking the open ``{``/``[`` stack while respecting string
    state.  An unterminated string is closed (a dangling backslash or a
    partial ``\\u`` escape is dropped first), a trailing comma or value-less
    key is trimmed, and the missing closers are appended innermost first.
    """
    stack: List[str] = []
    in_string = False
    escape = False
    for ch in text:
        if escape:
            escape = False
        elif in_string:
            if ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append(ch)
        elif ch in "}]" and stack and _CLOSERS[stack[-1]] == ch:
            stack.pop()

    result = text
    if in_string:
        if escape:
            result = result[:-1]
        result = _PARTIAL_UNICODE_RE.sub(r"\1", result)
        result += '"'

    for opener in reversed(stack):
        result = _trim_dangling_tail(result, opener) + _CLOSERS[opener]
    return strip_trailing_commas(result)
