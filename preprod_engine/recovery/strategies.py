"""The ordered recovery ladder.

Each strategy is a named sequence of repair steps applied to the untouched
candidate text before one ``json.loads`` attempt.  Strategies are ordered
cheapest first; the expensive character-level rewrites only run when every
lighter strategy has already failed, since they can alter valid content.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from preprod_engine.recovery.repairs import (
    complete_json_structure,
    escape_string_controls,
    normalize_outside_strings,
    normalize_smart_quotes,
    repair_inner_quotes,
    strip_trailing_commas,
)

Repair = Callable[[str], str]


@dataclass(frozen=True)
class Strategy:
    name: str
    repairs: Tuple[Repair, ...]

    def apply(self, text: str) -> str:
        for repair in self.repairs:
            text = repair(text)
        return text


STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("direct", ()),
    Strategy("cleanup", (normalize_outside_strings, strip_trailing_commas)),
    Strategy(
        "smart_quotes",
        (normalize_smart_quotes, normalize_outside_strings, strip_trailing_commas),
    ),
    Strategy("escape_controls", (escape_string_controls, strip_trailing_commas)),
    Strategy(
        "inner_quotes",
        (escape_string_controls, repair_inner_quotes, strip_trailing_commas),
    ),
    Strategy("balance", (escape_string_controls, complete_json_structure)),
)
