"""
comments.py: Collaborative comment threads on tab line items.

Any dict with an ``id`` inside a tab's data (a cast member, an equipment
item, a breakdown scene) may carry a ``comments`` list.  All functions are
pure: the input tab data is never mutated.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, Optional

Comment = Dict[str, Any]

_REQUIRED_FIELDS = ("id", "userId", "userName", "content", "timestamp")


def _iter_items(node: Any) -> Iterator[Dict[str, Any]]:
    """Yield every dict carrying an ``id`` under *node*, depth first."""
    if isinstance(node, dict):
        if "id" in node:
            yield node
        for key, value in node.items():
            if key != "comments" and isinstance(value, (dict, list)):
                yield from _iter_items(value)
    elif isinstance(node, list):
        for value in node:
            yield from _iter_items(value)


def _find_item(tab_data: Dict[str, Any], item_id: str) -> Dict[str, Any]:
    for item in _iter_items(tab_data):
        if item["id"] == item_id:
            return item
    raise KeyError(f"no item with id {item_id!r}")


def add_comment(tab_data: Dict[str, Any], item_id: str, comment: Comment) -> Dict[str, Any]:
    """Return a copy of *tab_data* with *comment* appended to item *item_id*.

    Raises:
        ValueError: If *comment* lacks a required field.
        KeyError: If no item has id *item_id*.
    """
    missing = [f for f in _REQUIRED_FIELDS if f not in comment]
    if missing:
        raise ValueError(f"comment missing required field(s): {missing}")

    new_data = copy.deepcopy(tab_data)
    item = _find_item(new_data, item_id)
    entry = {"mentions": [], "resolved": False, **copy.deepcopy(comment)}
    item.setdefault("comments", []).append(entry)
    return new_data


def resolve_comment(
    tab_data: Dict[str, Any],
    item_id: str,
    comment_id: str,
    resolved: bool = True,
) -> Dict[str, Any]:
    """Return a copy of *tab_data* with one comment's resolved flag set.

    Raises:
        KeyError: If the item or the comment does not exist.
    """
    new_data = copy.deepcopy(tab_data)
    item = _find_item(new_data, item_id)
    target: Optional[Comment] = next(
        (c for c in item.get("comments", []) if c.get("id") == comment_id), None
    )
    if target is None:
        raise KeyError(f"no comment {comment_id!r} on item {item_id!r}")
    target["resolved"] = resolved
    return new_data


def open_comment_count(tab_data: Dict[str, Any]) -> int:
    """Number of unresolved comments across every item in *tab_data*."""
    return sum(
        1
        for item in _iter_items(tab_data)
        for c in item.get("comments") or []
        if isinstance(c, dict) and not c.get("resolved")
    )
