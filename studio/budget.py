"""
budget.py: Episode budget arithmetic over tab data.

The budget tab holds ``baseBudget`` (fixed costs with a ``total``) and
``optionalBudget`` (``crew``/``equipment``/``miscellaneous`` line items the
producer can include or exclude).  Buy/rent decisions made on the
props/wardrobe and equipment tabs add a procurement delta on top.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List

from .document_io import Document

OPTIONAL_CATEGORIES = ("crew", "equipment", "miscellaneous")

STATUS_THRESHOLDS = (
    (300, "excellent"),
    (500, "good"),
    (625, "warning"),
)

_BUY_SOURCES = frozenset({"buy", "purchase"})
_RENT_SOURCES = frozenset({"rent", "rental"})
_RENT_OWNERSHIP = frozenset({"rent", "renting"})
_OWNED = frozenset({"own", "owned"})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_items(optional_budget: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for category in OPTIONAL_CATEGORIES:
        yield from optional_budget.get(category) or []


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def selected_optional_total(optional_budget: Dict[str, Any] | None) -> float:
    """Sum of ``suggestedCost`` over included optional items."""
    if not optional_budget:
        return 0
    return sum(
        item.get("suggestedCost") or 0
        for item in _optional_items(optional_budget)
        if item.get("included")
    )


def procurement_delta(document: Document) -> float:
    """Extra spend implied by buy/rent choices on other tabs.

    Counts props and wardrobe items sourced by purchase or rental with a
    numeric ``estimatedCost``, plus rented equipment with a numeric ``cost``.
    """
    total = 0
    props_wardrobe = document.get("propsWardrobe") or {}
    for item in list(props_wardrobe.get("props") or []) + list(props_wardrobe.get("wardrobe") or []):
        source = item.get("source")
        if source in _BUY_SOURCES | _RENT_SOURCES and _is_number(item.get("estimatedCost")):
            total += item["estimatedCost"]

    equipment_items = (document.get("equipment") or {}).get("items")
    if isinstance(equipment_items, list):
        for item in equipment_items:
            if item.get("ownership") in _RENT_OWNERSHIP and _is_number(item.get("cost")):
                total += item["cost"]
    return total


def current_total(document: Document) -> float:
    """Base budget plus selected optional items plus procurement delta.

    An episode with no base budget yet totals 0.
    """
    budget = document.get("budget") or {}
    base = budget.get("baseBudget")
    if not base:
        return 0
    return (
        base.get("total", 0)
        + selected_optional_total(budget.get("optionalBudget"))
        + procurement_delta(document)
    )


def budget_status(total: float) -> str:
    for limit, status in STATUS_THRESHOLDS:
        if total <= limit:
            return status
    return "over"


# ---------------------------------------------------------------------------
# Optional line-item edits
# ---------------------------------------------------------------------------

def _with_item_update(budget_data: Dict[str, Any], item_id: str, update) -> Dict[str, Any]:
    new_data = copy.deepcopy(budget_data)
    optional = new_data.get("optionalBudget")
    if not optional:
        raise ValueError("budget has no optionalBudget")

    found = False
    for item in _optional_items(optional):
        if item.get("id") == item_id:
            update(item)
            found = True
    if not found:
        raise KeyError(f"no optional budget item with id {item_id!r}")

    optional["total"] = selected_optional_total(optional)
    base_total = (new_data.get("baseBudget") or {}).get("total", 0)
    new_data["totalBudget"] = base_total + optional["total"]
    return new_data


def toggle_optional_item(budget_data: Dict[str, Any], item_id: str) -> Dict[str, Any]:
    """Return a copy of the budget tab with one optional item's ``included`` flipped.

    ``optionalBudget.total`` and ``totalBudget`` are recomputed.

    Raises:
        ValueError: If the budget has no optional section.
        KeyError: If no optional item has id *item_id*.
    """
    def flip(item: Dict[str, Any]) -> None:
        item["included"] = not item.get("included")

    return _with_item_update(budget_data, item_id, flip)


def set_optional_cost(budget_data: Dict[str, Any], item_id: str, cost: float) -> Dict[str, Any]:
    """Return a copy of the budget tab with one optional item's cost replaced.

    Raises:
        ValueError: If *cost* is negative or the budget has no optional section.
        KeyError: If no optional item has id *item_id*.
    """
    if not _is_number(cost) or cost < 0:
        raise ValueError(f"cost must be a non-negative number, got {cost!r}")

    def set_cost(item: Dict[str, Any]) -> None:
        item["suggestedCost"] = cost

    return _with_item_update(budget_data, item_id, set_cost)


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------

def equipment_stats(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Summary counts for an equipment list.

    ``totalCost`` multiplies each item's ``totalCost`` (or ``costPerDay``)
    by its ``quantity`` (default 1).
    """
    by_category: Dict[str, int] = {}
    total_cost = 0
    owned = 0
    for item in items:
        category = item.get("category") or "other"
        by_category[category] = by_category.get(category, 0) + 1
        unit = item.get("totalCost") or item.get("costPerDay") or 0
        total_cost += unit * (item.get("quantity") or 1)
        if item.get("ownership") in _OWNED:
            owned += 1
    return {
        "totalItems": len(items),
        "totalCost": total_cost,
        "ownedCount": owned,
        "byCategory": by_category,
    }
