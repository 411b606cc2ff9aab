"""
inventory.py: Cross-episode owned-equipment inventory.

Gear the production owns is remembered per story bible, so equipment lists
generated for later episodes can be marked as owned automatically.  The
inventory lives in an injected key-value store under
``equipmentInventory:<story_bible_id>`` as a JSON array of
``{"name", "category"}`` entries.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import jsonschema

from preprod_engine.contract_validate import validate_inventory

LOGGER = logging.getLogger(__name__)

InventoryEntry = Dict[str, str]


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class JsonFileStore:
    """KeyValueStore backed by a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, sort_keys=True, indent=2, ensure_ascii=False)
            f.write("\n")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def inventory_key(story_bible_id: str) -> str:
    return f"equipmentInventory:{story_bible_id}"


def _normalize(name: Any) -> str:
    return str(name or "").strip().lower()


def _category(item: Dict[str, Any]) -> str:
    return item.get("category") or "other"


def _matches(entry: InventoryEntry, item: Dict[str, Any]) -> bool:
    return (
        _normalize(entry.get("name")) == _normalize(item.get("name"))
        and _category(entry) == _category(item)
    )


def load_inventory(store: KeyValueStore, story_bible_id: str) -> List[InventoryEntry]:
    """Return the stored inventory; absent or unreadable data yields ``[]``."""
    raw = store.get(inventory_key(story_bible_id))
    if not raw:
        return []
    try:
        items = json.loads(raw)
        validate_inventory(items)
    except (ValueError, jsonschema.ValidationError) as exc:
        LOGGER.warning("ignoring unreadable inventory for %s: %s", story_bible_id, exc)
        return []
    return items


def save_inventory(
    store: KeyValueStore,
    story_bible_id: str,
    items: List[InventoryEntry],
) -> None:
    """Persist *items*.

    Raises:
        jsonschema.ValidationError: If *items* is not a valid inventory.
    """
    validate_inventory(items)
    store.set(inventory_key(story_bible_id), json.dumps(items, ensure_ascii=False))


def mark_owned(
    store: KeyValueStore,
    story_bible_id: str,
    item: Dict[str, Any],
) -> List[InventoryEntry]:
    """Add *item* to the inventory unless an equivalent entry exists.

    Returns:
        The inventory after the update.
    """
    inventory = load_inventory(store, story_bible_id)
    if any(_matches(entry, item) for entry in inventory):
        return inventory
    inventory.append({"name": str(item.get("name", "")).strip(), "category": _category(item)})
    save_inventory(store, story_bible_id, inventory)
    return inventory


def apply_inventory(
    items: List[Dict[str, Any]],
    inventory: List[InventoryEntry],
) -> List[Dict[str, Any]]:
    """Return copies of *items* with ``ownership="owned"`` where the inventory matches.

    Names compare trimmed and case-insensitively; categories must be equal,
    with a missing category counting as ``"other"``.
    """
    result = []
    for item in items:
        new_item = copy.deepcopy(item)
        if any(_matches(entry, item) for entry in inventory):
            new_item["ownership"] = "owned"
        result.append(new_item)
    return result


def clear_inventory(store: KeyValueStore, story_bible_id: str) -> None:
    store.delete(inventory_key(story_bible_id))
