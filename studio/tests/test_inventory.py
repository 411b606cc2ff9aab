"""Tests for studio/inventory.py."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import jsonschema
import pytest

from studio.inventory import (
    JsonFileStore,
    apply_inventory,
    clear_inventory,
    inventory_key,
    load_inventory,
    mark_owned,
    save_inventory,
)

_BIBLE = "bible-42"


class _MemoryStore:
    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return _MemoryStore()
    return JsonFileStore(tmp_path / "store" / "inventory.json")


class TestJsonFileStore:

    def test_get_missing(self, tmp_path: Path):
        assert JsonFileStore(tmp_path / "absent.json").get("k") is None

    def test_set_get_delete(self, tmp_path: Path):
        s = JsonFileStore(tmp_path / "kv.json")
        s.set("a", "1")
        s.set("b", "2")
        assert s.get("a") == "1"
        s.delete("a")
        assert s.get("a") is None
        assert json.loads((tmp_path / "kv.json").read_text(encoding="utf-8")) == {"b": "2"}

    def test_delete_missing_is_noop(self, tmp_path: Path):
        s = JsonFileStore(tmp_path / "kv.json")
        s.delete("nothing")
        assert not (tmp_path / "kv.json").exists()


class TestLoadSave:

    def test_key(self):
        assert inventory_key(_BIBLE) == "equipmentInventory:bible-42"

    def test_absent_is_empty(self, store):
        assert load_inventory(store, _BIBLE) == []

    def test_save_then_load(self, store):
        items = [{"name": "Tripod", "category": "camera"}]
        save_inventory(store, _BIBLE, items)
        assert load_inventory(store, _BIBLE) == items
        assert load_inventory(store, "other-bible") == []

    def test_save_rejects_invalid(self, store):
        with pytest.raises(jsonschema.ValidationError):
            save_inventory(store, _BIBLE, [{"name": ""}])

    def test_unreadable_value_is_empty_and_logged(self, caplog):
        s = _MemoryStore()
        s.set(inventory_key(_BIBLE), "{oops")
        with caplog.at_level(logging.WARNING):
            assert load_inventory(s, _BIBLE) == []
        assert "ignoring unreadable inventory" in caplog.text

    def test_wrong_shape_is_empty(self):
        s = _MemoryStore()
        s.set(inventory_key(_BIBLE), json.dumps({"name": "Tripod"}))
        assert load_inventory(s, _BIBLE) == []

    def test_clear(self, store):
        save_inventory(store, _BIBLE, [{"name": "Tripod", "category": "camera"}])
        clear_inventory(store, _BIBLE)
        assert load_inventory(store, _BIBLE) == []


class TestMarkOwned:

    def test_adds_trimmed_entry(self, store):
        inventory = mark_owned(store, _BIBLE, {"name": "  LED Panel ", "category": "lighting", "cost": 40})
        assert inventory == [{"name": "LED Panel", "category": "lighting"}]
        assert load_inventory(store, _BIBLE) == inventory

    def test_duplicate_is_not_added(self, store):
        mark_owned(store, _BIBLE, {"name": "LED Panel", "category": "lighting"})
        inventory = mark_owned(store, _BIBLE, {"name": "led panel", "category": "lighting"})
        assert len(inventory) == 1

    def test_same_name_other_category_is_added(self, store):
        mark_owned(store, _BIBLE, {"name": "Clamp", "category": "grip"})
        assert len(mark_owned(store, _BIBLE, {"name": "Clamp", "category": "lighting"})) == 2


    def test_uncategorised_item_is_added_once(self, store):
        mark_owned(store, _BIBLE, {"name": "Tripod"})
        inventory = mark_owned(store, _BIBLE, {"name": "Tripod", "category": ""})
        assert inventory == [{"name": "Tripod", "category": "other"}]
        assert apply_inventory([{"name": "Tripod"}], inventory) == [{"name": "Tripod", "ownership": "owned"}]

class TestApplyInventory:

    def test_matching_items_marked_owned(self):
        items = [
            {"id": "e1", "name": " Tripod", "category": "camera", "ownership": "rent"},
            {"id": "e2", "name": "Tripod", "category": "grip", "ownership": "rent"},
            {"id": "e3", "name": "Boom Pole", "category": "audio"},
        ]
        inventory = [
            {"name": "tripod", "category": "camera"},
            {"name": "boom pole ", "category": "audio"},
        ]
        result = apply_inventory(items, inventory)
        assert [i.get("ownership") for i in result] == ["owned", "rent", "owned"]
        assert items[0]["ownership"] == "rent"

    def test_empty_inventory(self):
        items = [{"name": "Tripod", "category": "camera"}]
        assert apply_inventory(items, []) == items
