import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.storefinder.persistence.preferences import (
    PREFERENCES_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    PreferenceStore,
)
from src.storefinder.schemas.preferences import Preferences


def test_defaults_when_nothing_is_stored():
    prefs = PreferenceStore(InMemoryKeyValueStore()).get()

    assert prefs == Preferences()
    assert prefs.sortBy == "distance"
    assert prefs.lastLocation is None


def test_merge_then_get_reflects_only_merged_fields():
    store = PreferenceStore(InMemoryKeyValueStore())
    store.merge({"sortBy": "name", "selectedServices": ["deli"]})

    store.merge({"openNow": True})
    prefs = store.get()

    assert prefs.sortBy == "name"
    assert prefs.selectedServices == ["deli"]
    assert prefs.openNow is True
    assert prefs.lastSearch == ""


def test_merge_is_shallow():
    store = PreferenceStore(InMemoryKeyValueStore())
    store.merge({"selectedServices": ["deli", "bakery"], "lastLocation": {"lat": 45.5, "lng": -122.6}})

    store.merge({"selectedServices": ["pharmacy"]})
    prefs = store.get()

    assert prefs.selectedServices == ["pharmacy"]
    assert prefs.lastLocation.lat == 45.5


def test_corrupt_document_degrades_to_defaults():
    kv = InMemoryKeyValueStore({PREFERENCES_KEY: "{not json"})

    assert PreferenceStore(kv).get() == Preferences()


def test_invalid_field_falls_back_but_keeps_valid_ones():
    kv = InMemoryKeyValueStore(
        {PREFERENCES_KEY: json.dumps({"sortBy": "sideways", "openNow": True, "lastLocation": {"lat": 0, "lng": 0}})}
    )

    prefs = PreferenceStore(kv).get()

    assert prefs.sortBy == "distance"
    assert prefs.openNow is True
    assert prefs.lastLocation is None


def test_invalid_merge_is_rejected_without_writing():
    kv = InMemoryKeyValueStore()
    store = PreferenceStore(kv)

    with pytest.raises(ValidationError):
        store.merge({"sortBy": "sideways"})
    with pytest.raises(ValueError):
        store.merge({"favouriteColor": "green"})
    assert kv.get(PREFERENCES_KEY) is None


def test_preferred_store_set_and_clear():
    store = PreferenceStore(InMemoryKeyValueStore())
    store.merge({"sortBy": "recent"})

    store.set_preferred_store("store-2", "Hawthorne Grocery")
    assert store.get().preferredStoreId == "store-2"
    assert store.get().preferredStoreName == "Hawthorne Grocery"

    store.clear_preferred_store()
    prefs = store.get()
    assert prefs.preferredStoreId is None
    assert prefs.sortBy == "recent"


def test_json_file_store_survives_restart(tmp_path: Path):
    path = tmp_path / "prefs" / "preferences.json"
    PreferenceStore(JsonFileKeyValueStore(path)).merge({"lastSearch": "Portland, OR"})

    reopened = PreferenceStore(JsonFileKeyValueStore(path))

    assert reopened.get().lastSearch == "Portland, OR"
    assert path.exists()


def test_json_file_store_recovers_from_corrupt_file(tmp_path: Path):
    path = tmp_path / "preferences.json"
    path.write_text("]]]", encoding="utf-8")
    store = PreferenceStore(JsonFileKeyValueStore(path))

    assert store.get() == Preferences()

    store.merge({"openNow": True})
    assert store.get().openNow is True


def test_json_file_store_concurrent_writes_keep_every_key(tmp_path: Path):
    path = tmp_path / "preferences.json"
    kv = JsonFileKeyValueStore(path)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda n: kv.set(f"session-{n}", str(n)), range(40)))

    assert json.loads(path.read_text(encoding="utf-8")) == {f"session-{n}": str(n) for n in range(40)}
    assert [item.name for item in tmp_path.iterdir()] == ["preferences.json"]
