"""Key-value backed persistence for user preferences."""

from __future__ import annotations

import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

from pydantic import ValidationError

from ..config import settings
from ..exceptions import PersistenceCorrupt
from ..schemas.preferences import Preferences

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "storeLocatorPrefs"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """Durable key-value store kept as a single JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or settings.preferences_file).resolve()
        # serializes read-modify-write cycles within the process
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PersistenceCorrupt(f"Unreadable key-value file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceCorrupt(f"Key-value file {self.path} does not hold an object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read()
            except PersistenceCorrupt as exc:
                logger.warning(f"{exc}; starting a fresh file")
                data = {}
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
                tmp_path = Path(handle.name)
            tmp_path.replace(self.path)


class PreferenceStore:
    """Reads and shallow-merges the persisted ``Preferences`` document.

    Unreadable documents fall back to defaults, and so do individual fields that
    fail validation; neither is ever raised to the caller.
    """

    def __init__(self, store: KeyValueStore, key: str = PREFERENCES_KEY) -> None:
        self.store = store
        self.key = key

    def _load_raw(self) -> dict[str, Any]:
        try:
            payload = self.store.get(self.key)
            if not payload:
                return {}
            raw = json.loads(payload)
            if not isinstance(raw, dict):
                raise PersistenceCorrupt("Preferences document is not an object")
            return raw
        except (PersistenceCorrupt, json.JSONDecodeError, TypeError) as exc:
            logger.warning(f"Ignoring corrupt preferences, using defaults: {exc}")
            return {}

    def get(self) -> Preferences:
        merged: dict[str, Any] = {}
        for name, value in self._load_raw().items():
            if name not in Preferences.model_fields:
                continue
            try:
                Preferences.model_validate({**merged, name: value})
            except ValidationError:
                logger.warning("Invalid persisted preference '%s', using default", name)
                continue
            merged[name] = value
        return Preferences.model_validate(merged)

    def merge(self, partial: Mapping[str, Any]) -> Preferences:
        """Overwrite the given top-level fields and persist the whole document.

        Raises ``pydantic.ValidationError`` when ``partial`` itself is invalid;
        nothing is written in that case.
        """

        current = self.get()
        unknown = set(partial) - set(Preferences.model_fields)
        if unknown:
            raise ValueError(f"Unknown preference fields: {', '.join(sorted(unknown))}")
        updated = Preferences.model_validate({**current.model_dump(), **partial})
        self.store.set(self.key, updated.model_dump_json())
        return updated

    def set_preferred_store(self, store_id: str, store_name: str) -> Preferences:
        return self.merge({"preferredStoreId": store_id, "preferredStoreName": store_name})

    def clear_preferred_store(self) -> Preferences:
        return self.merge({"preferredStoreId": None, "preferredStoreName": None})
