"""Adapter that keeps JSON record collections in a key/value storage."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Protocol, TypeVar

from quiz_portal.storage.key_value_storage import KeyValueStorage


class SupportsRecord(Protocol):
    def to_record(self) -> dict[str, Any]: ...


T = TypeVar("T")


class RecordStore:
    """Reads and writes whole collections of records under string keys."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def has(self, key: str) -> bool:
        return bool(self._storage.get_item(key))

    def read(self, key: str, factory: Callable[[dict[str, Any]], T]) -> list[T]:
        """Return every record stored under ``key``; an absent key reads as empty."""
        raw = self._storage.get_item(key)
        if not raw:
            return []
        return [factory(item) for item in json.loads(raw)]

    def write(self, key: str, records: Iterable[SupportsRecord]) -> None:
        """Replace the collection under ``key``."""
        payload = [record.to_record() for record in records]
        self._storage.set_item(key, json.dumps(payload))

    def read_object(self, key: str, factory: Callable[[dict[str, Any]], T]) -> T | None:
        raw = self._storage.get_item(key)
        if not raw:
            return None
        return factory(json.loads(raw))

    def write_object(self, key: str, record: SupportsRecord) -> None:
        self._storage.set_item(key, json.dumps(record.to_record()))

    def remove(self, key: str) -> None:
        self._storage.remove_item(key)
