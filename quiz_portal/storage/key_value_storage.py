"""Synchronous string-keyed storage media.

Both media follow the browser ``localStorage`` contract: string keys map to
string values, and a missing key reads as ``None``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol


class KeyValueStorage(Protocol):
    """Minimal get/set/remove contract the persistence layer relies on."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage kept in a dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Storage persisted as a single JSON object on disk.

    The file is read once on construction and rewritten in full after every
    change. A file that does not contain a JSON object of strings is treated
    as fatal and the decoding error propagates.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._items: dict[str, str] = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def _load(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError(f"Storage file {self._file_path} must contain a JSON object.")
        for key, value in document.items():
            if not isinstance(value, str):
                raise ValueError(f"Storage file {self._file_path} holds a non-string value under {key!r}.")
        return document

    def _flush(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")
