from __future__ import annotations

import json

import pytest

from quiz_portal.core.models import User, UserRole
from quiz_portal.core.services.record_store import RecordStore
from quiz_portal.storage.key_value_storage import JsonFileStorage, MemoryStorage


def test_memory_storage_get_set_remove():
    storage = MemoryStorage()
    assert storage.get_item("missing") is None

    storage.set_item("key", "value")
    assert storage.get_item("key") == "value"

    storage.remove_item("key")
    storage.remove_item("key")
    assert storage.get_item("key") is None


def test_json_file_storage_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(path)
    storage.set_item("greeting", "hello")

    reopened = JsonFileStorage(path)
    assert reopened.get_item("greeting") == "hello"

    reopened.remove_item("greeting")
    assert JsonFileStorage(path).get_item("greeting") is None


def test_json_file_storage_rejects_malformed_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        JsonFileStorage(path)


def test_json_file_storage_rejects_non_string_values(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"quiz_users": None}), encoding="utf-8")
    with pytest.raises(ValueError):
        JsonFileStorage(path)

    path.write_text(json.dumps({"quiz_users": [1, 2]}), encoding="utf-8")
    with pytest.raises(ValueError):
        JsonFileStorage(path)


def test_record_store_reads_absent_key_as_empty():
    store = RecordStore(MemoryStorage())
    assert store.read("users", User.from_record) == []
    assert store.read_object("session", User.from_record) is None


def test_record_store_overwrites_whole_collection():
    storage = MemoryStorage()
    store = RecordStore(storage)
    alice = User(id="u1", name="Alice", role=UserRole.STUDENT, registration_number="S9", password="pw")
    bob = User(id="u2", name="Bob", role=UserRole.STUDENT, registration_number="S8")

    store.write("users", [alice, bob])
    store.write("users", [bob])

    assert store.read("users", User.from_record) == [bob]
    assert json.loads(storage.get_item("users")) == [
        {"id": "u2", "name": "Bob", "registrationNumber": "S8", "role": "student"}
    ]


def test_record_store_propagates_malformed_json():
    store = RecordStore(MemoryStorage({"users": "[{"}))
    with pytest.raises(json.JSONDecodeError):
        store.read("users", User.from_record)
