from __future__ import annotations

import json

from quiz_portal.constants.storage_constants import ATTEMPTS_KEY, QUIZZES_KEY, USERS_KEY
from quiz_portal.core.quiz_api import QuizApi
from quiz_portal.core.seed_data import seed_initial_data
from quiz_portal.core.services.record_store import RecordStore
from quiz_portal.storage.key_value_storage import MemoryStorage


def test_seed_writes_default_users_and_quizzes():
    storage = MemoryStorage()
    seeded = seed_initial_data(RecordStore(storage))

    assert seeded == [USERS_KEY, QUIZZES_KEY]
    users = json.loads(storage.get_item(USERS_KEY))
    assert [user["id"] for user in users] == ["admin1", "student1", "student2"]
    assert users[0] == {"id": "admin1", "name": "Admin", "username": "admin", "password": "password", "role": "admin"}
    quizzes = json.loads(storage.get_item(QUIZZES_KEY))
    assert [(quiz["id"], quiz["isActive"], len(quiz["questions"])) for quiz in quizzes] == [
        ("quiz1", True, 3),
        ("quiz2", False, 2),
    ]
    assert storage.get_item(ATTEMPTS_KEY) is None


def test_seed_is_idempotent():
    storage = MemoryStorage()
    api = QuizApi(storage)
    api.register_student("Carol", "S003", "secret")

    assert seed_initial_data(api.store) == []
    assert len(QuizApi(storage).get_users()) == 4


def test_seed_only_fills_missing_collections():
    storage = MemoryStorage({USERS_KEY: "[]"})
    assert seed_initial_data(RecordStore(storage)) == [QUIZZES_KEY]
