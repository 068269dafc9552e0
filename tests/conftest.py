from __future__ import annotations

import pytest

from quiz_portal.core.quiz_api import QuizApi
from quiz_portal.core.services.auth_session import AuthSession
from quiz_portal.storage.key_value_storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def api(storage: MemoryStorage) -> QuizApi:
    return QuizApi(storage)


@pytest.fixture
def session(api: QuizApi) -> AuthSession:
    auth = AuthSession(api)
    auth.open()
    return auth
