"""Service holding the currently authenticated user."""

from __future__ import annotations

import logging
from threading import Lock

from quiz_portal.constants.storage_constants import SESSION_KEY
from quiz_portal.core.models import User, UserRole
from quiz_portal.core.quiz_api import QuizApi

logger = logging.getLogger(__name__)


class AuthSession:
    """Tracks at most one logged-in user and mirrors it into storage.

    ``open()`` restores the persisted identity without checking it against the
    user collection again; ``close()`` forgets it in memory only.
    """

    def __init__(self, api: QuizApi, session_key: str = SESSION_KEY) -> None:
        self._api = api
        self._session_key = session_key
        self._lock = Lock()
        self._user: User | None = None

    def __enter__(self) -> AuthSession:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def session_key(self) -> str:
        return self._session_key

    def open(self) -> User | None:
        with self._lock:
            self._user = self._api.store.read_object(self._session_key, User.from_record)
            user = self._user
        if user is not None:
            logger.info("Restored session for %s", user.id)
        return user

    def close(self) -> None:
        with self._lock:
            self._user = None

    @property
    def current_user(self) -> User | None:
        with self._lock:
            return self._user

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(
        self,
        identifier: str,
        password: str | None,
        role: UserRole = UserRole.STUDENT,
    ) -> User | None:
        user = self._api.find_user_by_credentials(identifier, password, role)
        if user is None:
            logger.info("Rejected %s login for %s", role.value, identifier)
            return None
        self._establish(user)
        return user

    def register(self, name: str, registration_number: str, password: str | None) -> User | None:
        user = self._api.register_student(name, registration_number, password)
        if user is None:
            return None
        self._establish(user)
        return user

    def logout(self) -> None:
        with self._lock:
            previous = self._user
            self._user = None
            self._api.store.remove(self._session_key)
        if previous is not None:
            logger.info("Logged out %s", previous.id)

    def _establish(self, user: User) -> None:
        with self._lock:
            self._user = user
            self._api.store.write_object(self._session_key, user)
        logger.info("Logged in %s as %s", user.id, user.role.value)
