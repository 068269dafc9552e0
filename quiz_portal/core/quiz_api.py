"""Data access facade over the users, quizzes and attempts collections."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from threading import Lock
from uuid import uuid4

from quiz_portal.constants.storage_constants import ATTEMPTS_KEY, QUIZZES_KEY, USERS_KEY
from quiz_portal.core.models import Attempt, AttemptDraft, Quiz, User, UserRole
from quiz_portal.core.seed_data import seed_initial_data
from quiz_portal.core.services.credentials import CredentialVerifier, PlaintextCredentialVerifier
from quiz_portal.core.services.record_store import RecordStore
from quiz_portal.storage.key_value_storage import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardStats:
    """Collection sizes shown on the admin dashboard."""

    students: int
    quizzes: int
    attempts: int


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


class QuizApi:
    """Synchronous CRUD and query operations over the persisted collections.

    Every operation works on the full collection. Read-modify-write operations
    hold the instance lock from the read until the write completes; writers in
    other processes sharing the same storage are not coordinated.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        verifier: CredentialVerifier | None = None,
        seed: bool = True,
    ) -> None:
        self._lock = Lock()
        self._store = RecordStore(storage)
        self._verifier = verifier or PlaintextCredentialVerifier()
        if seed:
            seed_initial_data(self._store)

    @property
    def store(self) -> RecordStore:
        return self._store

    # --- Raw collections ---

    def get_users(self) -> list[User]:
        return self._store.read(USERS_KEY, User.from_record)

    def save_users(self, users: list[User]) -> None:
        self._store.write(USERS_KEY, users)

    def get_quizzes(self) -> list[Quiz]:
        return self._store.read(QUIZZES_KEY, Quiz.from_record)

    def save_quizzes(self, quizzes: list[Quiz]) -> None:
        self._store.write(QUIZZES_KEY, quizzes)

    def get_attempts(self) -> list[Attempt]:
        return self._store.read(ATTEMPTS_KEY, Attempt.from_record)

    def save_attempts(self, attempts: list[Attempt]) -> None:
        self._store.write(ATTEMPTS_KEY, attempts)

    # --- Users ---

    def find_user_by_credentials(
        self,
        identifier: str,
        password: str | None,
        role: UserRole = UserRole.STUDENT,
    ) -> User | None:
        for user in self.get_users():
            if user.role != role:
                continue
            if user.identifier() == identifier and self._verifier.verify(user, password):
                return user
        return None

    def register_student(
        self,
        name: str,
        registration_number: str,
        password: str | None,
    ) -> User | None:
        """Create a student account, or return ``None`` if the number is taken.

        Uniqueness is checked against every user, whatever their role.
        """
        with self._lock:
            users = self.get_users()
            if any(user.registration_number == registration_number for user in users):
                logger.info("Registration number %s is already in use", registration_number)
                return None
            new_user = User(
                id=_new_id("student"),
                name=name,
                role=UserRole.STUDENT,
                registration_number=registration_number,
                password=password,
            )
            users.append(new_user)
            self.save_users(users)
        logger.info("Registered student %s (%s)", new_user.id, registration_number)
        return new_user

    def get_students(self) -> list[User]:
        return [user for user in self.get_users() if user.role == UserRole.STUDENT]

    # --- Quizzes ---

    def get_quiz_by_id(self, quiz_id: str) -> Quiz | None:
        return next((quiz for quiz in self.get_quizzes() if quiz.id == quiz_id), None)

    def get_active_quizzes(self) -> list[Quiz]:
        return [quiz for quiz in self.get_quizzes() if quiz.is_active]

    def save_quiz(self, quiz: Quiz) -> Quiz:
        """Insert ``quiz`` or replace the stored quiz with the same id."""
        with self._lock:
            quizzes = self.get_quizzes()
            index = next((i for i, existing in enumerate(quizzes) if existing.id == quiz.id), -1)
            if index >= 0:
                quizzes[index] = quiz
            else:
                quizzes.append(quiz)
            self.save_quizzes(quizzes)
        return quiz

    def delete_quiz(self, quiz_id: str) -> bool:
        """Remove a quiz; attempts referencing it are left untouched."""
        with self._lock:
            quizzes = self.get_quizzes()
            remaining = [quiz for quiz in quizzes if quiz.id != quiz_id]
            if len(remaining) == len(quizzes):
                return False
            self.save_quizzes(remaining)
        logger.info("Deleted quiz %s", quiz_id)
        return True

    def toggle_quiz_active(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            quizzes = self.get_quizzes()
            for index, quiz in enumerate(quizzes):
                if quiz.id == quiz_id:
                    updated = replace(quiz, is_active=not quiz.is_active)
                    quizzes[index] = updated
                    self.save_quizzes(quizzes)
                    return updated
        return None

    # --- Attempts ---

    def get_attempts_by_student(self, student_id: str) -> list[Attempt]:
        return [attempt for attempt in self.get_attempts() if attempt.student_id == student_id]

    def save_attempt(self, draft: AttemptDraft) -> Attempt:
        """Persist a new attempt; this is the only write path for attempts."""
        with self._lock:
            attempts = self.get_attempts()
            attempt = Attempt.from_draft(_new_id("attempt"), draft)
            attempts.append(attempt)
            self.save_attempts(attempts)
        logger.info(
            "Recorded attempt %s for student %s on quiz %s (%.2f%%)",
            attempt.id,
            attempt.student_id,
            attempt.quiz_id,
            attempt.score,
        )
        return attempt

    # --- Dashboard ---

    def get_dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            students=len(self.get_students()),
            quizzes=len(self.get_quizzes()),
            attempts=len(self.get_attempts()),
        )
