"""Domain models for the quiz portal.

Every record converts to and from the camelCase JSON object it is persisted
as, so stored collections stay readable by any client of the same storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """Roles a principal can log in with."""

    STUDENT = "student"
    ADMIN = "admin"


@dataclass(slots=True)
class User:
    """Identity record for a student or an admin."""

    id: str
    name: str
    role: UserRole
    registration_number: str | None = None  # students only
    username: str | None = None  # admins only
    password: str | None = None

    def identifier(self) -> str | None:
        """Return the credential this user logs in with."""
        if self.role is UserRole.STUDENT:
            return self.registration_number
        return self.username

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.registration_number is not None:
            record["registrationNumber"] = self.registration_number
        if self.username is not None:
            record["username"] = self.username
        if self.password is not None:
            record["password"] = self.password
        record["role"] = self.role.value
        return record

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> User:
        return cls(
            id=record["id"],
            name=record["name"],
            role=UserRole(record["role"]),
            registration_number=record.get("registrationNumber"),
            username=record.get("username"),
            password=record.get("password"),
        )


@dataclass(slots=True)
class Question:
    """Multiple-choice question embedded in a quiz."""

    id: str
    question_text: str
    options: list[str]
    correct_answer_index: int

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "questionText": self.question_text,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_answer_index,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Question:
        return cls(
            id=record["id"],
            question_text=record["questionText"],
            options=list(record["options"]),
            correct_answer_index=record["correctAnswerIndex"],
        )


@dataclass(slots=True)
class Quiz:
    """A timed quiz; question order defines answer alignment."""

    id: str
    title: str
    description: str
    duration: int  # minutes
    is_active: bool = False
    questions: list[Question] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "isActive": self.is_active,
            "questions": [question.to_record() for question in self.questions],
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Quiz:
        return cls(
            id=record["id"],
            title=record["title"],
            description=record["description"],
            duration=record["duration"],
            is_active=bool(record.get("isActive", False)),
            questions=[Question.from_record(item) for item in record.get("questions", [])],
        )


@dataclass(slots=True)
class AttemptDraft:
    """A scored submission that has not been assigned an id yet."""

    quiz_id: str
    student_id: str
    start_time: int  # epoch milliseconds
    end_time: int  # epoch milliseconds
    score: float
    answers: list[int | None]


@dataclass(frozen=True, slots=True)
class Attempt:
    """Immutable record of one submitted quiz attempt."""

    id: str
    quiz_id: str
    student_id: str
    start_time: int
    end_time: int
    score: float
    answers: tuple[int | None, ...]

    @classmethod
    def from_draft(cls, attempt_id: str, draft: AttemptDraft) -> Attempt:
        return cls(
            id=attempt_id,
            quiz_id=draft.quiz_id,
            student_id=draft.student_id,
            start_time=draft.start_time,
            end_time=draft.end_time,
            score=draft.score,
            answers=tuple(draft.answers),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quizId": self.quiz_id,
            "studentId": self.student_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "score": self.score,
            "answers": list(self.answers),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Attempt:
        return cls(
            id=record["id"],
            quiz_id=record["quizId"],
            student_id=record["studentId"],
            start_time=record["startTime"],
            end_time=record["endTime"],
            score=float(record["score"]),
            answers=tuple(record.get("answers", [])),
        )
