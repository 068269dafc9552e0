"""Demo accounts and quizzes written on first run."""

from __future__ import annotations

import logging

from quiz_portal.constants.storage_constants import QUIZZES_KEY, USERS_KEY
from quiz_portal.core.models import Question, Quiz, User, UserRole
from quiz_portal.core.services.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"


def default_users() -> list[User]:
    return [
        User(id="admin1", name="Admin", role=UserRole.ADMIN, username="admin", password=DEFAULT_PASSWORD),
        User(id="student1", name="Alice", role=UserRole.STUDENT, registration_number="S001", password=DEFAULT_PASSWORD),
        User(id="student2", name="Bob", role=UserRole.STUDENT, registration_number="S002", password=DEFAULT_PASSWORD),
    ]


def default_quizzes() -> list[Quiz]:
    return [
        Quiz(
            id="quiz1",
            title="React Fundamentals",
            description="Test your knowledge of core React concepts.",
            duration=10,
            is_active=True,
            questions=[
                Question(
                    id="q1-1",
                    question_text="What is JSX?",
                    options=["A JavaScript syntax extension", "A templating engine", "A CSS preprocessor", "A database"],
                    correct_answer_index=0,
                ),
                Question(
                    id="q1-2",
                    question_text="Which hook is used to manage state in a functional component?",
                    options=["useEffect", "useState", "useContext", "useReducer"],
                    correct_answer_index=1,
                ),
                Question(
                    id="q1-3",
                    question_text="How do you pass data from a parent component to a child component?",
                    options=["State", "Context", "Props", "Redux"],
                    correct_answer_index=2,
                ),
            ],
        ),
        Quiz(
            id="quiz2",
            title="Advanced TypeScript",
            description="Test your knowledge of advanced TypeScript features.",
            duration=15,
            is_active=False,
            questions=[
                Question(
                    id="q2-1",
                    question_text="What is a Generic in TypeScript?",
                    options=[
                        "A type of class",
                        "A way to create reusable components",
                        "A feature for type-safe functions",
                        "All of the above",
                    ],
                    correct_answer_index=3,
                ),
                Question(
                    id="q2-2",
                    question_text="What does the `keyof` operator do?",
                    options=[
                        "Returns the type of a key",
                        "Creates a union type of an object's keys",
                        "Checks if a key exists",
                        "Deletes a key",
                    ],
                    correct_answer_index=1,
                ),
            ],
        ),
    ]


def seed_initial_data(store: RecordStore) -> list[str]:
    """Write the demo collections that are still missing and return their keys."""
    seeded: list[str] = []
    if not store.has(USERS_KEY):
        store.write(USERS_KEY, default_users())
        seeded.append(USERS_KEY)
    if not store.has(QUIZZES_KEY):
        store.write(QUIZZES_KEY, default_quizzes())
        seeded.append(QUIZZES_KEY)
    if seeded:
        logger.info("Seeded default data for %s", ", ".join(seeded))
    return seeded
