"""Read-only views over attempts for the student history and admin reports.

Attempts keep pointing at quizzes that may since have been deleted, so every
lookup here resolves the quiz id and tolerates a miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from quiz_portal.constants.quiz_constants import UNKNOWN_QUIZ_TITLE
from quiz_portal.core.models import Attempt, Quiz, User
from quiz_portal.core.quiz_api import QuizApi
from quiz_portal.core.services.scoring import is_passing


@dataclass(slots=True)
class HistoryEntry:
    attempt: Attempt
    quiz_title: str
    passed: bool


@dataclass(slots=True)
class QuestionReview:
    question_text: str
    selected_option: str | None
    correct_option: str
    is_correct: bool


@dataclass(slots=True)
class AttemptReview:
    attempt: Attempt
    quiz_title: str
    passed: bool
    questions: list[QuestionReview]


@dataclass(slots=True)
class StudentReport:
    student: User
    entries: list[HistoryEntry]


def quiz_title(quizzes: Iterable[Quiz], quiz_id: str, fallback: str = UNKNOWN_QUIZ_TITLE) -> str:
    return next((quiz.title for quiz in quizzes if quiz.id == quiz_id), fallback)


def format_score(score: float, digits: int = 2) -> str:
    return f"{score:.{digits}f}%"


def _history_entries(attempts: Iterable[Attempt], quizzes: list[Quiz]) -> list[HistoryEntry]:
    return [
        HistoryEntry(
            attempt=attempt,
            quiz_title=quiz_title(quizzes, attempt.quiz_id),
            passed=is_passing(attempt.score),
        )
        for attempt in attempts
    ]


def student_history(api: QuizApi, student_id: str) -> list[HistoryEntry]:
    """Return a student's attempts, most recent first."""
    attempts = sorted(
        api.get_attempts_by_student(student_id),
        key=lambda attempt: attempt.end_time,
        reverse=True,
    )
    return _history_entries(attempts, api.get_quizzes())


def review_attempt(api: QuizApi, attempt: Attempt) -> AttemptReview | None:
    """Pair each answer with its question, or ``None`` if the quiz is gone."""
    quiz = api.get_quiz_by_id(attempt.quiz_id)
    if quiz is None:
        return None
    questions: list[QuestionReview] = []
    for index, question in enumerate(quiz.questions):
        answer = attempt.answers[index] if index < len(attempt.answers) else None
        selected = None
        if answer is not None and 0 <= answer < len(question.options):
            selected = question.options[answer]
        questions.append(
            QuestionReview(
                question_text=question.question_text,
                selected_option=selected,
                correct_option=question.options[question.correct_answer_index],
                is_correct=answer == question.correct_answer_index,
            )
        )
    return AttemptReview(
        attempt=attempt,
        quiz_title=quiz.title,
        passed=is_passing(attempt.score),
        questions=questions,
    )


def find_attempt(api: QuizApi, attempt_id: str) -> Attempt | None:
    return next((attempt for attempt in api.get_attempts() if attempt.id == attempt_id), None)


def student_reports(api: QuizApi) -> list[StudentReport]:
    """Every student with all of their attempts, in recorded order."""
    attempts = api.get_attempts()
    quizzes = api.get_quizzes()
    return [
        StudentReport(
            student=student,
            entries=_history_entries(
                (attempt for attempt in attempts if attempt.student_id == student.id),
                quizzes,
            ),
        )
        for student in api.get_students()
    ]
