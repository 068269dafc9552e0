"""Scoring of submitted answer sheets and the retry policy built on it."""

from __future__ import annotations

import time
from typing import Iterable, Sequence

from quiz_portal.constants.quiz_constants import PASSING_SCORE_PERCENTAGE
from quiz_portal.core.models import Attempt, AttemptDraft, Question, Quiz
from quiz_portal.core.quiz_api import QuizApi

_MS_PER_MINUTE = 60 * 1000


def current_time_ms() -> int:
    return int(time.time() * 1000)


def blank_answers(quiz: Quiz) -> list[int | None]:
    """Return an answer sheet with every question unanswered."""
    return [None] * len(quiz.questions)


def select_option(answers: Sequence[int | None], question_index: int, option_index: int) -> list[int | None]:
    """Return a copy of ``answers`` with one selection recorded."""
    if not 0 <= question_index < len(answers):
        raise IndexError(f"Question index {question_index} out of range")
    updated = list(answers)
    updated[question_index] = option_index
    return updated


def score_answers(questions: Sequence[Question], answers: Sequence[int | None]) -> float:
    """Return the percentage of answers matching the correct option."""
    if len(answers) != len(questions):
        raise ValueError(f"Expected {len(questions)} answers, got {len(answers)}.")
    if not questions:
        return 0.0
    correct = sum(
        1 for question, answer in zip(questions, answers) if answer == question.correct_answer_index
    )
    return correct / len(questions) * 100


def submit_attempt(
    api: QuizApi,
    quiz: Quiz,
    student_id: str,
    answers: Sequence[int | None],
    now_ms: int | None = None,
) -> Attempt:
    """Score ``answers`` against ``quiz`` and persist the attempt.

    The start time is the submission time minus the quiz duration, not the
    moment the student actually opened the quiz.
    """
    end_time = current_time_ms() if now_ms is None else now_ms
    draft = AttemptDraft(
        quiz_id=quiz.id,
        student_id=student_id,
        start_time=end_time - quiz.duration * _MS_PER_MINUTE,
        end_time=end_time,
        score=score_answers(quiz.questions, answers),
        answers=list(answers),
    )
    return api.save_attempt(draft)


def is_passing(score: float, threshold: float = PASSING_SCORE_PERCENTAGE) -> bool:
    return score >= threshold


def latest_attempt(attempts: Iterable[Attempt], quiz_id: str) -> Attempt | None:
    """Return the attempt with the greatest end time; ties go to the earlier record."""
    last: Attempt | None = None
    for attempt in attempts:
        if attempt.quiz_id == quiz_id and (last is None or attempt.end_time > last.end_time):
            last = attempt
    return last


def can_retry_quiz(
    attempts: Iterable[Attempt],
    quiz_id: str,
    threshold: float = PASSING_SCORE_PERCENTAGE,
) -> bool:
    """A quiz may be (re)taken until the most recent attempt passes."""
    last = latest_attempt(attempts, quiz_id)
    return last is None or last.score < threshold


def can_student_retry(api: QuizApi, student_id: str, quiz_id: str) -> bool:
    return can_retry_quiz(api.get_attempts_by_student(student_id), quiz_id)
