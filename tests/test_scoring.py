from __future__ import annotations

import pytest

from quiz_portal.constants.quiz_constants import PASSING_SCORE_PERCENTAGE
from quiz_portal.core.models import Attempt, Question
from quiz_portal.core.services.scoring import (
    blank_answers,
    can_retry_quiz,
    can_student_retry,
    is_passing,
    latest_attempt,
    score_answers,
    select_option,
    submit_attempt,
)


def _attempt(attempt_id: str, end_time: int, score: float, quiz_id: str = "quiz1") -> Attempt:
    return Attempt(
        id=attempt_id,
        quiz_id=quiz_id,
        student_id="student1",
        start_time=end_time - 600_000,
        end_time=end_time,
        score=score,
        answers=(),
    )


def test_seeded_quiz_scores(api):
    quiz = api.get_quiz_by_id("quiz1")

    assert score_answers(quiz.questions, [0, 1, 2]) == 100.0
    assert score_answers(quiz.questions, [0, 0, 0]) == pytest.approx(100 / 3)
    assert score_answers(quiz.questions, [None, None, None]) == 0.0


def test_score_matches_percentage_of_correct_answers():
    questions = [
        Question(id=str(i), question_text=f"Q{i}", options=["a", "b", "c"], correct_answer_index=i % 3)
        for i in range(8)
    ]
    answers = [0, 1, 0, None, 1, 2, 0, 0]
    correct = sum(1 for question, answer in zip(questions, answers) if answer == question.correct_answer_index)

    assert score_answers(questions, answers) == pytest.approx(100 * correct / len(questions))


def test_score_rejects_misaligned_answers(api):
    with pytest.raises(ValueError):
        score_answers(api.get_quiz_by_id("quiz1").questions, [0, 1])


def test_empty_quiz_scores_zero():
    assert score_answers([], []) == 0.0


def test_submit_attempt_records_approximate_start(api):
    quiz = api.get_quiz_by_id("quiz1")
    attempt = submit_attempt(api, quiz, "student1", [0, 1, None], now_ms=5_000_000)

    assert attempt.end_time == 5_000_000
    assert attempt.start_time == 5_000_000 - 10 * 60 * 1000
    assert attempt.score == pytest.approx(200 / 3)
    assert attempt.answers == (0, 1, None)
    assert api.get_attempts() == [attempt]


def test_answer_sheet_helpers(api):
    answers = blank_answers(api.get_quiz_by_id("quiz1"))
    assert answers == [None, None, None]

    updated = select_option(answers, 1, 3)
    assert updated == [None, 3, None]
    assert answers == [None, None, None]

    with pytest.raises(IndexError):
        select_option(answers, 3, 0)


def test_is_passing_uses_threshold():
    assert is_passing(PASSING_SCORE_PERCENTAGE)
    assert not is_passing(PASSING_SCORE_PERCENTAGE - 0.01)


def test_latest_attempt_uses_end_time():
    attempts = [_attempt("a", 300, 10.0), _attempt("b", 900, 20.0), _attempt("c", 600, 30.0), _attempt("d", 999, 1.0, "quiz2")]
    assert latest_attempt(attempts, "quiz1").id == "b"
    assert latest_attempt(attempts, "quiz3") is None


def test_can_retry_quiz_policy():
    assert can_retry_quiz([], "quiz1")
    assert can_retry_quiz([_attempt("a", 100, 100.0), _attempt("b", 200, 33.3)], "quiz1")
    assert not can_retry_quiz([_attempt("a", 200, 100.0), _attempt("b", 100, 0.0)], "quiz1")
    assert not can_retry_quiz([_attempt("a", 100, PASSING_SCORE_PERCENTAGE)], "quiz1")


def test_can_student_retry_reads_history(api):
    quiz = api.get_quiz_by_id("quiz1")
    assert can_student_retry(api, "student1", "quiz1")

    submit_attempt(api, quiz, "student1", [0, 0, 0], now_ms=1_000)
    assert can_student_retry(api, "student1", "quiz1")

    submit_attempt(api, quiz, "student1", [0, 1, 2], now_ms=2_000)
    assert not can_student_retry(api, "student1", "quiz1")
    assert can_student_retry(api, "student2", "quiz1")


def test_latest_attempt_keeps_earlier_record_on_equal_end_time():
    attempts = [_attempt("first", 500, 100.0), _attempt("second", 500, 0.0)]
    assert latest_attempt(attempts, "quiz1").id == "first"
    assert not can_retry_quiz(attempts, "quiz1")
