from __future__ import annotations

from quiz_portal.core.services.reports import (
    find_attempt,
    format_score,
    quiz_title,
    review_attempt,
    student_history,
    student_reports,
)
from quiz_portal.core.services.scoring import submit_attempt


def test_quiz_title_falls_back_for_missing_quiz(api):
    quizzes = api.get_quizzes()
    assert quiz_title(quizzes, "quiz1") == "React Fundamentals"
    assert quiz_title(quizzes, "gone") == "Unknown Quiz"
    assert quiz_title(quizzes, "gone", fallback="Unknown") == "Unknown"


def test_student_history_is_most_recent_first(api):
    quiz = api.get_quiz_by_id("quiz1")
    older = submit_attempt(api, quiz, "student1", [0, 0, 0], now_ms=1_000)
    newer = submit_attempt(api, quiz, "student1", [0, 1, 2], now_ms=2_000)
    submit_attempt(api, quiz, "student2", [0, 1, 2], now_ms=3_000)

    history = student_history(api, "student1")

    assert [entry.attempt for entry in history] == [newer, older]
    assert [entry.passed for entry in history] == [True, False]
    assert history[0].quiz_title == "React Fundamentals"


def test_history_survives_deleted_quiz(api):
    attempt = submit_attempt(api, api.get_quiz_by_id("quiz1"), "student1", [0, 1, 2], now_ms=1_000)
    api.delete_quiz("quiz1")

    assert student_history(api, "student1")[0].quiz_title == "Unknown Quiz"
    assert review_attempt(api, attempt) is None


def test_review_attempt_pairs_answers_with_questions(api):
    attempt = submit_attempt(api, api.get_quiz_by_id("quiz1"), "student1", [0, 3, None], now_ms=1_000)

    review = review_attempt(api, attempt)

    assert review is not None
    assert review.passed is False
    assert [item.is_correct for item in review.questions] == [True, False, False]
    assert review.questions[0].selected_option == "A JavaScript syntax extension"
    assert review.questions[1].selected_option == "useReducer"
    assert review.questions[1].correct_option == "useState"
    assert review.questions[2].selected_option is None
    assert review.questions[2].correct_option == "Props"


def test_find_attempt(api):
    attempt = submit_attempt(api, api.get_quiz_by_id("quiz1"), "student1", [0, 1, 2], now_ms=1_000)
    assert find_attempt(api, attempt.id) == attempt
    assert find_attempt(api, "attempt_missing") is None


def test_student_reports_cover_every_student(api):
    submit_attempt(api, api.get_quiz_by_id("quiz1"), "student2", [0, 1, 2], now_ms=1_000)

    reports = student_reports(api)

    assert [report.student.name for report in reports] == ["Alice", "Bob"]
    assert reports[0].entries == []
    assert [entry.attempt.score for entry in reports[1].entries] == [100.0]


def test_format_score():
    assert format_score(200 / 3) == "66.67%"
    assert format_score(100 / 3, digits=1) == "33.3%"


def test_student_history_keeps_recorded_order_on_equal_end_time(api):
    quiz = api.get_quiz_by_id("quiz1")
    first = submit_attempt(api, quiz, "student1", [0, 1, 2], now_ms=1_000)
    second = submit_attempt(api, quiz, "student1", [0, 0, 0], now_ms=1_000)

    assert [entry.attempt for entry in student_history(api, "student1")] == [first, second]
