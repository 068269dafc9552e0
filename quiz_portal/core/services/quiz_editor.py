"""Helpers that turn admin form input into quizzes and questions.

Invalid input yields ``None`` so the caller can keep the form open.
"""

from __future__ import annotations

from uuid import uuid4

from quiz_portal.constants.quiz_constants import DEFAULT_DURATION_MINUTES, MIN_OPTIONS_PER_QUESTION
from quiz_portal.core.models import Question, Quiz


def build_question(
    question_text: str,
    options: list[str],
    correct_answer_index: int | None,
    question_id: str | None = None,
) -> Question | None:
    cleaned_text = question_text.strip()
    cleaned_options = [option.strip() for option in options]
    if not cleaned_text:
        return None
    if len(cleaned_options) < MIN_OPTIONS_PER_QUESTION or any(not option for option in cleaned_options):
        return None
    if correct_answer_index is None or not 0 <= correct_answer_index < len(cleaned_options):
        return None
    return Question(
        id=question_id or f"q_{uuid4().hex}",
        question_text=cleaned_text,
        options=cleaned_options,
        correct_answer_index=correct_answer_index,
    )


def build_quiz(
    title: str,
    description: str,
    questions: list[Question],
    duration: int | None = DEFAULT_DURATION_MINUTES,
    is_active: bool = False,
    quiz_id: str | None = None,
) -> Quiz | None:
    if not title.strip() or not description.strip():
        return None
    # bool is an int subclass
    if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
        return None
    return Quiz(
        id=quiz_id or f"quiz_{uuid4().hex}",
        title=title.strip(),
        description=description.strip(),
        duration=duration,
        is_active=is_active,
        questions=list(questions),
    )


def append_question(quiz: Quiz, question: Question) -> Quiz:
    return _with_questions(quiz, [*quiz.questions, question])


def replace_question(quiz: Quiz, index: int, question: Question) -> Quiz:
    """Return a copy of ``quiz`` with the question at ``index`` swapped out."""
    if not 0 <= index < len(quiz.questions):
        raise IndexError(f"Question index {index} out of range")
    questions = list(quiz.questions)
    questions[index] = Question(
        id=quiz.questions[index].id,
        question_text=question.question_text,
        options=list(question.options),
        correct_answer_index=question.correct_answer_index,
    )
    return _with_questions(quiz, questions)


def remove_question(quiz: Quiz, index: int) -> Quiz:
    if not 0 <= index < len(quiz.questions):
        raise IndexError(f"Question index {index} out of range")
    questions = list(quiz.questions)
    questions.pop(index)
    return _with_questions(quiz, questions)


def _with_questions(quiz: Quiz, questions: list[Question]) -> Quiz:
    return Quiz(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        duration=quiz.duration,
        is_active=quiz.is_active,
        questions=questions,
    )
