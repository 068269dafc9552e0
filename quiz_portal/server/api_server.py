"""FastAPI server exposing the student and admin workflows."""

from __future__ import annotations

from threading import Lock
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field
import uvicorn

from quiz_portal.constants.about import APP_NAME, APP_VERSION
from quiz_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.constants.quiz_constants import DEFAULT_DURATION_MINUTES
from quiz_portal.constants.storage_constants import SESSION_KEY
from quiz_portal.core.models import Attempt, Quiz, User, UserRole
from quiz_portal.core.quiz_api import QuizApi
from quiz_portal.core.services.auth_session import AuthSession
from quiz_portal.core.services.quiz_editor import build_question, build_quiz
from quiz_portal.core.services.reports import (
    HistoryEntry,
    find_attempt,
    review_attempt,
    student_history,
    student_reports,
)
from quiz_portal.core.services.scoring import can_retry_quiz, is_passing, submit_attempt

SESSION_COOKIE = "quiz_portal_session"
_SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


class LoginPayload(BaseModel):
    """Payload schema for logging in as a student or an admin."""

    identifier: str
    password: str | None = None
    role: UserRole = UserRole.STUDENT


class RegisterPayload(BaseModel):
    name: str = Field(min_length=1)
    registration_number: str = Field(min_length=1)
    password: str | None = None


class QuestionPayload(BaseModel):
    id: str | None = None
    question_text: str
    options: list[str]
    correct_answer_index: int | None = None


class QuizPayload(BaseModel):
    """Payload schema for creating or replacing a quiz."""

    id: str | None = None
    title: str
    description: str
    duration: int = DEFAULT_DURATION_MINUTES
    is_active: bool = False
    questions: list[QuestionPayload] = []


class AttemptPayload(BaseModel):
    answers: list[int | None]


def _user_payload(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "name": user.name,
        "role": user.role.value,
        "registration_number": user.registration_number,
        "username": user.username,
    }


def _quiz_payload(quiz: Quiz, include_answers: bool) -> dict[str, object]:
    questions: list[dict[str, object]] = []
    for question in quiz.questions:
        entry: dict[str, object] = {
            "id": question.id,
            "question_text": question.question_text,
            "options": list(question.options),
        }
        if include_answers:
            entry["correct_answer_index"] = question.correct_answer_index
        questions.append(entry)
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "duration": quiz.duration,
        "is_active": quiz.is_active,
        "question_count": len(quiz.questions),
        "questions": questions,
    }


def _attempt_payload(attempt: Attempt) -> dict[str, object]:
    return {
        "id": attempt.id,
        "quiz_id": attempt.quiz_id,
        "student_id": attempt.student_id,
        "start_time": attempt.start_time,
        "end_time": attempt.end_time,
        "score": attempt.score,
        "answers": list(attempt.answers),
        "passed": is_passing(attempt.score),
    }


def _history_payload(entry: HistoryEntry) -> dict[str, object]:
    payload = _attempt_payload(entry.attempt)
    payload["quiz_title"] = entry.quiz_title
    return payload


class ClientSessions:
    """One ``AuthSession`` per HTTP client, keyed by the session cookie.

    Each client's identity is persisted under its own storage key, so a
    client that keeps its cookie is restored after a server restart.
    """

    def __init__(self, api: QuizApi) -> None:
        self._api = api
        self._lock = Lock()
        self._sessions: dict[str, AuthSession] = {}

    def get(self, token: str) -> AuthSession:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                session = AuthSession(self._api, session_key=f"{SESSION_KEY}:{token}")
                session.open()
                self._sessions[token] = session
            return session


def _ensure_session(request: Request, response: Response, sessions: ClientSessions) -> AuthSession:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        token = uuid4().hex
        response.set_cookie(
            key=SESSION_COOKIE,
            value=token,
            max_age=_SESSION_COOKIE_MAX_AGE,
            samesite="lax",
            httponly=True,
        )
    return sessions.get(token)


def _require_user(session: AuthSession, role: UserRole | None = None) -> User:
    user = session.current_user
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in.")
    if role is not None and user.role != role:
        raise HTTPException(status_code=403, detail=f"Only {role.value} accounts may do this.")
    return user


def create_api_app(api: QuizApi) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz API."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    sessions = ClientSessions(api)

    def api_dep() -> QuizApi:
        return api

    def session_dep(request: Request, response: Response) -> AuthSession:
        return _ensure_session(request, response, sessions)

    # --- Authentication ---

    @app.post("/login")
    def login(payload: LoginPayload, auth: AuthSession = Depends(session_dep)) -> dict[str, object]:
        user = auth.login(payload.identifier, payload.password, payload.role)
        if user is None:
            raise HTTPException(status_code=401, detail="Invalid credentials.")
        return _user_payload(user)

    @app.post("/register", status_code=201)
    def register(payload: RegisterPayload, auth: AuthSession = Depends(session_dep)) -> dict[str, object]:
        user = auth.register(payload.name.strip(), payload.registration_number.strip(), payload.password)
        if user is None:
            raise HTTPException(status_code=409, detail="Registration number already in use.")
        return _user_payload(user)

    @app.post("/logout")
    def logout(auth: AuthSession = Depends(session_dep)) -> dict[str, object]:
        auth.logout()
        return {"logged_out": True}

    @app.get("/session")
    def get_session(auth: AuthSession = Depends(session_dep)) -> dict[str, object]:
        user = auth.current_user
        return {"user": _user_payload(user) if user is not None else None}

    # --- Quizzes ---

    @app.get("/quizzes")
    def list_quizzes(
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> list[dict[str, object]]:
        user = _require_user(auth)
        if user.role == UserRole.ADMIN:
            return [_quiz_payload(quiz, include_answers=True) for quiz in quiz_api.get_quizzes()]
        attempts = quiz_api.get_attempts_by_student(user.id)
        listing: list[dict[str, object]] = []
        for quiz in quiz_api.get_active_quizzes():
            entry = _quiz_payload(quiz, include_answers=False)
            entry["can_attempt"] = can_retry_quiz(attempts, quiz.id)
            listing.append(entry)
        return listing

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(
        quiz_id: str,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        user = _require_user(auth)
        quiz = quiz_api.get_quiz_by_id(quiz_id)
        is_admin = user.role == UserRole.ADMIN
        if quiz is None or not (is_admin or quiz.is_active):
            raise HTTPException(status_code=404, detail="Quiz not found.")
        return _quiz_payload(quiz, include_answers=is_admin)

    @app.post("/quizzes", status_code=201)
    def save_quiz(
        payload: QuizPayload,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        _require_user(auth, UserRole.ADMIN)
        questions = []
        for index, item in enumerate(payload.questions):
            question = build_question(item.question_text, item.options, item.correct_answer_index, item.id)
            if question is None:
                raise HTTPException(status_code=422, detail=f"Question {index + 1} is incomplete.")
            questions.append(question)
        quiz = build_quiz(
            payload.title,
            payload.description,
            questions,
            duration=payload.duration,
            is_active=payload.is_active,
            quiz_id=payload.id,
        )
        if quiz is None:
            raise HTTPException(status_code=422, detail="Title, description and a positive duration are required.")
        return _quiz_payload(quiz_api.save_quiz(quiz), include_answers=True)

    @app.delete("/quizzes/{quiz_id}")
    def delete_quiz(
        quiz_id: str,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        _require_user(auth, UserRole.ADMIN)
        if not quiz_api.delete_quiz(quiz_id):
            raise HTTPException(status_code=404, detail="Quiz not found.")
        return {"deleted": quiz_id}

    @app.post("/quizzes/{quiz_id}/toggle")
    def toggle_quiz(
        quiz_id: str,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        _require_user(auth, UserRole.ADMIN)
        quiz = quiz_api.toggle_quiz_active(quiz_id)
        if quiz is None:
            raise HTTPException(status_code=404, detail="Quiz not found.")
        return _quiz_payload(quiz, include_answers=True)

    # --- Attempts ---

    @app.post("/quizzes/{quiz_id}/attempts", status_code=201)
    def submit_quiz_attempt(
        quiz_id: str,
        payload: AttemptPayload,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        user = _require_user(auth, UserRole.STUDENT)
        quiz = quiz_api.get_quiz_by_id(quiz_id)
        if quiz is None or not quiz.is_active:
            raise HTTPException(status_code=404, detail="Quiz not found.")
        if not can_retry_quiz(quiz_api.get_attempts_by_student(user.id), quiz.id):
            raise HTTPException(status_code=409, detail="Quiz already passed.")
        try:
            attempt = submit_attempt(quiz_api, quiz, user.id, payload.answers)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _attempt_payload(attempt)

    @app.get("/attempts")
    def list_attempts(
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> list[dict[str, object]]:
        user = _require_user(auth, UserRole.STUDENT)
        return [_history_payload(entry) for entry in student_history(quiz_api, user.id)]

    @app.get("/attempts/{attempt_id}/review")
    def get_attempt_review(
        attempt_id: str,
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        user = _require_user(auth)
        attempt = find_attempt(quiz_api, attempt_id)
        if attempt is None or (user.role == UserRole.STUDENT and attempt.student_id != user.id):
            raise HTTPException(status_code=404, detail="Attempt not found.")
        review = review_attempt(quiz_api, attempt)
        if review is None:
            raise HTTPException(status_code=404, detail="Quiz not found.")
        return {
            "attempt": _attempt_payload(review.attempt),
            "quiz_title": review.quiz_title,
            "passed": review.passed,
            "questions": [
                {
                    "question_text": item.question_text,
                    "selected_option": item.selected_option,
                    "correct_option": item.correct_option,
                    "is_correct": item.is_correct,
                }
                for item in review.questions
            ],
        }

    # --- Admin reports ---

    @app.get("/reports/students")
    def get_student_reports(
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> list[dict[str, object]]:
        _require_user(auth, UserRole.ADMIN)
        return [
            {
                "student": _user_payload(report.student),
                "attempts": [_history_payload(entry) for entry in report.entries],
            }
            for report in student_reports(quiz_api)
        ]

    @app.get("/stats")
    def get_stats(
        quiz_api: QuizApi = Depends(api_dep),
        auth: AuthSession = Depends(session_dep),
    ) -> dict[str, object]:
        _require_user(auth, UserRole.ADMIN)
        stats = quiz_api.get_dashboard_stats()
        return {"students": stats.students, "quizzes": stats.quizzes, "attempts": stats.attempts}

    return app


def run_api_server(
    api: QuizApi,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the current thread until interrupted."""
    config = uvicorn.Config(app=create_api_app(api), host=host, port=port, log_level="info")
    uvicorn.Server(config).run()
