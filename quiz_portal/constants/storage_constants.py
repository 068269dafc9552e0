"""Storage keys and locations shared by the persistence layer."""

from pathlib import Path

USERS_KEY: str = "quiz_users"
QUIZZES_KEY: str = "quiz_quizzes"
ATTEMPTS_KEY: str = "quiz_attempts"
SESSION_KEY: str = "currentUser"

DEFAULT_STORAGE_PATH: Path = Path("quiz_portal_data") / "local_storage.json"
