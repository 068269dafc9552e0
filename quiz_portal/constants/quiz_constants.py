"""Quiz-related constants shared across the core and server layers."""

PASSING_SCORE_PERCENTAGE: float = 50.0
DEFAULT_DURATION_MINUTES: int = 10
MIN_OPTIONS_PER_QUESTION: int = 2
UNKNOWN_QUIZ_TITLE: str = "Unknown Quiz"
