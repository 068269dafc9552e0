"""Static metadata describing QuizPortal."""

APP_NAME = "QuizPortal"
APP_VERSION = "0.1.0"
