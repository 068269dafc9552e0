"""Application entry point for QuizPortal."""

from __future__ import annotations

from quiz_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.constants.storage_constants import DEFAULT_STORAGE_PATH
from quiz_portal.core.quiz_api import QuizApi
from quiz_portal.server.api_server import run_api_server
from quiz_portal.storage.key_value_storage import JsonFileStorage
from quiz_portal.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging and storage, then serve the API."""
    logger = configure_logging()
    logger.info("Starting QuizPortal...")

    storage = JsonFileStorage(DEFAULT_STORAGE_PATH)
    logger.info("Using storage file %s", storage.file_path)
    api = QuizApi(storage)

    logger.info("API available at http://%s:%s/", DEFAULT_HOST, DEFAULT_PORT)
    run_api_server(api, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
