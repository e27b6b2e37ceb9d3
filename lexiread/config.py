"""
Environment configuration and logging setup.

Settings are read from the process environment (optionally populated from a
.env file) through small accessor functions, so tests can monkeypatch the
environment without reloading modules.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from lexiread.errors import ConfigurationError

load_dotenv()


# ---- Defaults ----

DEFAULT_DATABASE_URL = "sqlite:///logs/lexiread.db"
DEFAULT_MONGO_DB_NAME = "lexiread"
DEFAULT_QUIZ_SIZE = 20
DEFAULT_STATS_WINDOW_DAYS = 30
DEFAULT_LOG_LEVEL = "INFO"


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    In test mode the database name gets a ``_test`` suffix so a test run
    never touches the learner's real review history.

    Returns:
        SQLAlchemy connection string
    """
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if not is_test_mode():
        return url

    if url.endswith(".db"):
        return url[:-3] + "_test.db"
    if "/" in url and not url.endswith("/"):
        return url + "_test"
    return url


def get_mongo_uri() -> Optional[str]:
    return os.getenv("MONGO_URI")


def get_mongo_db_name() -> str:
    return os.getenv("MONGO_DB_NAME", DEFAULT_MONGO_DB_NAME)


def get_quiz_size() -> int:
    """Number of items sampled into a quiz session."""
    return _get_int("QUIZ_SIZE", DEFAULT_QUIZ_SIZE)


def get_stats_window_days() -> int:
    """Trailing window (days) used by the analytics dashboard."""
    return _get_int("STATS_WINDOW_DAYS", DEFAULT_STATS_WINDOW_DAYS)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route loguru output to stderr at the configured level.

    Args:
        level: Log level name (defaults to LOG_LEVEL from the environment)
    """
    logger.remove()
    logger.add(sys.stderr, level=level or get_log_level())
