"""
Constants for analytics.
"""

from __future__ import annotations

from typing import Final

from lexiread.srs.constants import MAX_GRADE, MIN_GRADE, PASSING_GRADE


GRADE_BUCKETS: Final[tuple[int, ...]] = tuple(range(MIN_GRADE, MAX_GRADE + 1))
CORRECT_THRESHOLD: Final[int] = PASSING_GRADE

SESSION_COLUMNS: Final[list[str]] = [
    "session_id",
    "timestamp",
    "day_utc",
    "mode",
    "total_items",
    "first_attempt_correct",
    "duration_seconds",
]

ANSWER_COLUMNS: Final[list[str]] = [
    "session_id",
    "day_utc",
    "item_id",
    "grade",
]
