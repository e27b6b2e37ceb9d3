"""
Easiness Engine - SM-2 Algorithm Logic

Pure scheduling math (no database calls, no clock reads).

Main workflow:
1. Caller loads the item's SRSRecord (or a default one)
2. Clamp the response grade onto the 0-5 scale
3. Update easiness factor, repetitions and interval
4. Return the next record; the caller persists it

Every function here is deterministic: "now" is always passed in.
"""

from __future__ import annotations
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Union

from lexiread.clock import ensure_utc
from lexiread.srs.constants import (
    FAILED_INTERVAL,
    FAILURE_EASINESS_PENALTY,
    FIRST_INTERVAL,
    MAX_GRADE,
    MIN_EASINESS,
    MIN_GRADE,
    PASSING_GRADE,
    SECOND_INTERVAL,
)
from lexiread.srs.record import SRSRecord

Number = Union[int, float]


def clamp_grade(grade: Number) -> int:
    """
    Round a raw grade to the nearest integer and clamp it to [0, 5].

    Halves round up (2.5 -> 3) rather than to even. Integers of any size and
    non-finite floats clamp to the nearest end of the scale.

    Args:
        grade: Raw response quality from any caller

    Returns:
        Integer grade between 0 and 5
    """
    if isinstance(grade, int):
        return max(MIN_GRADE, min(MAX_GRADE, int(grade)))
    if math.isnan(grade):
        return MIN_GRADE
    if math.isinf(grade):
        return MAX_GRADE if grade > 0 else MIN_GRADE
    rounded = math.floor(grade + 0.5)
    return max(MIN_GRADE, min(MAX_GRADE, int(rounded)))


def is_correct(grade: Number) -> bool:
    """True if the (clamped) grade counts as a successful recall."""
    return clamp_grade(grade) >= PASSING_GRADE


def next_easiness(easiness_factor: float, grade: int) -> float:
    """
    SM-2 easiness update for a successful recall.

    Formula:
        EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))

    EF' never falls below 1.3.
    """
    distance = MAX_GRADE - grade
    updated = easiness_factor + (0.1 - distance * (0.08 + distance * 0.02))
    return max(MIN_EASINESS, updated)


def next_interval(repetitions: int, previous_interval: int, easiness_factor: float) -> int:
    """
    Interval growth tiers after a successful recall.

    Args:
        repetitions: Repetition count *after* this review
        previous_interval: Interval before this review (days)
        easiness_factor: EF *after* this review

    Returns:
        Interval in days
    """
    if repetitions == 1:
        return FIRST_INTERVAL
    if repetitions == 2:
        return SECOND_INTERVAL
    return max(FIRST_INTERVAL, math.ceil(previous_interval * easiness_factor))


def compute_next_record(previous: SRSRecord, grade: Number, now: datetime) -> SRSRecord:
    """
    Process one graded review and return the updated record.

    This is the single source of numeric truth for scheduling. The input
    record is not modified.

    Args:
        previous: Record before the review (``default_record`` for new items)
        grade: Response quality; clamped to 0-5, never rejected
        now: Review timestamp (naive values are treated as UTC)

    Returns:
        New SRSRecord with updated EF, interval, repetitions and dates
    """
    quality = clamp_grade(grade)
    now = ensure_utc(now)

    if quality < PASSING_GRADE:
        # Failed recall: start the repetition ladder over
        easiness = max(MIN_EASINESS, previous.easiness_factor - FAILURE_EASINESS_PENALTY)
        repetitions = 0
        interval = FAILED_INTERVAL
        lapses = previous.lapses + 1
    else:
        easiness = next_easiness(previous.easiness_factor, quality)
        repetitions = previous.repetitions + 1
        interval = next_interval(repetitions, previous.interval, easiness)
        lapses = previous.lapses

    return replace(
        previous,
        easiness_factor=easiness,
        interval=interval,
        repetitions=repetitions,
        last_review_date=now,
        next_review_date=now + timedelta(days=interval),
        lapses=lapses,
    )


def is_due(next_review_date: Optional[datetime], now: datetime) -> bool:
    """
    Check whether an item is due for review.

    Args:
        next_review_date: Scheduled review time, or None if never reviewed
        now: Reference time

    Returns:
        True if never reviewed or the scheduled time has passed
    """
    if next_review_date is None:
        return True
    return ensure_utc(next_review_date) <= ensure_utc(now)
