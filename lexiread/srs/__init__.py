"""
SRS - SM-2 spaced repetition for vocabulary items

Quick start:
    from lexiread import srs

    # Process a review (algorithm only, no DB calls)
    record = srs.compute_next_record(store.get_record(item_id), grade, now)
    store.put_record(item_id, record)

    # Check whether an item is due
    srs.is_due(record.next_review_date, now)
"""

# Core algorithm
from lexiread.srs.engine import (
    clamp_grade,
    compute_next_record,
    is_correct,
    is_due,
    next_easiness,
    next_interval,
)

# Records
from lexiread.srs.record import (
    SRSRecord,
    classify,
    default_record,
    reset_record,
)

# Persistence
from lexiread.srs.store import InMemoryStore, Store
from lexiread.srs.database import SqlStore, get_engine, init_db, reset_db

# Constants
from lexiread.srs.constants import (
    FAMILIARITY_LABELS,
    GRADUATION_THRESHOLD,
    INITIAL_EASINESS,
    MIN_EASINESS,
    PASSING_GRADE,
    ReviewGrade,
    SessionGrade,
)


__all__ = [
    # Core algorithm
    "clamp_grade",
    "compute_next_record",
    "is_correct",
    "is_due",
    "next_easiness",
    "next_interval",

    # Records
    "SRSRecord",
    "classify",
    "default_record",
    "reset_record",

    # Persistence
    "Store",
    "InMemoryStore",
    "SqlStore",
    "get_engine",
    "init_db",
    "reset_db",

    # Constants
    "FAMILIARITY_LABELS",
    "GRADUATION_THRESHOLD",
    "INITIAL_EASINESS",
    "MIN_EASINESS",
    "PASSING_GRADE",
    "ReviewGrade",
    "SessionGrade",
]
