"""
Data-loading helpers for analytics.

Turn session records into dataframes; nothing here reads the Store, the
caller passes the session log in.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

import pandas as pd

from lexiread.analytics.constants import ANSWER_COLUMNS, SESSION_COLUMNS
from lexiread.clock import ensure_utc
from lexiread.session_log import QuizSessionRecord


def filter_window(
    sessions: Sequence[QuizSessionRecord],
    window_days: int,
    now: datetime
) -> list[QuizSessionRecord]:
    """
    Keep sessions with now - window_days <= timestamp <= now.

    Sessions stamped after ``now`` are left out so totals and the daily
    series always cover the same sessions.

    Raises:
        ValueError: If window_days is negative
    """
    if window_days < 0:
        raise ValueError(f"window_days must be >= 0, got {window_days}")
    now = ensure_utc(now)
    cutoff = now - timedelta(days=window_days)
    return [s for s in sessions if cutoff <= ensure_utc(s.timestamp) <= now]


def load_sessions_df(sessions: Sequence[QuizSessionRecord]) -> pd.DataFrame:
    """
    One row per session, sorted by timestamp.
    """
    if not sessions:
        return pd.DataFrame(columns=SESSION_COLUMNS)

    df = pd.DataFrame([
        {
            "session_id": s.session_id,
            "timestamp": ensure_utc(s.timestamp),
            "mode": s.mode,
            "total_items": s.total_items,
            "first_attempt_correct": s.first_attempt_correct,
            "duration_seconds": s.duration_seconds,
        }
        for s in sessions
    ])
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df["day_utc"] = df["timestamp"].dt.floor("D").dt.as_unit("ns")
    df["duration_seconds"] = pd.to_numeric(df["duration_seconds"], errors="coerce").fillna(0.0)
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df[SESSION_COLUMNS]


def load_answers_df(sessions: Sequence[QuizSessionRecord]) -> pd.DataFrame:
    """
    One row per recorded answer, bucketed by the day of its session.
    """
    rows = [
        {
            "session_id": s.session_id,
            "day_utc": ensure_utc(s.timestamp),
            "item_id": answer.item_id,
            "grade": answer.grade,
        }
        for s in sessions
        for answer in s.answers
    ]
    if not rows:
        return pd.DataFrame(columns=ANSWER_COLUMNS)

    df = pd.DataFrame(rows)
    df["day_utc"] = pd.to_datetime(df["day_utc"], utc=True).dt.floor("D").dt.as_unit("ns")
    df["grade"] = df["grade"].astype("int64")
    return df[ANSWER_COLUMNS]
