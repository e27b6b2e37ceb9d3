"""
Metric computations for the stats dashboard.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

from lexiread.analytics.constants import CORRECT_THRESHOLD, GRADE_BUCKETS
from lexiread.clock import ensure_utc
from lexiread.srs.engine import clamp_grade


def build_window_index(now: datetime, window_days: int) -> pd.DatetimeIndex:
    """
    Dense UTC day index covering every day the trailing window touches.
    """
    now = pd.Timestamp(ensure_utc(now))
    start = (now - pd.Timedelta(days=window_days)).floor("D")
    return pd.date_range(start=start, end=now.floor("D"), freq="D").as_unit("ns")


def zero_series(day_index: pd.DatetimeIndex, dtype: str = "float64") -> pd.Series:
    """
    Convenience zero-valued series aligned to day index.
    """
    return pd.Series(0, index=day_index, dtype=dtype)


def compute_current_streak(study_days: set[date], today: date) -> int:
    """
    Consecutive study days ending today, or yesterday if today has no
    session yet.
    """
    if today in study_days:
        cursor = today
    elif today - timedelta(days=1) in study_days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in study_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def compute_longest_streak(study_days: Iterable[date]) -> int:
    """
    Longest run of consecutive study days in the full history.
    """
    longest = 0
    run = 0
    previous = None
    for day in sorted(set(study_days)):
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def compute_daily_accuracy(answers_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.DataFrame:
    """
    Correct / total answers per day, plus accuracy in percent.
    """
    if answers_df.empty:
        daily = pd.DataFrame(
            {"correct": zero_series(day_index, "int64"), "total": zero_series(day_index, "int64")}
        )
    else:
        scored = answers_df.assign(correct=(answers_df["grade"] >= CORRECT_THRESHOLD).astype("int64"))
        grouped = scored.groupby("day_utc").agg(
            correct=("correct", "sum"),
            total=("grade", "size"),
        )
        daily = grouped.reindex(day_index, fill_value=0).astype("int64")

    totals = daily["total"].where(daily["total"] > 0)
    daily["accuracy"] = (daily["correct"] / totals * 100.0).fillna(0.0).astype("float64")
    daily.index.name = "day_utc"
    return daily


def compute_quality_counts(answers_df: pd.DataFrame) -> dict[int, int]:
    """
    Number of answers in each grade bucket; every bucket is present.
    """
    counts = {bucket: 0 for bucket in GRADE_BUCKETS}
    if answers_df.empty:
        return counts

    clamped = answers_df["grade"].map(clamp_grade)
    for grade, count in clamped.value_counts().items():
        counts[int(grade)] += int(count)
    return counts


def compute_daily_study_minutes(sessions_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Minutes studied per day from each session's recorded duration.
    """
    if sessions_df.empty or len(day_index) == 0:
        return zero_series(day_index, dtype="float64")

    daily_seconds = sessions_df.groupby("day_utc")["duration_seconds"].sum()
    minutes = daily_seconds.reindex(day_index, fill_value=0.0).astype("float64") / 60.0
    minutes.index.name = "day_utc"
    return minutes
