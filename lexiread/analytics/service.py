"""
Service layer to assemble session analytics.

Every function takes the session log and "now" explicitly and is safe on an
empty log.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from lexiread import config
from lexiread.analytics.constants import CORRECT_THRESHOLD
from lexiread.analytics.metrics import (
    build_window_index,
    compute_current_streak,
    compute_daily_accuracy,
    compute_daily_study_minutes,
    compute_longest_streak,
    compute_quality_counts,
)
from lexiread.analytics.queries import filter_window, load_answers_df, load_sessions_df
from lexiread.analytics.types import (
    AccuracyStats,
    QualityDistribution,
    StatsDashboard,
    StreakStats,
    StudyTimeStats,
)
from lexiread.clock import ensure_utc, utc_day
from lexiread.session_log import QuizSessionRecord


def streaks(sessions: Sequence[QuizSessionRecord], now: datetime) -> StreakStats:
    """
    Current and longest streak of study days (UTC calendar days).

    Sessions stamped after ``now`` are ignored.
    """
    now = ensure_utc(now)
    study_days = {utc_day(s.timestamp) for s in sessions if ensure_utc(s.timestamp) <= now}
    if not study_days:
        return StreakStats(current=0, longest=0, last_study_date=None)

    return StreakStats(
        current=compute_current_streak(study_days, utc_day(now)),
        longest=compute_longest_streak(study_days),
        last_study_date=max(study_days),
    )


def accuracy(
    sessions: Sequence[QuizSessionRecord],
    window_days: int,
    now: datetime
) -> AccuracyStats:
    """
    Share of answers graded as correct within the trailing window.
    """
    recent = filter_window(sessions, window_days, now)
    answers_df = load_answers_df(recent)
    daily = compute_daily_accuracy(answers_df, build_window_index(now, window_days))

    total_answers = int(len(answers_df))
    total_correct = int((answers_df["grade"] >= CORRECT_THRESHOLD).sum()) if total_answers else 0
    overall = (total_correct / total_answers * 100.0) if total_answers else 0.0

    return AccuracyStats(
        overall_percent=overall,
        total_correct=total_correct,
        total_answers=total_answers,
        daily=daily,
    )


def quality_distribution(
    sessions: Sequence[QuizSessionRecord],
    window_days: int,
    now: datetime
) -> QualityDistribution:
    """
    Answer counts per grade bucket within the trailing window.
    """
    recent = filter_window(sessions, window_days, now)
    counts = compute_quality_counts(load_answers_df(recent))
    return QualityDistribution(counts=counts, total=sum(counts.values()))


def study_time(
    sessions: Sequence[QuizSessionRecord],
    window_days: int,
    now: datetime
) -> StudyTimeStats:
    """
    Total and average study time within the trailing window.

    Sessions without a recorded duration count as zero seconds.
    """
    recent = filter_window(sessions, window_days, now)
    sessions_df = load_sessions_df(recent)
    daily = compute_daily_study_minutes(sessions_df, build_window_index(now, window_days))

    count = int(len(sessions_df))
    total = float(sessions_df["duration_seconds"].sum()) if count else 0.0
    return StudyTimeStats(
        total_seconds=total,
        average_seconds=total / count if count else 0.0,
        sessions_count=count,
        daily_minutes=daily,
    )


def build_stats_dashboard(
    sessions: Sequence[QuizSessionRecord],
    now: datetime,
    window_days: Optional[int] = None
) -> StatsDashboard:
    """
    Build all stats needed by the progress page.

    Args:
        sessions: Full session log
        now: Reference time
        window_days: Trailing window; defaults to STATS_WINDOW_DAYS

    Returns:
        StatsDashboard with streaks over the full history and the other
        metrics restricted to the window
    """
    if window_days is None:
        window_days = config.get_stats_window_days()
    return StatsDashboard(
        window_days=window_days,
        streaks=streaks(sessions, now),
        accuracy=accuracy(sessions, window_days, now),
        quality=quality_distribution(sessions, window_days, now),
        study_time=study_time(sessions, window_days, now),
    )


def format_duration(seconds: float) -> str:
    """
    Human-readable duration, e.g. "45s", "12m", "2h", "1h 30m".
    """
    seconds = int(max(0, seconds))
    if seconds < 60:
        return f"{seconds}s"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"

    hours, remaining_minutes = divmod(minutes, 60)
    if remaining_minutes == 0:
        return f"{hours}h"
    return f"{hours}h {remaining_minutes}m"
