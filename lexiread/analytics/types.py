"""
Types for analytics results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class StreakStats:
    """Consecutive study days."""
    current: int
    longest: int
    last_study_date: Optional[date]


@dataclass(frozen=True)
class AccuracyStats:
    """
    Answer accuracy over a trailing window.

    ``daily`` is indexed by UTC day and has ``correct``, ``total`` and
    ``accuracy`` (percent) columns; days without answers are zero.
    """
    overall_percent: float
    total_correct: int
    total_answers: int
    daily: pd.DataFrame


@dataclass(frozen=True)
class QualityDistribution:
    """Number of answers per grade bucket (0-5)."""
    counts: dict[int, int]
    total: int


@dataclass(frozen=True)
class StudyTimeStats:
    """
    Study time over a trailing window.

    Totals are in seconds; ``daily_minutes`` is indexed by UTC day.
    """
    total_seconds: float
    average_seconds: float
    sessions_count: int
    daily_minutes: pd.Series


@dataclass(frozen=True)
class StatsDashboard:
    """All session analytics for one window."""
    window_days: int
    streaks: StreakStats
    accuracy: AccuracyStats
    quality: QualityDistribution
    study_time: StudyTimeStats
