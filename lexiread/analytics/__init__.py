"""
Analytics package exports.
"""

from lexiread.analytics.service import (
    accuracy,
    build_stats_dashboard,
    format_duration,
    quality_distribution,
    streaks,
    study_time,
)
from lexiread.analytics.types import (
    AccuracyStats,
    QualityDistribution,
    StatsDashboard,
    StreakStats,
    StudyTimeStats,
)

__all__ = [
    "accuracy",
    "build_stats_dashboard",
    "format_duration",
    "quality_distribution",
    "streaks",
    "study_time",
    "AccuracyStats",
    "QualityDistribution",
    "StatsDashboard",
    "StreakStats",
    "StudyTimeStats",
]
