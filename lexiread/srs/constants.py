"""
SRS Constants and Parameters

All numeric parameters of the SM-2 scheduling algorithm in one place.
"""

from enum import IntEnum


# ---- Response Grades ----

class ReviewGrade(IntEnum):
    """Canonical SM-2 response quality (0-5)."""
    BLACKOUT = 0            # Complete blackout
    INCORRECT_RECALLED = 1  # Incorrect; correct answer remembered on seeing it
    INCORRECT_EASY = 2      # Incorrect; correct answer seemed easy to recall
    CORRECT_DIFFICULT = 3   # Correct with significant difficulty
    CORRECT_HESITANT = 4    # Correct after hesitation
    PERFECT = 5             # Perfect response


class SessionGrade(IntEnum):
    """Three-bucket grades used inside a quiz session, mapped onto ReviewGrade."""
    DIDNT_KNOW = 1
    NOT_SURE = 2
    KNEW_IT = 3


MIN_GRADE = int(ReviewGrade.BLACKOUT)
MAX_GRADE = int(ReviewGrade.PERFECT)
PASSING_GRADE = 3  # Grades at or above this count as a successful recall


# ---- Easiness Factor ----

INITIAL_EASINESS = 2.5
MIN_EASINESS = 1.3
FAILURE_EASINESS_PENALTY = 0.2


# ---- Interval Tiers (days) ----

FIRST_INTERVAL = 1   # After the first successful repetition
SECOND_INTERVAL = 6  # After the second successful repetition
FAILED_INTERVAL = 1  # Review again tomorrow after a failure


# ---- Familiarity Levels ----
# Upper-exclusive EF bounds for levels 1-4; anything above is level 5.

FAMILIARITY_THRESHOLDS = (
    (1.7, 1),  # Unknown
    (2.0, 2),  # Seen
    (2.3, 3),  # Learning
    (2.6, 4),  # Familiar
)
MAX_FAMILIARITY = 5  # Mastered

FAMILIARITY_LABELS = {
    1: "Unknown",
    2: "Seen",
    3: "Learning",
    4: "Familiar",
    5: "Mastered",
}


# ---- Learning Session ----

GRADUATION_THRESHOLD = 2  # Consecutive "knew it" answers needed to leave a session
