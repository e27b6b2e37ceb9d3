"""
In-session progress models.

WordProgress lives only as long as one LearningSession. Its "graduated"
state says nothing about the item's persisted familiarity level.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

from lexiread.schemas import QuizQuestion


ProgressState = Literal["new", "learning", "graduated"]


@dataclass
class WordProgress:
    """
    Session-scoped progress for one sampled item.
    """
    question: QuizQuestion
    state: ProgressState = "new"
    attempts: int = 0             # Times presented and answered this session
    consecutive_correct: int = 0  # Uninterrupted "knew it" answers
    last_grade: Optional[int] = None

    @property
    def item_id(self) -> str:
        return self.question.item_id


@dataclass(frozen=True)
class SessionProgress:
    """Snapshot of how far a session has come."""
    graduated: int
    remaining: int
    total: int

    @property
    def fraction_complete(self) -> float:
        if self.total == 0:
            return 0.0
        return self.graduated / self.total
