"""
Session log records.

A QuizSessionRecord is written once when a learning session finishes and is
read back only by the analytics layer.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from lexiread.clock import parse_timestamp


@dataclass(frozen=True)
class AnswerRecord:
    """One graded submission inside a session."""
    item_id: str
    grade: int
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "grade": self.grade,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AnswerRecord:
        return cls(
            item_id=str(data["item_id"]),
            grade=int(data["grade"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class QuizSessionRecord:
    """
    Summary of a completed quiz session.

    ``total_items`` is the initial sample size, not the number of answers.
    """
    timestamp: datetime
    mode: str
    total_items: int
    first_attempt_correct: int
    list_id: Optional[str] = None
    duration_seconds: Optional[float] = None
    answers: tuple[AnswerRecord, ...] = ()
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "timestamp": self.timestamp.isoformat(),
            "mode": self.mode,
            "list_id": self.list_id,
            "total_items": self.total_items,
            "first_attempt_correct": self.first_attempt_correct,
            "duration_seconds": self.duration_seconds,
            "answers": [answer.to_dict() for answer in self.answers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> QuizSessionRecord:
        duration = data.get("duration_seconds")
        return cls(
            session_id=str(data["session_id"]),
            timestamp=parse_timestamp(data["timestamp"]),
            mode=str(data["mode"]),
            list_id=data.get("list_id"),
            total_items=int(data["total_items"]),
            first_attempt_correct=int(data["first_attempt_correct"]),
            duration_seconds=float(duration) if duration is not None else None,
            answers=tuple(AnswerRecord.from_dict(a) for a in data.get("answers", [])),
        )
