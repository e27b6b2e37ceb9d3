"""
SRS Record - Persisted per-item scheduling state

Defines the record the EasinessEngine reads and produces, plus its
serialised form. Familiarity is derived from the easiness factor and is
never stored independently of it.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from lexiread.clock import parse_timestamp
from lexiread.srs.constants import (
    FAMILIARITY_THRESHOLDS,
    INITIAL_EASINESS,
    MAX_FAMILIARITY,
)


def classify(easiness_factor: float) -> int:
    """
    Map an easiness factor onto a familiarity level (1-5).

    Each threshold belongs to the upper tier, e.g. EF 2.0 -> level 3.

    Args:
        easiness_factor: Current EF

    Returns:
        Familiarity level between 1 and 5
    """
    for upper_bound, level in FAMILIARITY_THRESHOLDS:
        if easiness_factor < upper_bound:
            return level
    return MAX_FAMILIARITY


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class SRSRecord:
    """
    Scheduling state for a single vocabulary item.

    A record with ``next_review_date=None`` has never been reviewed and is
    due immediately.
    """
    item_id: str

    # SM-2 parameters
    easiness_factor: float = INITIAL_EASINESS
    interval: int = 0      # Days; 0 until the first review
    repetitions: int = 0   # Consecutive successful reviews

    # Review tracking
    last_review_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None
    lapses: int = 0        # Failed reviews, used for due ordering only

    @property
    def familiarity_level(self) -> int:
        return classify(self.easiness_factor)

    @property
    def is_new(self) -> bool:
        """True if the item has never been reviewed."""
        return self.next_review_date is None

    @property
    def is_lapsed(self) -> bool:
        """True if the most recent review was a failed recall."""
        return self.lapses > 0 and self.repetitions == 0 and not self.is_new

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible dict (timestamps as ISO-8601)."""
        return {
            "item_id": self.item_id,
            "easiness_factor": self.easiness_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
            "last_review_date": _format_timestamp(self.last_review_date),
            "next_review_date": _format_timestamp(self.next_review_date),
            "lapses": self.lapses,
            "familiarity_level": self.familiarity_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SRSRecord:
        """
        Rebuild a record from ``to_dict`` output.

        ``familiarity_level`` is ignored: it is recomputed from the EF.
        """
        return cls(
            item_id=str(data["item_id"]),
            easiness_factor=float(data.get("easiness_factor", INITIAL_EASINESS)),
            interval=int(data.get("interval", 0)),
            repetitions=int(data.get("repetitions", 0)),
            last_review_date=parse_timestamp(data.get("last_review_date")),
            next_review_date=parse_timestamp(data.get("next_review_date")),
            lapses=int(data.get("lapses", 0)),
        )


def default_record(item_id: str) -> SRSRecord:
    """
    Create the "never reviewed" record for an item.

    Args:
        item_id: Vocabulary item identifier

    Returns:
        SRSRecord with EF 2.5, interval 0, repetitions 0 and no dates
    """
    return SRSRecord(item_id=item_id)


def reset_record(record: SRSRecord) -> SRSRecord:
    """Wipe a record's familiarity back to defaults, keeping its identity."""
    return default_record(record.item_id)


def with_item_id(record: SRSRecord, item_id: str) -> SRSRecord:
    """Return the record keyed to ``item_id``."""
    if record.item_id == item_id:
        return record
    return replace(record, item_id=item_id)
