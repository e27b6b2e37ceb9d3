"""
Review scheduler for selecting items to review.

Works on snapshots of SRS records read from the Store; it never writes.

Due ordering:
1. New items (never reviewed)
2. Lapsed items (most recent review failed)
3. Everything else, earliest scheduled review first

Ties are broken by item_id so the same input always yields the same order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from loguru import logger

from lexiread.clock import end_of_utc_day, ensure_utc, utc_day
from lexiread.srs.constants import MAX_FAMILIARITY
from lexiread.srs.engine import is_due
from lexiread.srs.record import SRSRecord


NEW_ITEM_BUCKET = 0  # familiarity_breakdown key for never-reviewed items
OVERDUE_WEEK_DAYS = 7


@dataclass(frozen=True)
class OverdueBreakdown:
    """
    Reviewed items whose review day has arrived, grouped by how late they are.

    Days are UTC calendar days; ``within_week`` covers 2-7 days late.
    """
    today: int = 0
    yesterday: int = 0
    within_week: int = 0
    older: int = 0

    @property
    def total(self) -> int:
        return self.today + self.yesterday + self.within_week + self.older


def _due_sort_key(record: SRSRecord) -> tuple:
    if record.is_new:
        return (0, 0.0, record.item_id)
    priority = 1 if record.is_lapsed else 2
    return (priority, ensure_utc(record.next_review_date).timestamp(), record.item_id)


class ReviewScheduler:
    """
    Cross-session due query and review forecast.

    Args:
        known_item_ids: Ids of items that still exist in the vocabulary.
            Records for any other id are skipped. ``None`` accepts all.
    """

    def __init__(self, known_item_ids: Optional[Iterable[str]] = None):
        self.known_item_ids = set(known_item_ids) if known_item_ids is not None else None

    def _visible(self, records: Iterable[SRSRecord]) -> list[SRSRecord]:
        """Drop records for unknown items; the last record per id wins."""
        by_id: dict[str, SRSRecord] = {}
        skipped = 0
        for record in records:
            if self.known_item_ids is not None and record.item_id not in self.known_item_ids:
                skipped += 1
                continue
            by_id[record.item_id] = record
        if skipped:
            logger.debug("Skipped {} records without a vocabulary item", skipped)
        return list(by_id.values())

    def select_due(
        self,
        records: Iterable[SRSRecord],
        now: datetime,
        limit: Optional[int] = None,
        include_new: bool = True,
        include_learning: bool = True
    ) -> list[str]:
        """
        Select items due for review.

        Args:
            records: SRS records to consider
            now: Reference time
            limit: Maximum number of ids to return (None = all)
            include_new: Include never-reviewed items
            include_learning: Include items that have been reviewed before

        Returns:
            Item ids in review order
        """
        due = [
            r for r in self._visible(records)
            if (include_new if r.is_new else include_learning)
            and is_due(r.next_review_date, now)
        ]
        due.sort(key=_due_sort_key)
        item_ids = [r.item_id for r in due]
        if limit is not None:
            return item_ids[:max(0, limit)]
        return item_ids

    def select_due_today(
        self,
        records: Iterable[SRSRecord],
        now: datetime,
        include_new: bool = True,
        include_learning: bool = True
    ) -> list[str]:
        """Items due at any point before the end of now's UTC day."""
        return self.select_due(
            records,
            end_of_utc_day(now),
            include_new=include_new,
            include_learning=include_learning,
        )

    def overdue_breakdown(self, records: Iterable[SRSRecord], now: datetime) -> OverdueBreakdown:
        """
        Group reviewed items scheduled on or before now's UTC day by lateness.

        Never-reviewed items are not overdue and are not counted.

        Args:
            records: SRS records to consider
            now: Reference time

        Returns:
            OverdueBreakdown with today / yesterday / within a week / older counts
        """
        today = utc_day(now)
        counts = {"today": 0, "yesterday": 0, "within_week": 0, "older": 0}

        for record in self._visible(records):
            if record.is_new:
                continue
            days_late = (today - utc_day(record.next_review_date)).days
            if days_late < 0:
                continue
            if days_late == 0:
                counts["today"] += 1
            elif days_late == 1:
                counts["yesterday"] += 1
            elif days_late <= OVERDUE_WEEK_DAYS:
                counts["within_week"] += 1
            else:
                counts["older"] += 1

        return OverdueBreakdown(**counts)

    def forecast(
        self,
        records: Iterable[SRSRecord],
        horizon_days: int,
        now: datetime
    ) -> list[int]:
        """
        Count reviews falling on each of the next ``horizon_days`` UTC days.

        Never-reviewed and overdue items count toward day 0; items scheduled
        past the horizon are ignored.

        Args:
            records: SRS records to consider
            horizon_days: Number of days to forecast
            now: Reference time (day 0 is now's UTC calendar day)

        Returns:
            List of per-day counts, length ``horizon_days``
        """
        if horizon_days <= 0:
            return []

        counts = [0] * horizon_days
        today = utc_day(now)

        for record in self._visible(records):
            if record.next_review_date is None:
                counts[0] += 1
                continue
            offset = (utc_day(record.next_review_date) - today).days
            if offset < 0:
                counts[0] += 1
            elif offset < horizon_days:
                counts[offset] += 1

        return counts

    def familiarity_breakdown(self, records: Iterable[SRSRecord]) -> dict[int, int]:
        """
        Count items per familiarity level.

        Returns:
            Mapping of level (1-5) to count, with key 0 for never-reviewed items
        """
        breakdown = {level: 0 for level in range(NEW_ITEM_BUCKET, MAX_FAMILIARITY + 1)}
        for record in self._visible(records):
            if record.is_new:
                breakdown[NEW_ITEM_BUCKET] += 1
            else:
                breakdown[record.familiarity_level] += 1
        return breakdown
