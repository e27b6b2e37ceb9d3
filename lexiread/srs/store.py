"""
Store - Persistence contract for SRS records and the session log

The scheduling core talks to persistence only through this protocol.
``InMemoryStore`` backs tests and embedded use; ``SqlStore`` in
``lexiread.srs.database`` is the durable implementation.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional, Protocol, runtime_checkable

from lexiread.clock import ensure_utc
from lexiread.session_log import QuizSessionRecord
from lexiread.srs.record import SRSRecord, default_record, with_item_id


@runtime_checkable
class Store(Protocol):
    """Single writer-of-record for SRS records and finished sessions."""

    def get_record(self, item_id: str) -> SRSRecord:
        """Return the stored record, or the default record if none exists."""
        ...

    def put_record(self, item_id: str, record: SRSRecord) -> None:
        ...

    def append_session(self, session: QuizSessionRecord) -> None:
        ...

    def list_sessions(self, since: Optional[datetime] = None) -> list[QuizSessionRecord]:
        """Sessions with timestamp >= since, oldest first."""
        ...

    def list_records(self, item_ids: Optional[Iterable[str]] = None) -> list[SRSRecord]:
        """Stored records for the given ids (all records if None)."""
        ...

    def delete_record(self, item_id: str) -> None:
        ...

    def reset_record(self, item_id: str) -> SRSRecord:
        ...


class InMemoryStore:
    """
    Dict-backed Store.

    Records are immutable dataclasses, so they are shared without copying.
    """

    def __init__(self):
        self._records: dict[str, SRSRecord] = {}
        self._sessions: list[QuizSessionRecord] = []

    def get_record(self, item_id: str) -> SRSRecord:
        return self._records.get(item_id) or default_record(item_id)

    def put_record(self, item_id: str, record: SRSRecord) -> None:
        self._records[item_id] = with_item_id(record, item_id)

    def append_session(self, session: QuizSessionRecord) -> None:
        self._sessions.append(session)

    def list_sessions(self, since: Optional[datetime] = None) -> list[QuizSessionRecord]:
        sessions = sorted(self._sessions, key=lambda s: s.timestamp)
        if since is None:
            return sessions
        since = ensure_utc(since)
        return [s for s in sessions if ensure_utc(s.timestamp) >= since]

    def list_records(self, item_ids: Optional[Iterable[str]] = None) -> list[SRSRecord]:
        if item_ids is None:
            return [self._records[key] for key in sorted(self._records)]
        return [self._records[key] for key in item_ids if key in self._records]

    def delete_record(self, item_id: str) -> None:
        self._records.pop(item_id, None)

    def reset_record(self, item_id: str) -> SRSRecord:
        record = default_record(item_id)
        self._records[item_id] = record
        return record
