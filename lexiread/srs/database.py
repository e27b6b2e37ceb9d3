"""
Database - SQLAlchemy implementation of the Store

Handles all database operations for SRS records and the session log.
Uses SQLAlchemy ORM; any backend SQLAlchemy supports works, SQLite is the
default.

This module handles ONLY database I/O.
Algorithm logic is handled by the engine module.
"""

from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional

from loguru import logger
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lexiread import config
from lexiread.clock import ensure_utc, parse_timestamp
from lexiread.session_log import AnswerRecord, QuizSessionRecord
from lexiread.srs.models import Base, QuizSessionRow, SessionAnswerRow, SRSRecordRow
from lexiread.srs.record import SRSRecord, default_record, with_item_id

REQUIRED_TABLES = ("srs_records", "quiz_sessions", "session_answers")


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Build a SQLAlchemy engine.

    In-memory SQLite shares a single connection so every session sees the
    same database; file-backed SQLite gets its parent directory created;
    server databases use connection pooling.

    Args:
        database_url: Connection string (defaults to DATABASE_URL)

    Returns:
        SQLAlchemy Engine instance
    """
    url = database_url or config.get_database_url()

    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        db_path = url.split("///", 1)[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url)

    return create_engine(
        url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def init_db(engine: Engine) -> None:
    """
    Create missing tables.

    Safe to call multiple times - only creates tables that don't exist.
    """
    existing = set(inspect(engine).get_table_names())
    if all(name in existing for name in REQUIRED_TABLES):
        return
    Base.metadata.create_all(engine)
    logger.debug("Created SRS tables on {}", engine.url.render_as_string(hide_password=True))


def reset_db(engine: Engine) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    All review history will be lost!
    """
    Base.metadata.drop_all(engine)
    logger.warning("All SRS tables dropped")
    init_db(engine)


def _row_to_record(row: SRSRecordRow) -> SRSRecord:
    return SRSRecord(
        item_id=row.item_id,
        easiness_factor=row.easiness_factor,
        interval=row.interval,
        repetitions=row.repetitions,
        last_review_date=parse_timestamp(row.last_review_date),
        next_review_date=parse_timestamp(row.next_review_date),
        lapses=row.lapses or 0,
    )


def _copy_record_to_row(record: SRSRecord, row: SRSRecordRow) -> None:
    row.easiness_factor = record.easiness_factor
    row.interval = record.interval
    row.repetitions = record.repetitions
    row.last_review_date = _format_ts(record.last_review_date)
    row.next_review_date = _format_ts(record.next_review_date)
    row.lapses = record.lapses
    row.familiarity_level = record.familiarity_level


def _row_to_session(row: QuizSessionRow) -> QuizSessionRecord:
    return QuizSessionRecord(
        session_id=row.session_id,
        timestamp=parse_timestamp(row.timestamp),
        mode=row.mode,
        list_id=row.list_id,
        total_items=row.total_items,
        first_attempt_correct=row.first_attempt_correct,
        duration_seconds=row.duration_seconds,
        answers=tuple(
            AnswerRecord(
                item_id=answer.item_id,
                grade=answer.grade,
                timestamp=parse_timestamp(answer.timestamp),
            )
            for answer in row.answers
        ),
    )


class SqlStore:
    """
    Store backed by a relational database.

    Each operation runs in its own short-lived session that commits on
    success and rolls back before re-raising on failure.
    """

    def __init__(self, engine: Optional[Engine] = None, create_tables: bool = True):
        self.engine = engine or get_engine()
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        if create_tables:
            init_db(self.engine)

    @classmethod
    def from_url(cls, database_url: str) -> SqlStore:
        return cls(get_engine(database_url))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ---- SRS records ----

    def get_record(self, item_id: str) -> SRSRecord:
        with self._session() as session:
            row = session.get(SRSRecordRow, item_id)
            if row is None:
                return default_record(item_id)
            return _row_to_record(row)

    def put_record(self, item_id: str, record: SRSRecord) -> None:
        record = with_item_id(record, item_id)
        with self._session() as session:
            row = session.get(SRSRecordRow, item_id)
            if row is None:
                row = SRSRecordRow(item_id=item_id)
                session.add(row)
            _copy_record_to_row(record, row)

    def list_records(self, item_ids: Optional[Iterable[str]] = None) -> list[SRSRecord]:
        with self._session() as session:
            query = session.query(SRSRecordRow)
            if item_ids is None:
                rows = query.order_by(SRSRecordRow.item_id).all()
                return [_row_to_record(row) for row in rows]

            wanted = list(item_ids)
            if not wanted:
                return []
            rows = query.filter(SRSRecordRow.item_id.in_(wanted)).all()
            by_id = {row.item_id: row for row in rows}
            return [_row_to_record(by_id[key]) for key in wanted if key in by_id]

    def delete_record(self, item_id: str) -> None:
        with self._session() as session:
            row = session.get(SRSRecordRow, item_id)
            if row is not None:
                session.delete(row)

    def reset_record(self, item_id: str) -> SRSRecord:
        record = default_record(item_id)
        self.put_record(item_id, record)
        return record

    # ---- Session log ----

    def append_session(self, record: QuizSessionRecord) -> None:
        with self._session() as session:
            row = QuizSessionRow(
                session_id=record.session_id,
                timestamp=_format_ts(record.timestamp),
                mode=record.mode,
                list_id=record.list_id,
                total_items=record.total_items,
                first_attempt_correct=record.first_attempt_correct,
                duration_seconds=record.duration_seconds,
            )
            row.answers = [
                SessionAnswerRow(
                    position=position,
                    item_id=answer.item_id,
                    grade=answer.grade,
                    timestamp=_format_ts(answer.timestamp),
                )
                for position, answer in enumerate(record.answers)
            ]
            session.add(row)

    def list_sessions(self, since: Optional[datetime] = None) -> list[QuizSessionRecord]:
        with self._session() as session:
            query = session.query(QuizSessionRow)
            if since is not None:
                query = query.filter(QuizSessionRow.timestamp >= _format_ts(since))
            rows = query.order_by(QuizSessionRow.timestamp).all()
            return [_row_to_session(row) for row in rows]
