"""
SQLAlchemy ORM Models for SRS Persistence

Timestamps are stored as ISO-8601 text so timezone offsets and microseconds
round-trip exactly on every backend, including SQLite.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class SRSRecordRow(Base):
    """
    Persistent SM-2 state for a single vocabulary item.
    """
    __tablename__ = 'srs_records'

    item_id = Column(String(255), primary_key=True, nullable=False)

    # SM-2 parameters
    easiness_factor = Column(Float, nullable=False)
    interval = Column(Integer, nullable=False)
    repetitions = Column(Integer, nullable=False)

    # Review tracking (ISO-8601)
    last_review_date = Column(String(64), nullable=True)
    next_review_date = Column(String(64), nullable=True)
    lapses = Column(Integer, nullable=False, default=0)

    # Denormalised for filtering; recomputed from easiness_factor on every write
    familiarity_level = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<SRSRecordRow({self.item_id}, ef={self.easiness_factor}, interval={self.interval})>"


class QuizSessionRow(Base):
    """
    Log entry for one finished quiz session.
    """
    __tablename__ = 'quiz_sessions'

    session_id = Column(String(64), primary_key=True, nullable=False)
    timestamp = Column(String(64), nullable=False, index=True)
    mode = Column(String(50), nullable=False)
    list_id = Column(String(255), nullable=True)
    total_items = Column(Integer, nullable=False)
    first_attempt_correct = Column(Integer, nullable=False)
    duration_seconds = Column(Float, nullable=True)

    answers = relationship(
        "SessionAnswerRow",
        order_by="SessionAnswerRow.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<QuizSessionRow({self.session_id}, mode={self.mode}, items={self.total_items})>"


class SessionAnswerRow(Base):
    """
    A single graded answer within a logged session.
    """
    __tablename__ = 'session_answers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(64), ForeignKey('quiz_sessions.session_id'), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # Order of submission within the session
    item_id = Column(String(255), nullable=False)
    grade = Column(Integer, nullable=False)
    timestamp = Column(String(64), nullable=False)

    def __repr__(self):
        return f"<SessionAnswerRow({self.session_id}#{self.position}, {self.item_id}, grade={self.grade})>"
