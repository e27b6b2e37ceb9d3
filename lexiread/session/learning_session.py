"""
Learning Session - In-session quiz state machine

Drives one quiz until every sampled item has graduated.

Per-item states:
    new -> learning -> graduated

Session flow:
1. start(): one WordProgress per sampled item, all in the active queue
2. submit_answer(): grade the head of the queue
   - persist the SM-2 update through the Store
   - "knew it" twice in a row graduates the item
   - anything else sends it to the back of the queue
3. finish(): once the queue is empty, write a QuizSessionRecord

Graduation here is independent of the item's persisted familiarity level.

A session is driven by exactly one caller. Overlapping calls on the same
instance are rejected with SessionBusyError.
"""

from __future__ import annotations
import threading
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional, Sequence, Union

from loguru import logger

from lexiread.clock import ensure_utc, utc_now
from lexiread.errors import InvalidSessionError, SessionBusyError
from lexiread.schemas import QuizMode, QuizQuestion, VocabularyItem
from lexiread.session.progress import SessionProgress, WordProgress
from lexiread.session_log import AnswerRecord, QuizSessionRecord
from lexiread.srs.constants import GRADUATION_THRESHOLD, SessionGrade
from lexiread.srs.engine import clamp_grade, compute_next_record, is_correct
from lexiread.srs.store import Store

SampleItem = Union[QuizQuestion, VocabularyItem]


def _as_question(item: SampleItem) -> QuizQuestion:
    if isinstance(item, QuizQuestion):
        return item
    return QuizQuestion.flashcard(item)


class LearningSession:
    """
    Stateful quiz over a fixed sample of items.

    Args:
        store: Persistence collaborator; receives one record write per answer
            and the session record on finish
        clock: Source of "now" when a call does not pass one explicitly
    """

    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store
        self.clock = clock

        self._lock = threading.Lock()
        self._active = False
        self._queue: deque[WordProgress] = deque()
        self._graduated: list[WordProgress] = []
        self._answers: list[AnswerRecord] = []

        self.mode: Optional[QuizMode] = None
        self.list_id: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.total_items = 0
        self.first_attempt_correct = 0

    # ---- Guards ----

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError("Another call is already in progress on this session")
        try:
            yield
        finally:
            self._lock.release()

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now if now is not None else self.clock())

    def _require_active(self) -> None:
        if not self._active:
            raise InvalidSessionError("No active session; call start() first")

    def _require_head(self) -> WordProgress:
        self._require_active()
        if not self._queue:
            raise InvalidSessionError("No item left to answer; the session is complete")
        return self._queue[0]

    def _submit_locked(
        self,
        head: WordProgress,
        grade: Union[int, float],
        now: Optional[datetime]
    ) -> WordProgress:
        """Grade ``head``; the caller holds the session lock."""
        now = self._now(now)
        quality = clamp_grade(grade)

        previous = self.store.get_record(head.item_id)
        self.store.put_record(head.item_id, compute_next_record(previous, quality, now))

        if head.attempts == 0 and is_correct(quality):
            self.first_attempt_correct += 1

        self._queue.popleft()
        if quality >= SessionGrade.KNEW_IT:
            head.consecutive_correct += 1
            if head.consecutive_correct >= GRADUATION_THRESHOLD:
                head.state = "graduated"
                self._graduated.append(head)
            else:
                head.state = "learning"
                self._queue.append(head)
        else:
            head.consecutive_correct = 0
            head.state = "learning"
            self._queue.append(head)

        head.attempts += 1
        head.last_grade = quality
        self._answers.append(AnswerRecord(item_id=head.item_id, grade=quality, timestamp=now))

        logger.debug(
            "Answered {} with grade {} -> {} (streak {}, attempts {})",
            head.item_id, quality, head.state, head.consecutive_correct, head.attempts,
        )
        return head

    # ---- Lifecycle ----

    def start(
        self,
        sample_items: Sequence[SampleItem],
        mode: Union[QuizMode, str] = QuizMode.FLASHCARD,
        list_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> None:
        """
        Begin a session over ``sample_items``.

        Any previous, unfinished state on this instance is discarded. If the
        call raises, the instance is left exactly as it was.

        Args:
            sample_items: Questions (or bare items, shown as flashcards)
            mode: Presentation protocol
            list_id: Word list the sample came from, for the session log
            now: Session start time

        Raises:
            InvalidSessionError: If the sample is empty
            ValueError: If ``mode`` is not a QuizMode
        """
        with self._exclusive():
            if not sample_items:
                raise InvalidSessionError("A session needs at least one item")

            quiz_mode = QuizMode(mode)
            questions = [_as_question(item) for item in sample_items]
            started_at = self._now(now)

            self._queue = deque(WordProgress(question=q) for q in questions)
            self._graduated = []
            self._answers = []
            self.first_attempt_correct = 0
            self.total_items = len(questions)
            self.mode = quiz_mode
            self.list_id = list_id
            self.started_at = started_at
            self._active = True

            logger.info(
                "Started {} session with {} items (list={})",
                self.mode.value, self.total_items, list_id,
            )

    def current(self) -> WordProgress:
        """The item being presented (head of the active queue)."""
        return self._require_head()

    def submit_answer(self, grade: Union[int, float], now: Optional[datetime] = None) -> WordProgress:
        """
        Grade the current item.

        The SM-2 update is written through the Store before the queue moves.
        If the write fails the error propagates and the session state is
        unchanged, so the same item can be answered again.

        Args:
            grade: Session grade (SessionGrade values) or any 0-5 grade
            now: Answer time

        Returns:
            The answered item's progress after the update
        """
        with self._exclusive():
            return self._submit_locked(self._require_head(), grade, now)

    def answer_choice(self, answer: str, now: Optional[datetime] = None) -> bool:
        """
        Forced-choice answer: exact string match against the correct answer.

        Correct maps to "knew it", anything else to "didn't know".

        Returns:
            True if the answer was correct
        """
        with self._exclusive():
            head = self._require_head()
            correct = answer == head.question.correct_answer
            grade = SessionGrade.KNEW_IT if correct else SessionGrade.DIDNT_KNOW
            self._submit_locked(head, grade, now)
            return correct

    def is_complete(self) -> bool:
        """True once the active queue is empty and something has graduated."""
        return self._active and not self._queue and len(self._graduated) > 0

    def finish(
        self,
        now: Optional[datetime] = None,
        duration_seconds: Optional[float] = None
    ) -> QuizSessionRecord:
        """
        Close a completed session and append its record to the Store.

        Args:
            now: Finish time, used as the record timestamp
            duration_seconds: Study time; defaults to the time since start()

        Returns:
            The persisted QuizSessionRecord

        Raises:
            InvalidSessionError: If the session is not complete
        """
        with self._exclusive():
            self._require_active()
            if not self.is_complete():
                raise InvalidSessionError(
                    f"Session not complete: {len(self._queue)} of {self.total_items} items still active"
                )

            now = self._now(now)
            if duration_seconds is None:
                duration_seconds = max(0.0, (now - self.started_at).total_seconds())

            record = QuizSessionRecord(
                timestamp=now,
                mode=self.mode.value,
                list_id=self.list_id,
                total_items=self.total_items,
                first_attempt_correct=self.first_attempt_correct,
                duration_seconds=duration_seconds,
                answers=tuple(self._answers),
            )
            self.store.append_session(record)
            self._active = False

            logger.info(
                "Finished session {}: {}/{} correct on first attempt, {} answers",
                record.session_id, record.first_attempt_correct, record.total_items, len(record.answers),
            )
            return record

    def abandon(self) -> None:
        """
        Drop the session without writing a session record.

        SRS records already written by submit_answer stay in the Store.
        """
        with self._exclusive():
            if self._active:
                logger.info(
                    "Abandoned session after {} answers ({} of {} graduated)",
                    len(self._answers), len(self._graduated), self.total_items,
                )
            self._active = False

    # ---- Introspection ----

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def active_count(self) -> int:
        return len(self._queue)

    @property
    def graduated_count(self) -> int:
        return len(self._graduated)

    @property
    def active_items(self) -> list[WordProgress]:
        """Snapshot of the active queue, head first."""
        return list(self._queue)

    @property
    def graduated_items(self) -> list[WordProgress]:
        return list(self._graduated)

    @property
    def answers(self) -> list[AnswerRecord]:
        return list(self._answers)

    def progress(self) -> SessionProgress:
        return SessionProgress(
            graduated=len(self._graduated),
            remaining=len(self._queue),
            total=self.total_items,
        )
