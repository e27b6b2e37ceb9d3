"""
Tests for the in-session quiz state machine.

Tests cover:
- Graduation after two consecutive "knew it" answers
- Requeue order and first-attempt accounting
- Store writes per answer and atomicity on store failure
- Lifecycle errors (empty start, finish before complete, closed session)
- Forced-choice answers
"""

from datetime import timedelta

import pytest

from lexiread.errors import InvalidSessionError, SessionBusyError
from lexiread.schemas import QuizMode
from lexiread.session import LearningSession, build_questions
from lexiread.srs import InMemoryStore, SessionGrade, default_record

KNEW = SessionGrade.KNEW_IT
DIDNT = SessionGrade.DIDNT_KNOW
NOT_SURE = SessionGrade.NOT_SURE


class FailingStore(InMemoryStore):
    """Store whose record writes fail while ``fail`` is set."""

    def __init__(self):
        super().__init__()
        self.fail = True

    def put_record(self, item_id, record):
        if self.fail:
            raise RuntimeError("disk full")
        super().put_record(item_id, record)


class FlakySessionStore(InMemoryStore):
    """Store whose first ``append_session`` call fails."""

    def __init__(self):
        super().__init__()
        self.append_calls = 0

    def append_session(self, session):
        self.append_calls += 1
        if self.append_calls == 1:
            raise RuntimeError("connection reset")
        super().append_session(session)


@pytest.fixture
def session(memory_store, now):
    return LearningSession(memory_store, clock=lambda: now)


def _assert_counts(session):
    assert session.active_count + session.graduated_count == session.total_items


class TestStart:

    def test_empty_sample_rejected(self, session):
        with pytest.raises(InvalidSessionError):
            session.start([])
        assert not session.is_active

    def test_items_start_new_in_order(self, session, vocabulary):
        session.start(vocabulary[:3], list_id="basics")

        assert [p.item_id for p in session.active_items] == ["w-huis", "w-kat", "w-hond"]
        assert all(p.state == "new" for p in session.active_items)
        assert session.current().item_id == "w-huis"
        assert session.total_items == 3
        assert session.graduated_count == 0
        assert session.mode is QuizMode.FLASHCARD

    def test_vocabulary_items_become_flashcards(self, session, vocabulary):
        session.start(vocabulary[:1])
        question = session.current().question

        assert question.prompt == "huis"
        assert question.correct_answer == "house"
        assert question.options == []

    def test_bad_mode_leaves_running_session_intact(self, session, vocabulary):
        session.start(vocabulary[:2], list_id="basics")
        session.submit_answer(KNEW)
        before = (
            [p.item_id for p in session.active_items],
            session.total_items,
            session.first_attempt_correct,
            session.answers,
            session.mode,
            session.started_at,
            session.list_id,
        )

        with pytest.raises(ValueError):
            session.start(vocabulary[2:5], mode="bogus", list_id="other")

        assert session.is_active
        assert before == (
            [p.item_id for p in session.active_items],
            session.total_items,
            session.first_attempt_correct,
            session.answers,
            session.mode,
            session.started_at,
            session.list_id,
        )

    def test_empty_restart_leaves_running_session_intact(self, session, vocabulary):
        session.start(vocabulary[:2])
        session.submit_answer(KNEW)

        with pytest.raises(InvalidSessionError):
            session.start([])

        assert session.is_active
        assert session.total_items == 2
        assert len(session.answers) == 1

    def test_restart_discards_previous_state(self, session, vocabulary):
        session.start(vocabulary[:2])
        session.submit_answer(KNEW)
        session.start(vocabulary[2:3])

        assert session.total_items == 1
        assert session.first_attempt_correct == 0
        assert session.answers == []


class TestSubmitAnswer:

    def test_single_item_graduates_after_two_knew_it(self, session, vocabulary):
        session.start(vocabulary[:1])

        session.submit_answer(KNEW)
        assert not session.is_complete()
        assert session.current().state == "learning"

        progress = session.submit_answer(KNEW)
        assert progress.state == "graduated"
        assert session.is_complete()
        assert session.first_attempt_correct == 1
        assert session.total_items == 1

    def test_failure_requeues_and_resets_streak(self, session, vocabulary):
        a, b = vocabulary[:2]
        session.start([a, b])

        session.submit_answer(DIDNT)   # A -> tail
        _assert_counts(session)
        session.submit_answer(KNEW)    # B streak 1 -> tail
        assert session.current().item_id == a.item_id
        session.submit_answer(KNEW)    # A streak 1 -> tail
        session.submit_answer(KNEW)    # B streak 2 -> graduated
        assert [p.item_id for p in session.graduated_items] == [b.item_id]
        assert session.current().item_id == a.item_id
        assert not session.is_complete()

        session.submit_answer(KNEW)    # A streak 2 -> graduated
        _assert_counts(session)
        assert session.is_complete()
        assert [p.item_id for p in session.graduated_items] == [b.item_id, a.item_id]
        assert session.first_attempt_correct == 0

    def test_not_sure_breaks_streak(self, session, vocabulary):
        session.start(vocabulary[:1])
        session.submit_answer(KNEW)
        progress = session.submit_answer(NOT_SURE)

        assert progress.consecutive_correct == 0
        assert progress.state == "learning"
        assert progress.attempts == 2
        assert progress.last_grade == NOT_SURE

    def test_first_attempt_counted_once_per_item(self, session, vocabulary):
        session.start(vocabulary[:2])
        session.submit_answer(KNEW)
        session.submit_answer(DIDNT)
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)

        assert session.first_attempt_correct == 1

    def test_invariant_holds_throughout(self, session, vocabulary):
        session.start(vocabulary)
        grades = [DIDNT, KNEW, NOT_SURE, KNEW, KNEW, DIDNT, KNEW, KNEW]
        for grade in grades * 5:
            if session.is_complete():
                break
            session.submit_answer(grade)
            _assert_counts(session)

    def test_store_receives_sm2_update(self, session, memory_store, vocabulary, now):
        session.start(vocabulary[:1])
        session.submit_answer(KNEW)
        record = memory_store.get_record("w-huis")

        assert record.repetitions == 1
        assert record.interval == 1
        assert record.easiness_factor == pytest.approx(2.36)
        assert record.last_review_date == now

        session.submit_answer(DIDNT)
        record = memory_store.get_record("w-huis")
        assert record.repetitions == 0
        assert record.lapses == 1

    def test_answers_logged(self, session, vocabulary, now):
        session.start(vocabulary[:1])
        session.submit_answer(KNEW, now=now + timedelta(seconds=3))

        [answer] = session.answers
        assert answer.item_id == "w-huis"
        assert answer.grade == 3
        assert answer.timestamp == now + timedelta(seconds=3)

    def test_grades_are_clamped(self, session, vocabulary):
        session.start(vocabulary[:1])
        progress = session.submit_answer(11)

        assert progress.last_grade == 5
        assert progress.consecutive_correct == 1

    def test_submit_without_session(self, session):
        with pytest.raises(InvalidSessionError):
            session.submit_answer(KNEW)

    def test_submit_after_complete(self, session, vocabulary):
        session.start(vocabulary[:1])
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)

        with pytest.raises(InvalidSessionError):
            session.submit_answer(KNEW)
        with pytest.raises(InvalidSessionError):
            session.current()


class TestAtomicity:

    def test_store_failure_leaves_queue_untouched(self, vocabulary, now):
        store = FailingStore()
        session = LearningSession(store, clock=lambda: now)
        session.start(vocabulary[:2])

        with pytest.raises(RuntimeError):
            session.submit_answer(KNEW)

        head = session.current()
        assert head.item_id == "w-huis"
        assert head.attempts == 0
        assert head.state == "new"
        assert session.first_attempt_correct == 0
        assert session.answers == []
        assert store.get_record("w-huis") == default_record("w-huis")

        store.fail = False
        session.submit_answer(KNEW)
        assert session.first_attempt_correct == 1

    def test_overlapping_call_rejected(self, vocabulary, now):
        class ReentrantStore(InMemoryStore):
            session = None

            def get_record(self, item_id):
                self.session.submit_answer(KNEW)
                return super().get_record(item_id)

        store = ReentrantStore()
        session = LearningSession(store, clock=lambda: now)
        store.session = session
        session.start(vocabulary[:1])

        with pytest.raises(SessionBusyError):
            session.submit_answer(KNEW)

        assert session.current().attempts == 0
        assert isinstance(SessionBusyError("x"), InvalidSessionError)

    def test_overlapping_call_during_choice_rejected(self, vocabulary, now, rng):
        """The choice is compared and graded under one lock."""
        class ReentrantStore(InMemoryStore):
            session = None

            def get_record(self, item_id):
                self.session.submit_answer(DIDNT)
                return super().get_record(item_id)

        store = ReentrantStore()
        session = LearningSession(store, clock=lambda: now)
        store.session = session
        questions = build_questions(vocabulary[:2], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)
        session.start(questions, mode=QuizMode.MULTIPLE_CHOICE)
        head = session.current()

        with pytest.raises(SessionBusyError):
            session.answer_choice(head.question.correct_answer)

        assert session.current() is head
        assert head.attempts == 0
        assert session.answers == []


class TestForcedChoice:

    def test_correct_choice_counts_as_knew_it(self, session, vocabulary, rng):
        questions = build_questions(vocabulary[:2], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)
        session.start(questions, mode=QuizMode.MULTIPLE_CHOICE)

        assert session.answer_choice(session.current().question.correct_answer) is True
        assert session.answers[-1].grade == KNEW

    def test_wrong_choice_counts_as_didnt_know(self, session, vocabulary, rng):
        questions = build_questions(vocabulary[:2], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)
        session.start(questions, mode=QuizMode.MULTIPLE_CHOICE)
        question = session.current().question
        wrong = next(option for option in question.options if option != question.correct_answer)

        assert session.answer_choice(wrong) is False
        assert session.answers[-1].grade == DIDNT
        assert session.current().item_id != question.item_id

    def test_match_is_exact(self, session, vocabulary, rng):
        questions = build_questions(vocabulary[:1], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)
        session.start(questions, mode="multiple_choice")

        assert session.answer_choice("HOUSE") is False


class TestFinish:

    def _complete(self, session, vocabulary):
        session.start(vocabulary[:1], list_id="basics")
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)

    def test_finish_before_complete(self, session, vocabulary):
        session.start(vocabulary[:1])

        with pytest.raises(InvalidSessionError):
            session.finish()

    def test_finish_without_session(self, session):
        with pytest.raises(InvalidSessionError):
            session.finish()

    def test_finish_appends_session_record(self, session, memory_store, vocabulary, now):
        self._complete(session, vocabulary)
        record = session.finish(now=now + timedelta(minutes=2))

        assert memory_store.list_sessions() == [record]
        assert record.total_items == 1
        assert record.first_attempt_correct == 1
        assert record.list_id == "basics"
        assert record.mode == "flashcard"
        assert record.duration_seconds == 120.0
        assert [a.grade for a in record.answers] == [3, 3]
        assert not session.is_active

    def test_explicit_duration(self, session, vocabulary):
        self._complete(session, vocabulary)

        assert session.finish(duration_seconds=42.0).duration_seconds == 42.0

    def test_finish_twice_rejected(self, session, vocabulary):
        self._complete(session, vocabulary)
        session.finish()

        with pytest.raises(InvalidSessionError):
            session.finish()

    def test_failed_append_can_be_retried(self, vocabulary, now):
        store = FlakySessionStore()
        session = LearningSession(store, clock=lambda: now)
        session.start(vocabulary[:1])
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)

        with pytest.raises(RuntimeError):
            session.finish()

        assert session.is_active
        assert session.is_complete()
        assert store.list_sessions() == []

        record = session.finish()

        assert store.list_sessions() == [record]
        assert store.append_calls == 2
        assert not session.is_active

    def test_abandon_writes_no_session(self, session, memory_store, vocabulary):
        session.start(vocabulary[:2])
        session.submit_answer(KNEW)
        session.abandon()

        assert not session.is_active
        assert memory_store.list_sessions() == []
        assert memory_store.get_record("w-huis").repetitions == 1
        with pytest.raises(InvalidSessionError):
            session.submit_answer(KNEW)

    def test_progress(self, session, vocabulary):
        session.start(vocabulary[:2])
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)
        session.submit_answer(KNEW)
        progress = session.progress()

        assert progress.graduated == 1
        assert progress.remaining == 1
        assert progress.total == 2
        assert progress.fraction_complete == 0.5
