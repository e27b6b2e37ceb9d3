"""
Sampling and question building for quiz sessions.

These helpers only shape the batch handed to ``LearningSession.start``;
they never decide scheduling.
"""

from __future__ import annotations
import random
from typing import Iterable, Optional, Sequence

from lexiread.schemas import QuizMode, QuizQuestion, VocabularyItem


N_DISTRACTORS = 3  # Wrong options shown next to the correct answer


def sample_items(
    items: Sequence[VocabularyItem],
    quiz_size: int,
    rng: random.Random,
    due_ids: Optional[Iterable[str]] = None
) -> list[VocabularyItem]:
    """
    Pick the items for one quiz session.

    Args:
        items: Candidate items (e.g. one word list)
        quiz_size: Maximum number of items to return
        rng: Random source, passed in so sessions are reproducible in tests
        due_ids: If given, only these items are eligible (review-only quiz)

    Returns:
        Shuffled sample of at most ``quiz_size`` items
    """
    candidates = list(items)
    if due_ids is not None:
        due = set(due_ids)
        candidates = [item for item in candidates if item.item_id in due]

    rng.shuffle(candidates)
    return candidates[:max(0, quiz_size)]


def _answer_for(item: VocabularyItem, mode: QuizMode) -> str:
    return item.text if mode is QuizMode.REVERSE else item.translation


def _prompt_for(item: VocabularyItem, mode: QuizMode) -> str:
    return item.translation if mode is QuizMode.REVERSE else item.text


def build_question(
    item: VocabularyItem,
    mode: QuizMode,
    pool: Sequence[VocabularyItem],
    rng: random.Random,
    n_distractors: int = N_DISTRACTORS
) -> QuizQuestion:
    """
    Build the question for one item.

    Flashcards carry no options. Forced-choice questions get the correct
    answer plus up to ``n_distractors`` distinct wrong answers drawn from
    other items in ``pool``, in shuffled order.
    """
    mode = QuizMode(mode)
    if mode is QuizMode.FLASHCARD:
        return QuizQuestion.flashcard(item)

    correct = _answer_for(item, mode)
    wrong = sorted({
        _answer_for(other, mode)
        for other in pool
        if other.item_id != item.item_id and _answer_for(other, mode) not in ("", correct)
    })
    distractors = rng.sample(wrong, min(n_distractors, len(wrong)))

    options = [correct, *distractors]
    rng.shuffle(options)
    return QuizQuestion(
        item=item,
        prompt=_prompt_for(item, mode),
        correct_answer=correct,
        options=options,
    )


def build_questions(
    items: Sequence[VocabularyItem],
    mode: QuizMode,
    pool: Sequence[VocabularyItem],
    rng: random.Random,
    n_distractors: int = N_DISTRACTORS
) -> list[QuizQuestion]:
    """Build one question per item, in the order given."""
    return [build_question(item, mode, pool, rng, n_distractors) for item in items]
