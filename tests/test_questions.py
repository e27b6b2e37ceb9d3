"""
Tests for quiz sampling and question building.
"""

import random

from lexiread.schemas import QuizMode, QuizQuestion, VocabularyItem
from lexiread.session import build_question, build_questions, sample_items


class TestSampleItems:

    def test_limits_to_quiz_size(self, vocabulary, rng):
        sample = sample_items(vocabulary, 3, rng)

        assert len(sample) == 3
        assert len({item.item_id for item in sample}) == 3

    def test_small_pool_returns_everything(self, vocabulary, rng):
        sample = sample_items(vocabulary, 50, rng)

        assert sorted(item.item_id for item in sample) == sorted(item.item_id for item in vocabulary)

    def test_same_seed_same_sample(self, vocabulary):
        first = sample_items(vocabulary, 3, random.Random(7))
        second = sample_items(vocabulary, 3, random.Random(7))

        assert first == second

    def test_due_filter(self, vocabulary, rng):
        sample = sample_items(vocabulary, 10, rng, due_ids=["w-kat", "w-boom", "not-in-pool"])

        assert sorted(item.item_id for item in sample) == ["w-boom", "w-kat"]

    def test_input_not_mutated(self, vocabulary, rng):
        before = list(vocabulary)
        sample_items(vocabulary, 2, rng)

        assert vocabulary == before

    def test_zero_size(self, vocabulary, rng):
        assert sample_items(vocabulary, 0, rng) == []


class TestBuildQuestion:

    def test_flashcard(self, vocabulary, rng):
        question = build_question(vocabulary[0], QuizMode.FLASHCARD, vocabulary, rng)

        assert question == QuizQuestion.flashcard(vocabulary[0])
        assert question.options == []

    def test_multiple_choice(self, vocabulary, rng):
        question = build_question(vocabulary[0], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)

        assert question.prompt == "huis"
        assert question.correct_answer == "house"
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count("house") == 1

    def test_reverse(self, vocabulary, rng):
        question = build_question(vocabulary[1], QuizMode.REVERSE, vocabulary, rng)

        assert question.prompt == "cat"
        assert question.correct_answer == "kat"
        assert "kat" in question.options
        assert set(question.options) <= {item.text for item in vocabulary}

    def test_small_pool_gives_fewer_options(self, vocabulary, rng):
        question = build_question(vocabulary[0], "multiple_choice", vocabulary[:2], rng)

        assert sorted(question.options) == ["cat", "house"]

    def test_blank_and_duplicate_answers_skipped(self, vocabulary, rng):
        pool = [
            vocabulary[0],
            VocabularyItem(item_id="dup", text="woning", translation="house"),
            VocabularyItem(item_id="blank", text="eh"),
            vocabulary[1],
        ]
        question = build_question(vocabulary[0], QuizMode.MULTIPLE_CHOICE, pool, rng)

        assert sorted(question.options) == ["cat", "house"]

    def test_build_questions_keeps_order(self, vocabulary, rng):
        questions = build_questions(vocabulary[:3], QuizMode.MULTIPLE_CHOICE, vocabulary, rng)

        assert [q.item_id for q in questions] == ["w-huis", "w-kat", "w-hond"]
        assert QuizMode.MULTIPLE_CHOICE.is_forced_choice
        assert not QuizMode.FLASHCARD.is_forced_choice
