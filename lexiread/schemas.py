"""
Pydantic models for vocabulary items and quiz questions.

Vocabulary items are owned by the vocabulary provider; the scheduling core
only reads their ``item_id``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QuizMode(str, Enum):
    """How a quiz presents items and collects answers."""
    FLASHCARD = "flashcard"              # Learner grades themselves
    MULTIPLE_CHOICE = "multiple_choice"  # Pick the translation
    REVERSE = "reverse"                  # Pick the word for a translation

    @property
    def is_forced_choice(self) -> bool:
        return self is not QuizMode.FLASHCARD


class VocabularyItem(BaseModel):
    """A word or phrase the reader has saved."""
    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., min_length=1, description="Stable identifier")
    text: str = Field(..., description="Word as it appeared in the document")
    translation: str = Field(default="", description="Translation text")
    source_lang: str = Field(default="", description="Language of text")
    target_lang: str = Field(default="", description="Language of translation")
    list_ids: list[str] = Field(default_factory=list, description="Word lists containing the item")


class QuizQuestion(BaseModel):
    """The payload shown to the learner for one item."""
    model_config = ConfigDict(frozen=True)

    item: VocabularyItem
    prompt: str
    correct_answer: str
    options: list[str] = Field(default_factory=list, description="Empty for flashcards")

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @classmethod
    def flashcard(cls, item: VocabularyItem) -> QuizQuestion:
        """Question that shows the word and reveals its translation."""
        return cls(item=item, prompt=item.text, correct_answer=item.translation)
