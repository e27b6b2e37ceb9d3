"""Quiz session state machine and batch helpers."""

from lexiread.session.learning_session import LearningSession
from lexiread.session.progress import ProgressState, SessionProgress, WordProgress
from lexiread.session.questions import build_question, build_questions, sample_items

__all__ = [
    "LearningSession",
    "ProgressState",
    "SessionProgress",
    "WordProgress",
    "build_question",
    "build_questions",
    "sample_items",
]
