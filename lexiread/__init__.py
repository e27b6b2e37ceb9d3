"""LexiRead spaced-repetition core: SM-2 scheduling, quiz sessions and study stats."""

__version__ = "0.1.0"
