"""
Exception types raised by the scheduling core.

Grades are never rejected (they are clamped), so there is no grade error.
Store and database errors are not wrapped: they reach the caller unchanged.
"""


class LexiReadError(Exception):
    """Base class for all errors raised by lexiread."""


class InvalidSessionError(LexiReadError):
    """A learning session operation contradicts the session state machine."""


class SessionBusyError(InvalidSessionError):
    """Another call is already mutating the same session instance."""


class ConfigurationError(LexiReadError):
    """An environment setting could not be parsed."""
