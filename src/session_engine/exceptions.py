"""Custom exception hierarchy for the session engine."""

from __future__ import annotations


class SessionEngineError(Exception):
    """Base exception for all session_engine errors."""


class PlanParseError(SessionEngineError):
    """A coach reply could not be turned into a workout plan."""


class InvalidFeedbackError(SessionEngineError, ValueError):
    """Post-workout feedback is outside the accepted range."""

    def __init__(self, message: str, perceived_exertion: int | None = None) -> None:
        super().__init__(message)
        self.perceived_exertion = perceived_exertion
