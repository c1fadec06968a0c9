"""Data models for the session engine."""

from session_engine.models.enums import Phase, Section
from session_engine.models.feedback import WorkoutFeedback
from session_engine.models.session import Session
from session_engine.models.workout import Circuit, Exercise, Workout, validate_workout

__all__ = [
    "Circuit",
    "Exercise",
    "Phase",
    "Section",
    "Session",
    "Workout",
    "WorkoutFeedback",
    "validate_workout",
]
