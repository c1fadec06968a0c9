"""Serialization module: turn coach replies into playable workouts."""

from session_engine.serialization.plan_json import (
    extract_plan_json,
    parse_duration_seconds,
    parse_plan_response,
    workout_from_plan,
)

__all__ = [
    "extract_plan_json",
    "parse_duration_seconds",
    "parse_plan_response",
    "workout_from_plan",
]
