"""Coach plan JSON -> Workout.

The coach replies with a plan shaped like::

    {"summary": "...",
     "workout": {"phases": [
         {"name": "Warm-up", "exercises": [
             {"name": "Jumping Jacks", "sets": 1, "reps": "30",
              "duration": "45 seconds", "notes": ""}]},
         {"name": "Main Workout", "exercises": [...]},
         {"name": "Core Finisher", "exercises": [...]},
         {"name": "Cool-down", "exercises": [...]}]}}

Structure that the coach only expresses in prose is normalized here,
once, before playback:

* separate "Rest" entries become the preceding exercise's rest;
* a main-workout exercise whose notes say "Repeat this set N times"
  closes a circuit that repeats N times.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import Any

from session_engine.exceptions import PlanParseError
from session_engine.models.enums import DEFAULT_REST_BETWEEN_ROUNDS_SECONDS, Section
from session_engine.models.workout import Circuit, Exercise, Workout

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+)\s*min", re.IGNORECASE)
_SECONDS = re.compile(r"(\d+)\s*sec", re.IGNORECASE)
_REPEAT_SET = re.compile(r"repeat\s+this\s+set\s+(\d+)\s+times?", re.IGNORECASE)
_REST_NAME = re.compile(r"^\s*rest\b", re.IGNORECASE)

# Lower-cased phase name (punctuation stripped) -> section
_PHASE_ALIASES: dict[str, Section] = {
    "warmup": Section.WARMUP,
    "warm up": Section.WARMUP,
    "main": Section.MAIN,
    "main workout": Section.MAIN,
    "main set": Section.MAIN,
    "circuit": Section.MAIN,
    "core": Section.CORE,
    "core finisher": Section.CORE,
    "finisher": Section.CORE,
    "cooldown": Section.COOLDOWN,
    "cool down": Section.COOLDOWN,
}


def parse_plan_response(text: str) -> Workout:
    """Extract and normalize the plan embedded in a coach reply."""
    return workout_from_plan(extract_plan_json(text))


def extract_plan_json(text: str) -> dict[str, Any]:
    """Find the plan object in free text.

    A fenced ```json block wins; otherwise everything from the first
    ``{`` to the last ``}`` is tried.

    Raises:
        PlanParseError: no JSON found, invalid JSON, or missing
            ``summary`` / ``workout.phases``.
    """
    match = _FENCED_JSON.search(text or "")
    if match:
        candidate = match.group(1)
    else:
        first = (text or "").find("{")
        last = (text or "").rfind("}")
        if first == -1 or last <= first:
            raise PlanParseError("No JSON object found in coach reply")
        candidate = text[first:last + 1]

    try:
        plan = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"Invalid plan JSON: {exc}") from exc

    if not isinstance(plan, dict) or not plan.get("summary"):
        raise PlanParseError("Plan is missing 'summary'")
    workout = plan.get("workout")
    if not isinstance(workout, dict) or not isinstance(workout.get("phases"), list):
        raise PlanParseError("Plan is missing 'workout.phases'")
    return plan


def parse_duration_seconds(duration: str | int | None) -> int:
    """Convert "1 min 30 sec" style strings to seconds.

    Bare integers are seconds. Anything unrecognized (e.g. "10 reps")
    is 0, which marks the exercise as rep-based.
    """
    if duration is None:
        return 0
    if isinstance(duration, (int, float)):
        return max(int(duration), 0)

    total = 0
    minutes = _MINUTES.search(duration)
    seconds = _SECONDS.search(duration)
    if minutes:
        total += int(minutes.group(1)) * 60
    if seconds:
        total += int(seconds.group(1))
    if total == 0 and duration.strip().isdigit():
        return int(duration.strip())
    return total


def workout_from_plan(plan: dict[str, Any]) -> Workout:
    """Build a Workout from a parsed plan dict (see module docstring).

    Raises:
        PlanParseError: a phase is not an object, its ``exercises`` is not
            a list, or an exercise entry is not an object.
    """
    sections: dict[Section, list[Exercise]] = {section: [] for section in Section}
    circuits: list[Circuit] = []

    for p, phase in enumerate(plan.get("workout", {}).get("phases", [])):
        if not isinstance(phase, dict):
            raise PlanParseError(f"Plan phase {p} is not an object: {phase!r}")
        name = str(phase.get("name", ""))
        section = _section_for(name)
        if section is None:
            logger.warning("Skipping unrecognized plan phase %r", name)
            continue

        raw_exercises = phase.get("exercises") or []
        if not isinstance(raw_exercises, list):
            raise PlanParseError(f"Exercises of plan phase {name!r} are not a list")
        for i, entry in enumerate(raw_exercises):
            if not isinstance(entry, dict):
                raise PlanParseError(f"Exercise {i} of plan phase {name!r} is not an object: {entry!r}")

        if section == Section.MAIN:
            circuits.extend(_split_circuits(raw_exercises))
        else:
            sections[section].extend(_fold_rests(raw_exercises))

    return Workout(
        warmup=tuple(sections[Section.WARMUP]),
        main=tuple(circuits),
        core=tuple(sections[Section.CORE]),
        cooldown=tuple(sections[Section.COOLDOWN]),
        summary=str(plan.get("summary", "")),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _section_for(phase_name: str) -> Section | None:
    key = re.sub(r"[^a-z ]", " ", phase_name.lower())
    key = " ".join(key.split())
    if key in _PHASE_ALIASES:
        return _PHASE_ALIASES[key]
    for alias, section in _PHASE_ALIASES.items():
        if key.startswith(alias):
            return section
    return None


def _exercise_from_entry(entry: dict[str, Any]) -> Exercise:
    sets = entry.get("sets")
    return Exercise(
        name=str(entry.get("name", "")).strip(),
        duration_seconds=parse_duration_seconds(entry.get("duration")),
        sets=int(sets) if isinstance(sets, (int, float)) else None,
        reps=str(entry.get("reps", "") or ""),
        notes=str(entry.get("notes", "") or ""),
    )


def _is_rest_entry(entry: dict[str, Any]) -> bool:
    return bool(_REST_NAME.match(str(entry.get("name", ""))))


def _fold_rests(entries: list[dict[str, Any]]) -> list[Exercise]:
    """Turn "Rest" entries into rest_seconds on the exercise before them.

    A rest with no exercise before it is dropped.
    """
    exercises: list[Exercise] = []
    for entry in entries:
        if _is_rest_entry(entry):
            rest = parse_duration_seconds(entry.get("duration"))
            if exercises:
                exercises[-1] = dataclasses.replace(
                    exercises[-1], rest_seconds=exercises[-1].rest_seconds + rest
                )
            continue
        exercises.append(_exercise_from_entry(entry))
    return exercises


def _split_circuits(entries: list[dict[str, Any]]) -> list[Circuit]:
    """Group main-workout entries into circuits at "Repeat this set N times"."""
    circuits: list[Circuit] = []
    pending: list[dict[str, Any]] = []
    repeat_count = 1
    closed = False

    for entry in entries:
        # Rests trailing the marker still belong to the closed set
        if closed and not _is_rest_entry(entry):
            circuits.append(_make_circuit(pending, repeat_count))
            pending, repeat_count, closed = [], 1, False
        pending.append(entry)
        match = _REPEAT_SET.search(str(entry.get("notes", "") or ""))
        if match:
            repeat_count = max(int(match.group(1)), 1)
            closed = True

    if pending:
        circuits.append(_make_circuit(pending, repeat_count))
    return [circuit for circuit in circuits if circuit.exercises]


def _make_circuit(entries: list[dict[str, Any]], repeat_count: int) -> Circuit:
    return Circuit(
        exercises=tuple(_fold_rests(entries)),
        repeat_count=repeat_count,
        rest_between_rounds=DEFAULT_REST_BETWEEN_ROUNDS_SECONDS if repeat_count > 1 else 0,
    )
