"""Plan timeline: the full step sequence of a workout, flattened.

Used for progress display ("step 7 of 31", estimated length) and for
previewing a plan before it is played. The sequence is produced by
running the transition table itself, so the preview can never disagree
with playback.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import pandas as pd

from session_engine.models.enums import Section
from session_engine.models.session import Session
from session_engine.models.workout import Workout
from session_engine.transitions import advance, current_exercise, start_state

TIMELINE_COLUMNS = (
    "step",
    "phase",
    "section",
    "exercise",
    "circuit",
    "repetition",
    "duration_s",
    "start_s",
)


def max_steps(workout: Workout) -> int:
    """Upper bound on the number of steps a plan can take.

    Every exercise contributes at most a work and a rest step per
    repetition, every circuit round boundary at most one rest.
    """
    flat = len(workout.warmup) + len(workout.core) + len(workout.cooldown)
    main = sum(
        max(circuit.repeat_count, 1) * (2 * len(circuit.exercises) + 1)
        for circuit in workout.main
    )
    return 2 * flat + main + 1


def iter_steps(workout: Workout) -> Iterator[Session]:
    """Yield every step from the initial state up to (excluding) FINISHED."""
    session = start_state(workout)
    limit = max_steps(workout)
    for _ in range(limit):
        if session.is_finished:
            return
        yield session
        session = advance(session, workout)
    raise RuntimeError(f"Plan did not finish within {limit} steps")


def count_steps(workout: Workout) -> int:
    return sum(1 for _ in iter_steps(workout))


def plan_timeline(workout: Workout) -> pd.DataFrame:
    """One row per step with its duration and start offset in seconds.

    Rep-based exercises have ``duration_s == 0``; their real length is up
    to the athlete, so offsets after them are lower bounds.
    """
    rows = []
    for step, session in enumerate(iter_steps(workout), start=1):
        exercise = current_exercise(session, workout)
        if session.is_rest:
            name = "Rest"
        else:
            name = exercise.name if exercise is not None else ""
        in_main = session.section == Section.MAIN
        rows.append({
            "step": step,
            "phase": session.phase.name,
            "section": session.section.name if session.section is not None else "",
            "exercise": name,
            "circuit": session.circuit_index + 1 if in_main else 0,
            "repetition": session.circuit_repetition if in_main else 0,
            "duration_s": session.total_duration_seconds,
        })

    frame = pd.DataFrame(rows, columns=list(TIMELINE_COLUMNS[:-1]))
    durations = frame["duration_s"].to_numpy(dtype=np.int64)
    # Offset of each step = sum of all durations before it
    frame["start_s"] = np.cumsum(durations) - durations
    return frame


def estimated_duration_seconds(workout: Workout) -> int:
    """Sum of all timed steps. Rep-based exercises count as zero."""
    durations = np.fromiter(
        (session.total_duration_seconds for session in iter_steps(workout)),
        dtype=np.int64,
    )
    return int(durations.sum())
