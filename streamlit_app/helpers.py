"""Utility helpers bridging the Streamlit UI and the session engine.

Pure functions for formatting, progress display, event collection, and
saved-plan persistence.
"""

from __future__ import annotations

from pathlib import Path

from session_engine.controller import SessionController, SessionObserver
from session_engine.models.enums import LOW_TIME_CUE_SECONDS, Phase
from session_engine.models.session import Session
from session_engine.models.workout import Exercise, Workout

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_clock(seconds: int) -> str:
    """Convert seconds to 'MM:SS'. e.g. 95 -> '01:35'."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    """Convert seconds to a human string. e.g. 1830 -> '30m 30s'."""
    if seconds <= 0:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m and s:
        return f"{m}m {s}s"
    if m:
        return f"{m}m"
    return f"{s}s"


def exercise_caption(exercise: Exercise | None) -> str:
    """'3 sets x 12 reps' style caption; empty when there is nothing to show."""
    if exercise is None:
        return ""
    if exercise.sets and exercise.reps:
        return f"{exercise.sets} sets x {exercise.reps} reps"
    if exercise.reps:
        return f"{exercise.reps} reps"
    return ""


def progress_fraction(session: Session | None) -> float:
    """Fraction of the current step already done, for the progress ring."""
    if session is None or session.total_duration_seconds <= 0:
        return 0.0
    done = session.total_duration_seconds - session.timer_seconds
    return min(max(done / session.total_duration_seconds, 0.0), 1.0)


def round_label(session: Session | None, repeat_count: int) -> str:
    """'Round 2 of 3' inside a repeated circuit, else empty."""
    if session is None or repeat_count <= 1:
        return ""
    if session.phase not in (Phase.MAIN_WORK, Phase.MAIN_REST, Phase.CIRCUIT_REST):
        return ""
    return f"Round {session.circuit_repetition} of {repeat_count}"


def playing_round_label(controller: SessionController) -> str:
    """Round label for the plan the controller is actually playing."""
    session, workout = controller.session, controller.workout
    if session is None or workout is None or session.circuit_index >= len(workout.main):
        return ""
    return round_label(session, workout.main[session.circuit_index].repeat_count)


# ---------------------------------------------------------------------------
# Labels and colors
# ---------------------------------------------------------------------------

PHASE_LABELS: dict[Phase, str] = {
    Phase.WARMUP_WORK: "Warm-up",
    Phase.WARMUP_REST: "Warm-up · Rest",
    Phase.MAIN_WORK: "Main Workout",
    Phase.MAIN_REST: "Main Workout · Rest",
    Phase.CIRCUIT_REST: "Rest Between Rounds",
    Phase.CORE_WORK: "Core Finisher",
    Phase.CORE_REST: "Core Finisher · Rest",
    Phase.COOLDOWN_WORK: "Cool-down",
    Phase.COOLDOWN_REST: "Cool-down · Rest",
    Phase.FINISHED: "Workout Complete",
}

PHASE_COLORS: dict[Phase, str] = {
    Phase.WARMUP_WORK: "#FF8C00",     # orange
    Phase.MAIN_WORK: "#C026D3",       # fuchsia
    Phase.CORE_WORK: "#E74C3C",       # red
    Phase.COOLDOWN_WORK: "#4A90D9",   # blue
    Phase.FINISHED: "#2ECC71",        # green
}
REST_COLOR = "#15803D"


def phase_color(phase: Phase) -> str:
    return PHASE_COLORS.get(phase, REST_COLOR)


# ---------------------------------------------------------------------------
# Event collection
# ---------------------------------------------------------------------------


class EventLog(SessionObserver):
    """Collects session events between Streamlit reruns."""

    def __init__(self, cue_seconds: int = LOW_TIME_CUE_SECONDS) -> None:
        self.cue_seconds = cue_seconds
        self.phases: list[Phase] = []
        self.cues: list[int] = []
        self.completed_after: int | None = None

    def on_tick(self, remaining_seconds: int) -> None:
        if 0 < remaining_seconds <= self.cue_seconds:
            self.cues.append(remaining_seconds)

    def on_phase_changed(self, phase: Phase) -> None:
        self.phases.append(phase)

    def on_completed(self, elapsed_seconds: int) -> None:
        self.completed_after = elapsed_seconds

    @property
    def is_completed(self) -> bool:
        return self.completed_after is not None

    def clear(self) -> None:
        self.phases.clear()
        self.cues.clear()
        self.completed_after = None


def start_playback(controller: SessionController, workout: Workout) -> bool:
    """Start *workout*; False (and no session left behind) when it has no workout content."""
    session = controller.start(workout)
    if session is None or session.is_finished:
        controller.stop()
        return False
    return True


def ticks_due(last_tick_at: float, now: float, interval: float = 1.0) -> int:
    """Whole ticks elapsed since *last_tick_at*; reruns are not exactly 1s apart."""
    if now <= last_tick_at or interval <= 0:
        return 0
    return int((now - last_tick_at) // interval)


# ---------------------------------------------------------------------------
# Saved plans
# ---------------------------------------------------------------------------

_PLANS_DIR = Path(__file__).parent / "plans"


def list_plans(plans_dir: Path = _PLANS_DIR) -> list[str]:
    """List available plan names (without .json extension)."""
    if not plans_dir.is_dir():
        return []
    return sorted(p.stem for p in plans_dir.glob("*.json"))


def load_plan_text(name: str, plans_dir: Path = _PLANS_DIR) -> str:
    """Raw text of a saved plan (JSON or a full coach reply)."""
    with open(plans_dir / f"{name}.json", encoding="utf-8") as f:
        return f.read()
