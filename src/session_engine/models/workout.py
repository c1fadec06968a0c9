"""Workout plan models: the immutable input of a guided session.

Plans arrive already parsed (see ``session_engine.serialization``). The
engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from session_engine.models.enums import Section


@dataclass(frozen=True)
class Exercise:
    """A single unit of work.

    ``duration_seconds == 0`` marks a rep-based exercise: it has no
    countdown and is advanced manually. ``sets``, ``reps`` and ``notes``
    are display-only.
    """

    name: str
    duration_seconds: int = 0
    rest_seconds: int = 0
    sets: int | None = None
    reps: str = ""
    notes: str = ""

    @property
    def is_timed(self) -> bool:
        return self.duration_seconds > 0


@dataclass(frozen=True)
class Circuit:
    """A block of the main section repeated ``repeat_count`` times.

    ``rest_between_rounds`` is inserted between consecutive repetitions,
    never after the final one.
    """

    exercises: tuple[Exercise, ...]
    repeat_count: int = 1
    rest_between_rounds: int = 0


@dataclass(frozen=True)
class Workout:
    """Full plan for one session: warm-up, main circuits, core, cool-down."""

    warmup: tuple[Exercise, ...] = field(default_factory=tuple)
    main: tuple[Circuit, ...] = field(default_factory=tuple)
    core: tuple[Exercise, ...] = field(default_factory=tuple)
    cooldown: tuple[Exercise, ...] = field(default_factory=tuple)
    summary: str = ""

    def section_exercises(self, section: Section) -> tuple[Exercise, ...]:
        """Exercises of a flat section. MAIN is flattened across circuits."""
        if section == Section.WARMUP:
            return self.warmup
        if section == Section.CORE:
            return self.core
        if section == Section.COOLDOWN:
            return self.cooldown
        return tuple(ex for circuit in self.main for ex in circuit.exercises)

    def section_has_content(self, section: Section) -> bool:
        if section == Section.MAIN:
            return any(circuit.exercises for circuit in self.main)
        return len(self.section_exercises(section)) > 0

    @property
    def has_content(self) -> bool:
        return any(self.section_has_content(section) for section in Section)


def validate_workout(workout: Workout) -> list[str]:
    """Return the problems that make a plan unplayable.

    Empty sections and empty circuits are not problems; playback skips
    them. An empty list means the plan is well formed.
    """
    problems: list[str] = []

    def _check(exercise: Exercise, where: str) -> None:
        if exercise.duration_seconds is None or exercise.duration_seconds < 0:
            problems.append(f"{where} '{exercise.name}': invalid duration {exercise.duration_seconds!r}")
        if exercise.rest_seconds is None or exercise.rest_seconds < 0:
            problems.append(f"{where} '{exercise.name}': invalid rest {exercise.rest_seconds!r}")

    for label, exercises in (
        ("warmup", workout.warmup),
        ("core", workout.core),
        ("cooldown", workout.cooldown),
    ):
        for i, exercise in enumerate(exercises):
            _check(exercise, f"{label}[{i}]")

    for c, circuit in enumerate(workout.main):
        if circuit.repeat_count is None or circuit.repeat_count < 1:
            problems.append(f"main[{c}]: repeat_count must be >= 1, got {circuit.repeat_count!r}")
        if circuit.rest_between_rounds is None or circuit.rest_between_rounds < 0:
            problems.append(
                f"main[{c}]: invalid rest_between_rounds {circuit.rest_between_rounds!r}"
            )
        for i, exercise in enumerate(circuit.exercises):
            _check(exercise, f"main[{c}][{i}]")

    return problems
