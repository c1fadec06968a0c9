"""Shared test fixtures: sample plans, a virtual-time event loop, event recorders."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from session_engine.controller import SessionController, SessionObserver
from session_engine.models.enums import Phase
from session_engine.models.workout import Circuit, Exercise, Workout


class FakeTimerHandle:
    """Stand-in for asyncio.TimerHandle."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        self.callback(*self.args)


class FakeLoop:
    """Deterministic event loop exposing only ``call_later``.

    Time moves only through ``advance()``; due callbacks run in order,
    one at a time, on the caller's thread.
    """

    def __init__(self) -> None:
        self.time = 0.0
        self._handles: list[FakeTimerHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.time + delay, callback, args)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.time + seconds
        while True:
            due = [h for h in self.pending if h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.time = handle.when
            handle.run()
        self.time = target


class RecordingObserver(SessionObserver):
    def __init__(self) -> None:
        self.ticks: list[int] = []
        self.phases: list[Phase] = []
        self.completed: list[int] = []

    def on_tick(self, remaining_seconds: int) -> None:
        self.ticks.append(remaining_seconds)

    def on_phase_changed(self, phase: Phase) -> None:
        self.phases.append(phase)

    def on_completed(self, elapsed_seconds: int) -> None:
        self.completed.append(elapsed_seconds)


@pytest.fixture
def loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def controller(loop: FakeLoop, observer: RecordingObserver) -> SessionController:
    return SessionController(loop, observer)


@pytest.fixture
def warmup_cooldown_workout() -> Workout:
    """One 30s warm-up exercise, empty main/core, one 20s cool-down exercise."""
    return Workout(
        warmup=(Exercise("Jumping Jacks", duration_seconds=30),),
        cooldown=(Exercise("Hamstring Stretch", duration_seconds=20),),
    )


@pytest.fixture
def circuit_workout() -> Workout:
    """Main circuit X(45, rest 15), Y(45, rest 15) repeated twice, 60s between rounds."""
    return Workout(
        main=(
            Circuit(
                exercises=(
                    Exercise("Jab-Cross", duration_seconds=45, rest_seconds=15),
                    Exercise("Squat to Hook", duration_seconds=45, rest_seconds=15),
                ),
                repeat_count=2,
                rest_between_rounds=60,
            ),
        ),
    )


@pytest.fixture
def full_workout() -> Workout:
    """Every section populated, two circuits, one rep-based exercise."""
    return Workout(
        warmup=(
            Exercise("Jumping Jacks", duration_seconds=30),
            Exercise("Arm Circles", duration_seconds=20, rest_seconds=10),
        ),
        main=(
            Circuit(
                exercises=(
                    Exercise("Jab-Cross", duration_seconds=40, rest_seconds=20),
                    Exercise("Squat to Hook", duration_seconds=40, rest_seconds=20),
                ),
                repeat_count=2,
                rest_between_rounds=60,
            ),
            Circuit(
                exercises=(Exercise("Push-ups", duration_seconds=0, rest_seconds=15, sets=3, reps="12"),),
            ),
        ),
        core=(
            Exercise("Plank", duration_seconds=45, rest_seconds=15),
            Exercise("Crunches", duration_seconds=30),
        ),
        cooldown=(Exercise("Child's Pose", duration_seconds=60),),
        summary="Full body boxing session",
    )


@pytest.fixture
def empty_workout() -> Workout:
    return Workout()
