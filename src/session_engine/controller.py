"""SessionController: the public API a player UI binds to.

Owns the single live Session and its clock. All mutation goes through
this class; every change swaps in a new frozen Session.
"""

from __future__ import annotations

import dataclasses
import logging

from session_engine.clock import SessionClock, TimerLoop
from session_engine.models.enums import TICK_INTERVAL_SECONDS, Phase
from session_engine.models.session import Session
from session_engine.models.workout import Exercise, Workout, validate_workout
from session_engine.transitions import advance, current_exercise, retreat, start_state

logger = logging.getLogger(__name__)


class SessionObserver:
    """Receives session events. Override only the hooks you need.

    ``on_tick`` is advisory (e.g. countdown cues in the last seconds).
    ``on_phase_changed`` fires once per step transition, including the
    initial step. ``on_completed`` fires exactly once per session, when
    FINISHED is reached.
    """

    def on_tick(self, remaining_seconds: int) -> None:
        pass

    def on_phase_changed(self, phase: Phase) -> None:
        pass

    def on_completed(self, elapsed_seconds: int) -> None:
        pass


class SessionController:
    """Drives one guided workout at a time.

    With a ``loop`` the controller ticks itself through a SessionClock.
    Without one the caller is responsible for calling ``tick()`` once per
    second (e.g. a UI rerun loop).

    Usage:
        controller = SessionController(asyncio.get_running_loop(), observer)
        if controller.start(workout) is None:
            ...  # nothing to play
        controller.pause_toggle()
        controller.skip()
        controller.stop()
    """

    def __init__(
        self,
        loop: TimerLoop | None = None,
        observer: SessionObserver | None = None,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self.observer = observer or SessionObserver()
        self._clock = SessionClock(loop, tick_interval) if loop is not None else None
        self._session: Session | None = None
        self._workout: Workout | None = None
        self._completed = False

    # -- Render read ------------------------------------------------------

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def workout(self) -> Workout | None:
        return self._workout

    @property
    def is_running(self) -> bool:
        """True when a clock-driven session is actively counting down."""
        return self._clock is not None and self._clock.is_running

    @property
    def current_exercise(self) -> Exercise | None:
        if self._session is None or self._workout is None:
            return None
        return current_exercise(self._session, self._workout)

    # -- Controls ---------------------------------------------------------

    def start(self, workout: Workout) -> Session | None:
        """Begin playing *workout*, discarding any previous session.

        Returns:
            The initial Session, or None when the plan is malformed and
            there is nothing to play. A plan with no exercises yields a
            session that is already FINISHED.
        """
        self._discard()

        problems = validate_workout(workout)
        if problems:
            logger.warning("Nothing to play, plan is malformed: %s", "; ".join(problems))
            return None

        self._workout = workout
        self._session = start_state(workout)

        if self._session.is_finished:
            logger.info("Plan has no exercises, session finished immediately")
            self._complete()
            return self._session

        logger.info(
            "Session started in %s (%ds)",
            self._session.phase.name,
            self._session.timer_seconds,
        )
        self._arm()
        self.observer.on_phase_changed(self._session.phase)
        return self._session

    def pause_toggle(self) -> None:
        """Pause a running session or resume a paused one."""
        if self._session is None or self._session.is_finished:
            return

        paused = not self._session.is_paused
        self._session = dataclasses.replace(self._session, is_paused=paused)
        if paused:
            self._disarm()
            logger.info("Session paused at %ds remaining", self._session.timer_seconds)
        else:
            self._arm()
            logger.info("Session resumed")

    def skip(self) -> None:
        """Advance one step now, discarding whatever time is left."""
        if self._session is None or self._workout is None or self._session.is_finished:
            return
        self._transition(advance(self._session, self._workout))
        self._arm()

    def previous(self) -> None:
        """Step one exercise back. No-op on the first exercise."""
        if self._session is None or self._workout is None or self._session.is_finished:
            return
        rewound = retreat(self._session, self._workout)
        if rewound == self._session:
            return
        self._transition(rewound)
        self._arm()

    def stop(self) -> None:
        """Discard the session without a completion event. Idempotent."""
        if self._session is not None:
            logger.info("Session stopped in %s", self._session.phase.name)
        self._discard()

    def tick(self) -> None:
        """One second of playback.

        Ignored while paused, finished, or on rep-based steps that wait for
        ``skip()``. Otherwise decrements the countdown and, on reaching
        zero, advances exactly one step.
        """
        session = self._session
        if session is None or self._workout is None or session.is_paused or session.is_finished:
            return
        if session.timer_seconds <= 0:
            return

        remaining = session.timer_seconds - 1
        ticked = dataclasses.replace(
            session,
            timer_seconds=remaining,
            elapsed_seconds=session.elapsed_seconds + 1,
        )
        self._session = ticked
        self.observer.on_tick(remaining)

        # The observer may have stopped or replaced the session.
        if remaining == 0 and self._session is ticked:
            self._transition(advance(ticked, self._workout))

    # -- Internal helpers -------------------------------------------------

    def _transition(self, new_session: Session) -> None:
        self._session = new_session
        self.observer.on_phase_changed(new_session.phase)
        if new_session.is_finished:
            self._disarm()
            logger.info("Session finished after %ds", new_session.elapsed_seconds)
            self._complete()

    def _complete(self) -> None:
        if self._completed or self._session is None:
            return
        self._completed = True
        self.observer.on_completed(self._session.elapsed_seconds)

    def _arm(self) -> None:
        if self._clock is None or self._session is None:
            return
        if self._session.is_paused or self._session.is_finished:
            return
        self._clock.arm(self.tick)

    def _disarm(self) -> None:
        if self._clock is not None:
            self._clock.cancel()

    def _discard(self) -> None:
        # Cancel first so no queued tick can touch the session being dropped.
        self._disarm()
        self._session = None
        self._workout = None
        self._completed = False
