"""Terminal player: plays a coach plan on an asyncio event loop.

Usage:
    python -m player.terminal                          # WORKOUT_PLAN_PATH
    python -m player.terminal --plan plan.json --tick 0.1
    python -m player.terminal --plan reply.txt --rpe 7 --comment "Tough core"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from session_engine.controller import SessionController, SessionObserver
from session_engine.exceptions import PlanParseError, SessionEngineError
from session_engine.math.timeline import estimated_duration_seconds
from session_engine.models.enums import Phase
from session_engine.models.feedback import WorkoutFeedback
from session_engine.models.workout import Workout
from session_engine.serialization import parse_plan_response

from player.config import CUE_SECONDS, LOG_LEVEL, PLAN_PATH, TICK_SECONDS

logger = logging.getLogger(__name__)


class LoggingObserver(SessionObserver):
    """Logs every step and the last-seconds countdown; resolves *done* on completion."""

    def __init__(self, done: asyncio.Future[int], cue_seconds: int = CUE_SECONDS) -> None:
        self.done = done
        self.cue_seconds = cue_seconds
        self.controller: SessionController | None = None

    def on_tick(self, remaining_seconds: int) -> None:
        if 0 < remaining_seconds <= self.cue_seconds:
            logger.info("  %d...", remaining_seconds)

    def on_phase_changed(self, phase: Phase) -> None:
        if phase == Phase.FINISHED or self.controller is None:
            return
        session = self.controller.session
        exercise = self.controller.current_exercise
        if session is None:
            return
        name = exercise.name if exercise is not None else "?"
        if session.is_rest:
            logger.info("%s: rest %ds", phase.name, session.timer_seconds)
        elif exercise is not None and not exercise.is_timed:
            logger.info("%s: %s (untimed, skipping)", phase.name, name)
            # Nobody at the keyboard to press skip
            asyncio.get_running_loop().call_soon(self.controller.skip)
        else:
            logger.info("%s: %s for %ds", phase.name, name, session.timer_seconds)

    def on_completed(self, elapsed_seconds: int) -> None:
        if not self.done.done():
            self.done.set_result(elapsed_seconds)


def load_workout(path: Path) -> Workout:
    """Read a plan file (raw JSON or a full coach reply) and parse it."""
    return parse_plan_response(path.read_text(encoding="utf-8"))


async def play(workout: Workout, tick_seconds: float = TICK_SECONDS) -> int | None:
    """Play *workout* to the end. Returns elapsed seconds, or None when there is nothing to play."""
    loop = asyncio.get_running_loop()
    done: asyncio.Future[int] = loop.create_future()
    observer = LoggingObserver(done)
    controller = SessionController(loop, observer, tick_interval=tick_seconds)
    observer.controller = controller

    session = controller.start(workout)
    if session is None or session.is_finished:
        # Malformed, or no exercises at all
        return None
    try:
        return await done
    finally:
        controller.stop()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Play a guided workout in the terminal")
    parser.add_argument("--plan", type=Path, default=PLAN_PATH, help="Plan JSON or coach reply")
    parser.add_argument("--tick", type=float, default=TICK_SECONDS, help="Seconds per tick")
    parser.add_argument("--rpe", type=int, help="Perceived exertion (1-10) to report")
    parser.add_argument("--comment", default="", help="Free-text feedback")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        workout = load_workout(args.plan)
    except FileNotFoundError:
        logger.error("Plan not found at %s", args.plan)
        return 1
    except PlanParseError as exc:
        logger.error("Could not read plan: %s", exc)
        return 1

    logger.info(
        "Loaded plan (%s), about %d min of timed work",
        workout.summary or "no summary",
        estimated_duration_seconds(workout) // 60,
    )

    try:
        elapsed = asyncio.run(play(workout, args.tick))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130

    if elapsed is None:
        logger.error("This plan has no workout content")
        return 1
    logger.info("Workout complete in %d ticks", elapsed)

    if args.rpe is not None:
        try:
            feedback = WorkoutFeedback(perceived_exertion=args.rpe, comment=args.comment)
        except SessionEngineError as exc:
            logger.error("Feedback rejected: %s", exc)
            return 1
        print(feedback.feedback_message())
    return 0


if __name__ == "__main__":
    sys.exit(main())
