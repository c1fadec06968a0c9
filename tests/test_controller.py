"""Tests for SessionController: controls, clock ownership, and events."""

from __future__ import annotations

from session_engine.controller import SessionController, SessionObserver
from session_engine.math.timeline import max_steps
from session_engine.models.enums import Phase
from session_engine.models.workout import Circuit, Exercise, Workout


class TestStart:
    def test_start_arms_clock_and_announces_first_step(self, controller, loop, observer, warmup_cooldown_workout) -> None:
        session = controller.start(warmup_cooldown_workout)
        assert session is not None
        assert session.phase == Phase.WARMUP_WORK
        assert session.timer_seconds == 30
        assert session.total_duration_seconds == 30
        assert controller.is_running
        assert len(loop.pending) == 1
        assert observer.phases == [Phase.WARMUP_WORK]

    def test_empty_workout_finishes_immediately(self, controller, loop, observer, empty_workout) -> None:
        session = controller.start(empty_workout)
        assert session is not None
        assert session.is_finished
        assert observer.completed == [0]
        assert not controller.is_running
        assert loop.pending == []

    def test_malformed_plan_has_nothing_to_play(self, controller, loop, observer) -> None:
        workout = Workout(warmup=(Exercise("Broken", duration_seconds=-5),))
        assert controller.start(workout) is None
        assert controller.session is None
        assert observer.phases == []
        assert observer.completed == []
        assert loop.pending == []

    def test_invalid_repeat_count_has_nothing_to_play(self, controller) -> None:
        workout = Workout(main=(Circuit(exercises=(Exercise("A", duration_seconds=10),), repeat_count=0),))
        assert controller.start(workout) is None

    def test_restart_keeps_a_single_timer(self, controller, loop, warmup_cooldown_workout, circuit_workout) -> None:
        controller.start(warmup_cooldown_workout)
        loop.advance(5)
        controller.start(circuit_workout)
        assert len(loop.pending) == 1
        assert controller.session.phase == Phase.MAIN_WORK
        assert controller.session.timer_seconds == 45

    def test_rapid_start_stop_start(self, controller, loop, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        controller.stop()
        controller.start(warmup_cooldown_workout)
        assert len(loop.pending) == 1
        loop.advance(1)
        assert controller.session.timer_seconds == 29


class TestTicking:
    def test_warmup_then_cooldown_then_finished(self, controller, loop, observer, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        loop.advance(30)
        assert controller.session.phase == Phase.COOLDOWN_WORK
        assert controller.session.timer_seconds == 20

        loop.advance(20)
        assert controller.session.is_finished
        assert observer.completed == [50]
        assert not controller.is_running
        assert loop.pending == []

    def test_tick_reports_remaining_seconds(self, controller, loop, observer) -> None:
        workout = Workout(warmup=(Exercise("Jab", duration_seconds=3),))
        controller.start(workout)
        loop.advance(3)
        assert observer.ticks == [2, 1, 0]

    def test_zero_crossing_advances_one_step(self, controller, loop) -> None:
        workout = Workout(
            warmup=(
                Exercise("A", duration_seconds=1),
                Exercise("B", duration_seconds=1),
                Exercise("C", duration_seconds=1),
            )
        )
        controller.start(workout)
        loop.advance(1)
        assert controller.session.phase == Phase.WARMUP_WORK
        assert controller.session.phase_index == 1
        assert controller.session.timer_seconds == 1

    def test_rep_based_exercise_waits_for_skip(self, controller, loop) -> None:
        workout = Workout(
            warmup=(Exercise("Push-ups", duration_seconds=0, reps="12"),),
            cooldown=(Exercise("Stretch", duration_seconds=10),),
        )
        controller.start(workout)
        assert controller.session.awaits_manual_advance
        loop.advance(5)
        assert controller.session.phase == Phase.WARMUP_WORK
        assert controller.session.elapsed_seconds == 0

        controller.skip()
        assert controller.session.phase == Phase.COOLDOWN_WORK
        assert controller.session.timer_seconds == 10

    def test_circuit_phase_events(self, controller, loop, observer, circuit_workout) -> None:
        controller.start(circuit_workout)
        loop.advance(45 + 15 + 45 + 15 + 60 + 45 + 15 + 45 + 15)
        assert observer.phases == [
            Phase.MAIN_WORK,
            Phase.MAIN_REST,
            Phase.MAIN_WORK,
            Phase.MAIN_REST,
            Phase.CIRCUIT_REST,
            Phase.MAIN_WORK,
            Phase.MAIN_REST,
            Phase.MAIN_WORK,
            Phase.MAIN_REST,
            Phase.FINISHED,
        ]
        assert observer.completed == [300]

    def test_manual_ticks_without_loop(self, warmup_cooldown_workout) -> None:
        controller = SessionController()
        controller.start(warmup_cooldown_workout)
        assert not controller.is_running
        for _ in range(30):
            controller.tick()
        assert controller.session.phase == Phase.COOLDOWN_WORK


class TestPause:
    def test_paused_ticks_change_nothing(self, controller, loop, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        loop.advance(2)
        controller.pause_toggle()
        before = controller.session
        assert before.is_paused

        loop.advance(5)
        for _ in range(5):
            controller.tick()
        assert controller.session == before
        assert loop.pending == []

        controller.pause_toggle()
        assert not controller.session.is_paused
        loop.advance(1)
        assert controller.session.timer_seconds == 27

    def test_skip_while_paused_stays_paused(self, controller, loop, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        controller.pause_toggle()
        controller.skip()
        assert controller.session.phase == Phase.COOLDOWN_WORK
        assert controller.session.is_paused
        assert loop.pending == []

    def test_pause_on_finished_is_noop(self, controller, empty_workout) -> None:
        controller.start(empty_workout)
        controller.pause_toggle()
        assert not controller.session.is_paused


class TestSkip:
    def test_skip_discards_remaining_time(self, controller, loop, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        controller.skip()
        assert controller.session.phase == Phase.COOLDOWN_WORK
        assert controller.session.timer_seconds == 20
        assert controller.session.elapsed_seconds == 0

    def test_skip_gives_new_step_a_full_interval(self, controller, loop, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        loop.advance(0.5)
        controller.skip()
        loop.advance(0.6)
        assert controller.session.timer_seconds == 20
        loop.advance(0.4)
        assert controller.session.timer_seconds == 19

    def test_repeated_skip_terminates(self, controller, observer, full_workout) -> None:
        controller.start(full_workout)
        steps = 0
        while not controller.session.is_finished:
            controller.skip()
            steps += 1
            assert steps <= max_steps(full_workout)
        assert observer.completed == [0]

    def test_skip_after_finish_is_noop(self, controller, observer, empty_workout) -> None:
        controller.start(empty_workout)
        controller.skip()
        controller.previous()
        controller.tick()
        assert observer.completed == [0]

    def test_controls_without_session_are_noops(self, controller) -> None:
        controller.skip()
        controller.previous()
        controller.pause_toggle()
        controller.tick()
        controller.stop()
        assert controller.session is None


class TestPrevious:
    def test_previous_on_first_exercise_is_noop(self, controller, observer, full_workout) -> None:
        controller.start(full_workout)
        controller.previous()
        assert controller.session.phase_index == 0
        assert observer.phases == [Phase.WARMUP_WORK]

    def test_previous_resets_timer(self, controller, loop, full_workout) -> None:
        controller.start(full_workout)
        controller.skip()
        loop.advance(5)
        assert controller.session.timer_seconds == 15
        controller.previous()
        assert controller.session.phase_index == 0
        assert controller.session.timer_seconds == 30


class TestStop:
    def test_stop_twice_is_safe(self, controller, loop, observer, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        controller.stop()
        controller.stop()
        assert controller.session is None
        assert loop.pending == []
        assert observer.completed == []

    def test_stale_tick_cannot_resurrect_session(self, controller, loop, observer, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        queued = loop.pending[0]
        controller.stop()
        queued.run()
        assert controller.session is None
        assert observer.ticks == []

    def test_observer_may_stop_during_tick(self, loop, warmup_cooldown_workout) -> None:
        class StopAtTen(SessionObserver):
            def __init__(self) -> None:
                self.controller: SessionController | None = None

            def on_tick(self, remaining_seconds: int) -> None:
                if remaining_seconds == 10:
                    self.controller.stop()

        stopper = StopAtTen()
        controller = SessionController(loop, stopper)
        stopper.controller = controller
        controller.start(warmup_cooldown_workout)
        loop.advance(60)
        assert controller.session is None
        assert loop.pending == []


class TestCompletion:
    def test_completed_fires_once(self, controller, loop, observer, warmup_cooldown_workout) -> None:
        controller.start(warmup_cooldown_workout)
        loop.advance(100)
        controller.skip()
        controller.tick()
        assert observer.completed == [50]
        assert controller.session.is_finished

    def test_current_exercise_follows_session(self, controller, full_workout) -> None:
        controller.start(full_workout)
        assert controller.current_exercise.name == "Jumping Jacks"
        controller.stop()
        assert controller.current_exercise is None
