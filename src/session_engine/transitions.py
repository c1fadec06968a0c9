"""Phase transition table: the pure core of guided playback.

Maps (session, workout) to the next session state. No I/O, no timers, no
randomness: the controller and the clock decide *when* to call these,
this module only decides *what* comes next.

Topology:
    Warmup -> Main (circuits, repeated) -> Core -> Cooldown -> Finished

Each call to :func:`advance` moves exactly one atomic step: one exercise,
one rest, or one section boundary. Empty sections, empty circuits and
zero-second rests are never emitted as steps.
"""

from __future__ import annotations

import dataclasses

from session_engine.models.enums import REST_PHASES, WORK_PHASES, Phase, Section
from session_engine.models.session import Session
from session_engine.models.workout import Exercise, Workout

_SECTION_ORDER: tuple[Section, ...] = tuple(Section)


def start_state(workout: Workout) -> Session:
    """Initial state: first exercise of the first non-empty section.

    Returns a FINISHED session when the plan has no exercises at all.
    """
    return _enter_section(Session(phase=Phase.FINISHED), workout, _SECTION_ORDER[0])


def advance(session: Session, workout: Workout) -> Session:
    """Compute the state after the current step runs out (or is skipped).

    Args:
        session: Current state. A FINISHED session is returned unchanged.
        workout: The plan being played.

    Returns:
        A new Session exactly one step further along.
    """
    if session.is_finished:
        return session

    section = session.section
    exercises = _current_exercises(session, workout)

    if session.phase == Phase.CIRCUIT_REST:
        return _work_step(
            session,
            Section.MAIN,
            0,
            exercises,
            circuit_repetition=session.circuit_repetition + 1,
        )

    if session.phase == WORK_PHASES[section] and session.phase_index < len(exercises):
        exercise = exercises[session.phase_index]
        if exercise.rest_seconds > 0:
            return _timed_step(session, REST_PHASES[section], exercise.rest_seconds)

    return _after_exercise(session, workout, section, exercises)


def retreat(session: Session, workout: Workout) -> Session:
    """Step one exercise backwards (the "previous" control).

    During a rest the exercise the rest follows is restarted. From the
    first exercise of a section, playback moves to the last exercise of
    the previous non-empty section. Crossing a circuit or repetition
    boundary backwards resets ``circuit_repetition`` to 1; the round
    counter is not reconstructed. The very first exercise of the plan
    has nothing before it and is returned unchanged.
    """
    if session.is_finished:
        return session

    section = session.section
    exercises = _current_exercises(session, workout)

    if session.phase == Phase.CIRCUIT_REST:
        return _work_step(session, Section.MAIN, len(exercises) - 1, exercises)

    if session.is_rest:
        return _work_step(session, section, session.phase_index, exercises)

    if session.phase_index > 0:
        return _work_step(session, section, session.phase_index - 1, exercises)

    if section == Section.MAIN:
        if session.circuit_repetition > 1:
            return _work_step(
                session, Section.MAIN, len(exercises) - 1, exercises, circuit_repetition=1
            )
        previous_circuit = _previous_circuit_with_exercises(workout, session.circuit_index - 1)
        if previous_circuit is not None:
            return _last_of_circuit(session, workout, previous_circuit)

    return _enter_previous_section(session, workout, section)


def current_exercise(session: Session, workout: Workout) -> Exercise | None:
    """Exercise being performed, or the one a section rest follows.

    None between circuit rounds and once finished.
    """
    if session.is_finished or session.phase == Phase.CIRCUIT_REST:
        return None
    exercises = _current_exercises(session, workout)
    if 0 <= session.phase_index < len(exercises):
        return exercises[session.phase_index]
    return None


def upcoming_exercise(session: Session, workout: Workout) -> Exercise | None:
    """Exercise of the next work step after the current one, if any."""
    state = advance(session, workout)
    while not state.is_finished and state.is_rest:
        state = advance(state, workout)
    return current_exercise(state, workout)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _after_exercise(
    session: Session,
    workout: Workout,
    section: Section,
    exercises: tuple[Exercise, ...],
) -> Session:
    """Step once the current exercise and its rest (if any) are done."""
    if session.phase_index < len(exercises) - 1:
        return _work_step(session, section, session.phase_index + 1, exercises)

    if section != Section.MAIN:
        return _enter_section(session, workout, _following_section(section))

    circuit = workout.main[session.circuit_index]
    if session.circuit_repetition < circuit.repeat_count:
        if circuit.rest_between_rounds > 0:
            return _timed_step(session, Phase.CIRCUIT_REST, circuit.rest_between_rounds)
        return _work_step(
            session,
            Section.MAIN,
            0,
            exercises,
            circuit_repetition=session.circuit_repetition + 1,
        )

    next_circuit = _next_circuit_with_exercises(workout, session.circuit_index + 1)
    if next_circuit is not None:
        return _work_step(
            session,
            Section.MAIN,
            0,
            workout.main[next_circuit].exercises,
            circuit_index=next_circuit,
            circuit_repetition=1,
        )
    return _enter_section(session, workout, _following_section(Section.MAIN))


def _enter_section(session: Session, workout: Workout, section: Section | None) -> Session:
    """First exercise of the first non-empty section at or after *section*."""
    if section is not None:
        for candidate in _SECTION_ORDER[_SECTION_ORDER.index(section):]:
            if candidate == Section.MAIN:
                circuit_index = _next_circuit_with_exercises(workout, 0)
                if circuit_index is None:
                    continue
                return _work_step(
                    session,
                    Section.MAIN,
                    0,
                    workout.main[circuit_index].exercises,
                    circuit_index=circuit_index,
                    circuit_repetition=1,
                )
            exercises = workout.section_exercises(candidate)
            if exercises:
                return _work_step(session, candidate, 0, exercises)

    return dataclasses.replace(
        session,
        phase=Phase.FINISHED,
        phase_index=0,
        timer_seconds=0,
        total_duration_seconds=0,
    )


def _enter_previous_section(session: Session, workout: Workout, section: Section) -> Session:
    """Last exercise of the closest non-empty section before *section*."""
    position = _SECTION_ORDER.index(section)
    for candidate in reversed(_SECTION_ORDER[:position]):
        if candidate == Section.MAIN:
            circuit_index = _previous_circuit_with_exercises(workout, len(workout.main) - 1)
            if circuit_index is not None:
                return _last_of_circuit(session, workout, circuit_index)
            continue
        exercises = workout.section_exercises(candidate)
        if exercises:
            return _work_step(session, candidate, len(exercises) - 1, exercises)
    return session


def _last_of_circuit(session: Session, workout: Workout, circuit_index: int) -> Session:
    exercises = workout.main[circuit_index].exercises
    return _work_step(
        session,
        Section.MAIN,
        len(exercises) - 1,
        exercises,
        circuit_index=circuit_index,
        circuit_repetition=1,
    )


def _work_step(
    session: Session,
    section: Section,
    index: int,
    exercises: tuple[Exercise, ...],
    **changes: int,
) -> Session:
    duration = exercises[index].duration_seconds
    return dataclasses.replace(
        session,
        phase=WORK_PHASES[section],
        phase_index=index,
        timer_seconds=duration,
        total_duration_seconds=duration,
        **changes,
    )


def _timed_step(session: Session, phase: Phase, seconds: int) -> Session:
    return dataclasses.replace(
        session,
        phase=phase,
        timer_seconds=seconds,
        total_duration_seconds=seconds,
    )


def _current_exercises(session: Session, workout: Workout) -> tuple[Exercise, ...]:
    section = session.section
    if section is None:
        return ()
    if section == Section.MAIN:
        if 0 <= session.circuit_index < len(workout.main):
            return workout.main[session.circuit_index].exercises
        return ()
    return workout.section_exercises(section)


def _following_section(section: Section) -> Section | None:
    position = _SECTION_ORDER.index(section)
    if position + 1 < len(_SECTION_ORDER):
        return _SECTION_ORDER[position + 1]
    return None


def _next_circuit_with_exercises(workout: Workout, start: int) -> int | None:
    for index in range(max(start, 0), len(workout.main)):
        if workout.main[index].exercises:
            return index
    return None


def _previous_circuit_with_exercises(workout: Workout, start: int) -> int | None:
    for index in range(min(start, len(workout.main) - 1), -1, -1):
        if workout.main[index].exercises:
            return index
    return None
