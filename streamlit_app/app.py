"""Guided Workout Player: Streamlit front end for the session engine.

Run with:
    streamlit run streamlit_app/app.py
"""

from __future__ import annotations

import time

import streamlit as st

from session_engine.controller import SessionController
from session_engine.exceptions import InvalidFeedbackError, PlanParseError
from session_engine.math.timeline import estimated_duration_seconds, plan_timeline
from session_engine.models.enums import MAX_PERCEIVED_EXERTION, MIN_PERCEIVED_EXERTION
from session_engine.models.feedback import WorkoutFeedback
from session_engine.serialization import parse_plan_response
from session_engine.transitions import upcoming_exercise

from helpers import (
    PHASE_LABELS,
    EventLog,
    exercise_caption,
    format_clock,
    format_duration,
    list_plans,
    load_plan_text,
    phase_color,
    playing_round_label,
    progress_fraction,
    start_playback,
    ticks_due,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Guided Workout Player",
    page_icon="🥊",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def _controller() -> SessionController:
    """One controller per browser session; the UI rerun loop drives its ticks."""
    if "controller" not in st.session_state:
        st.session_state["events"] = EventLog()
        st.session_state["controller"] = SessionController(observer=st.session_state["events"])
    return st.session_state["controller"]


controller = _controller()
events: EventLog = st.session_state["events"]


# ---------------------------------------------------------------------------
# Sidebar: Plan
# ---------------------------------------------------------------------------

st.sidebar.title("Workout Plan")

saved = list_plans()
choice = st.sidebar.selectbox("Saved plans", ["(paste below)"] + saved)
default_text = load_plan_text(choice) if choice in saved else ""
plan_text = st.sidebar.text_area(
    "Coach reply or plan JSON", value=default_text, height=300, key=f"plan_{choice}",
)

if st.sidebar.button("Load plan", type="primary"):
    try:
        st.session_state["workout"] = parse_plan_response(plan_text)
        st.session_state.pop("feedback_message", None)
        controller.stop()
        events.clear()
        if not st.session_state["workout"].has_content:
            st.sidebar.warning("This plan has no workout content.")
    except PlanParseError as e:
        st.sidebar.error(f"Could not read plan: {e}")

workout = st.session_state.get("workout")

tab_player, tab_plan = st.tabs(["Player", "Plan"])

# ---------------------------------------------------------------------------
# Tab 1: Plan
# ---------------------------------------------------------------------------

with tab_plan:
    if workout is None:
        st.info("Load a plan from the sidebar to preview it.")
    else:
        st.markdown(workout.summary)
        timeline = plan_timeline(workout)
        c1, c2 = st.columns(2)
        c1.metric("Steps", str(len(timeline)))
        c2.metric("Timed length", format_duration(estimated_duration_seconds(workout)))
        st.dataframe(timeline, hide_index=True, use_container_width=True)


# ---------------------------------------------------------------------------
# Tab 2: Player
# ---------------------------------------------------------------------------


def _render_feedback_form() -> None:
    st.subheader("Workout complete!")
    st.write("Let me know how that felt so I can adjust your next session.")
    with st.form("feedback"):
        rpe = st.slider(
            "How hard was that? (1 = Easy, 10 = Max Effort)",
            MIN_PERCEIVED_EXERTION, MAX_PERCEIVED_EXERTION, 6,
        )
        comment = st.text_area("Any other feedback?", placeholder="e.g. 'The core finisher was tough!'")
        if st.form_submit_button("Submit & Finish"):
            try:
                feedback = WorkoutFeedback(perceived_exertion=rpe, comment=comment)
            except InvalidFeedbackError as e:
                st.error(str(e))
                return
            st.session_state["feedback_message"] = feedback.feedback_message()
            controller.stop()
            events.clear()
            st.rerun()


@st.fragment(run_every=1.0)
def _player() -> None:
    now = time.monotonic()
    session = controller.session

    # Catch up on whole seconds since the last rerun; paused time never counts.
    if session is None or session.is_paused:
        st.session_state["last_tick_at"] = now
    else:
        due = ticks_due(st.session_state.get("last_tick_at", now), now)
        for _ in range(due):
            controller.tick()
        st.session_state["last_tick_at"] = st.session_state.get("last_tick_at", now) + due

    if "feedback_message" in st.session_state:
        st.success(st.session_state["feedback_message"])

    session = controller.session
    if session is None:
        if workout is not None and st.button("Start workout", type="primary"):
            if not start_playback(controller, workout):
                events.clear()
                st.warning("This plan has no workout content.")
                return
            st.session_state["last_tick_at"] = time.monotonic()
            st.rerun(scope="fragment")
        return

    if session.is_finished:
        _render_feedback_form()
        return

    exercise = controller.current_exercise
    color = phase_color(session.phase)
    playing = controller.workout
    rounds = playing_round_label(controller)

    st.markdown(
        f'<div style="background:{color};color:white;padding:8px 16px;border-radius:8px;">'
        f"<strong>{PHASE_LABELS[session.phase]}</strong>"
        f"{' &nbsp;|&nbsp; ' + rounds if rounds else ''}</div>",
        unsafe_allow_html=True,
    )

    if session.is_rest:
        st.header("REST TIME")
        nxt = upcoming_exercise(session, playing)
        if nxt is not None:
            st.caption(f"Up next: {nxt.name}")
    elif exercise is not None:
        st.header(exercise.name)
        caption = exercise_caption(exercise)
        if caption:
            st.write(caption)
        if exercise.notes:
            st.caption(exercise.notes)

    if session.awaits_manual_advance:
        st.info("No timer for this exercise. Complete the sets & reps, then hit Skip.")
    else:
        st.metric("Time left", format_clock(session.timer_seconds))
        st.progress(progress_fraction(session))

    if session.is_paused:
        st.warning("PAUSED")

    c_prev, c_pause, c_skip, c_stop = st.columns(4)
    if c_prev.button("Previous"):
        controller.previous()
        st.rerun(scope="fragment")
    if c_pause.button("Resume" if session.is_paused else "Pause"):
        controller.pause_toggle()
        st.session_state["last_tick_at"] = time.monotonic()
        st.rerun(scope="fragment")
    if c_skip.button("Skip rest" if session.is_rest else "Skip"):
        controller.skip()
        st.session_state["last_tick_at"] = time.monotonic()
        st.rerun(scope="fragment")
    if c_stop.button("Stop"):
        controller.stop()
        events.clear()
        st.rerun(scope="fragment")


with tab_player:
    if workout is None:
        st.info("Load a plan from the sidebar, then press **Start workout**.")
    _player()
