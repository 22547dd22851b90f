"""Streamlit dashboard for the Pomodoro tracker.

Features:
- Sidebar for durations and a theme selector (light/dark).
- Large centered timer with Start/Pause/Resume and Finish buttons.
- Annotation box for the pause in progress.
- Interruption table for the current stage and a list of finished stages.
"""
from __future__ import annotations

import time
from typing import Dict, List, Optional

import streamlit as st

from . import scheduler
from .clock import format_time
from .session import CycleState, Session

TOGGLE_LABELS = {
    CycleState.IDLE: "Start",
    CycleState.RUNNING: "Pause",
    CycleState.PAUSED: "Resume",
    CycleState.DUE: "Pause",
}


def interruption_rows(session: Session) -> List[Dict[str, str]]:
    return [
        {"#": str(index), "Paused for": format_time(item.duration), "Note": item.annotation or ""}
        for index, item in enumerate(session.interruption_history(), start=1)
    ]


def cycle_rows(session: Session) -> List[Dict[str, str]]:
    rows = []
    for cycle in session.history:
        stage = session.configuration.stage_at(cycle.stage_iteration)
        active = cycle.elapsed_active_time(cycle.finished_at) if cycle.finished_at is not None else 0.0
        rows.append(
            {
                "Stage": stage.label,
                "Active": format_time(int(active)),
                "Interruptions": str(len(cycle.interruption_history)),
            }
        )
    return rows


def sync_annotation(session: Session, text: str) -> None:
    """Make the open pause's annotation equal ``text`` using the key-level events."""
    current = session.get_annotation() or ""
    common = 0
    for old, new in zip(current, text):
        if old != new:
            break
        common += 1
    for _ in range(len(current) - common):
        session.annotate_backspace()
    for char in text[common:]:
        session.annotate_char(char)


def get_session(configuration: scheduler.Configuration) -> Session:
    existing: Optional[Session] = st.session_state.get("session")
    if existing is None or existing.configuration != configuration:
        st.session_state.session = Session(configuration)
    return st.session_state.session


def main() -> None:
    st.set_page_config(page_title="Pomodoro Dashboard", layout="centered")

    st.title("Pomodoro")

    with st.sidebar:
        pomodoros = st.number_input("Pomodoros", min_value=1, value=scheduler.DEFAULTS["pomodoros"])
        work_minutes = st.number_input("Work minutes", min_value=1, value=scheduler.DEFAULTS["work_minutes"])
        short_break_minutes = st.number_input("Short break minutes", min_value=1, value=scheduler.DEFAULTS["short_break_minutes"])
        long_break_minutes = st.number_input("Long break minutes", min_value=1, value=scheduler.DEFAULTS["long_break_minutes"])
        fast = st.checkbox("Fast demo (1s per minute)", value=False)
        st.write("---")
        theme = st.selectbox("Theme", ["light", "dark"], index=0)

    configuration = scheduler.build_configuration(
        pomodoros=int(pomodoros),
        work_minutes=int(work_minutes),
        short_break_minutes=int(short_break_minutes),
        long_break_minutes=int(long_break_minutes),
        second_length=1 if fast else 60,
    )
    session = get_session(configuration)

    css_light = "body {background:#ffffff; color:#111111} .stText {color:#111}"
    css_dark = "body {background:#0b1220; color:#e6eef6} .stText {color:#e6eef6}"
    st.markdown(f"<style>{css_dark if theme == 'dark' else css_light}</style>", unsafe_allow_html=True)
    st.markdown(
        """
        <style>
        .big-timer {font-size:56px; font-weight:700; text-align:center; margin: 12px 0}
        .pause-timer {font-size:24px; text-align:center; color:#888}
        div.stButton > button {height:64px; width:100%; font-size:18px}
        </style>
        """,
        unsafe_allow_html=True,
    )

    with st.expander("Planned stages"):
        for item in configuration.plan():
            st.write(f"- {item.label}: {format_time(item.duration_seconds)}")

    now = session.now()
    c1, c2 = st.columns([1, 1])
    if c1.button(TOGGLE_LABELS[session.state(now)]):
        session.toggle()
    if c2.button("Finish stage"):
        session.finish_now()

    status = session.status(session.now())
    if status.remaining.is_due:
        st.markdown(f"<div class='big-timer'>✓ {status.stage.label} complete</div>", unsafe_allow_html=True)
        session.finish_now()
        time.sleep(0.8)
        st.rerun()

    st.markdown(f"<div class='big-timer'>{status.stage.label}: {status.remaining.display}</div>", unsafe_allow_html=True)
    target = configuration.duration_for(status.stage)
    done = target - status.remaining.total_seconds
    st.progress(int(min(100, (done / target) * 100)) if target > 0 else 0)

    if status.is_paused:
        st.markdown(f"<div class='pause-timer'>paused {status.pause_display}</div>", unsafe_allow_html=True)
        note = st.text_input("What interrupted you?", value=status.annotation or "")
        sync_annotation(session, note)

    st.subheader("Interruptions")
    rows = interruption_rows(session)
    if rows:
        st.table(rows)
    else:
        st.write("None so far.")

    if session.history:
        st.subheader("Finished stages")
        st.table(cycle_rows(session))

    if status.state is CycleState.RUNNING:
        time.sleep(scheduler.DEFAULTS["tick_ms"] / 1000)
        st.rerun()
