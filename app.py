#!/usr/bin/env python3
"""
Run instructions
- Create a virtualenv (optional) and install dependencies:
    pip install -e .
- Run the app:
    streamlit run app.py

Notes
- Single-user app for local use. Entries and the goal weight are persisted to a JSON
  file (weights.json next to this file by default, see config.py).
- Weights are in kg. Multiple entries per day are allowed.
"""
from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from charts import make_weight_chart
from config import Config
from notifications import Notifier
from quotes import random_quote
from storage import JsonFileRepository
from tracker import InvalidWeightError, WeightTracker

logger = logging.getLogger(__name__)

# -------------------------------
# Configuration and constants
# -------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

VIEWS = ["entry", "history", "graph", "goal"]
VIEW_LABELS = {
    "entry": "Log weight",
    "history": "History",
    "graph": "Graph",
    "goal": "Goal",
}

# Banner refresh interval; expired notifications disappear on the next tick.
BANNER_REFRESH_SECONDS = 1.0


# -------------------------------
# Formatting helpers
# -------------------------------

def _format_number(x: float) -> str:
    # shortest repr that round-trips, without a trailing ".0"
    text = repr(float(x))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _format_weight(x: Optional[float]) -> str:
    if x is None:
        return "-"
    return f"{_format_number(x)} kg"


def _format_change(x: Optional[float]) -> str:
    if x is None:
        return "-"
    sign = "+" if x > 0 else ""
    return f"{sign}{x:.1f} kg"


def _change_color(x: float) -> str:
    # loss is green, gain is red
    if x < 0:
        return "green"
    if x > 0:
        return "red"
    return "gray"


# -------------------------------
# Session state and callbacks
# -------------------------------

def _init_state(config: Config) -> None:
    if "tracker" not in st.session_state:
        st.session_state.tracker = WeightTracker.load(JsonFileRepository(config.data_path))
    st.session_state.setdefault("notifier", Notifier(config.notification_seconds))
    st.session_state.setdefault("active_view", "entry")
    st.session_state.setdefault("quote", random_quote())
    st.session_state.setdefault("entry_date", config.today())
    st.session_state.setdefault("weight_input", "")
    st.session_state.setdefault("notes_input", "")
    goal = st.session_state.tracker.goal
    st.session_state.setdefault("goal_input", _format_number(goal) if goal is not None else "")


def _on_add_entry() -> None:
    tracker: WeightTracker = st.session_state.tracker
    notifier: Notifier = st.session_state.notifier
    raw = st.session_state.weight_input
    try:
        tracker.add_entry(st.session_state.entry_date, raw, st.session_state.notes_input)
    except InvalidWeightError as e:
        logger.warning("Rejected weight %r: %s", raw, e)
        notifier.error("Please enter a valid weight.")
        return
    except OSError as e:
        logger.exception("Failed to save entry")
        notifier.error(f"Failed to save entry: {e}")
        return

    st.session_state.weight_input = ""
    st.session_state.notes_input = ""
    st.session_state.quote = random_quote(exclude=st.session_state.quote)
    notifier.success("Weight entry saved.")


def _on_delete_entry(entry_id: int) -> None:
    tracker: WeightTracker = st.session_state.tracker
    notifier: Notifier = st.session_state.notifier
    try:
        deleted = tracker.delete_entry(entry_id)
    except OSError as e:
        logger.exception("Failed to delete entry %s", entry_id)
        notifier.error(f"Failed to delete entry: {e}")
        return
    if deleted:
        notifier.success("Entry deleted.")
    else:
        notifier.error("That entry no longer exists.")


def _on_set_goal() -> None:
    tracker: WeightTracker = st.session_state.tracker
    notifier: Notifier = st.session_state.notifier
    raw = st.session_state.goal_input
    try:
        tracker.set_goal(raw)
    except InvalidWeightError as e:
        logger.warning("Rejected goal %r: %s", raw, e)
        notifier.error("Please enter a valid goal weight.")
        return
    except OSError as e:
        logger.exception("Failed to save goal")
        notifier.error(f"Failed to save goal: {e}")
        return
    notifier.success("Goal weight set.")


def _on_clear_goal() -> None:
    tracker: WeightTracker = st.session_state.tracker
    notifier: Notifier = st.session_state.notifier
    try:
        tracker.clear_goal()
    except OSError as e:
        logger.exception("Failed to clear goal")
        notifier.error(f"Failed to clear goal: {e}")
        return
    st.session_state.goal_input = ""
    notifier.success("Goal weight cleared.")


# -------------------------------
# Views
# -------------------------------

@st.fragment(run_every=BANNER_REFRESH_SECONDS)
def _render_notification() -> None:
    notifier: Notifier = st.session_state.notifier
    note = notifier.current()
    if note is None:
        return
    msg_col, close_col = st.columns([12, 1])
    with msg_col:
        if note.kind == "error":
            st.error(note.message)
        else:
            st.success(note.message)
    with close_col:
        st.button("✕", key="dismiss_notification", on_click=notifier.dismiss, help="Dismiss")


def render_entry_view() -> None:
    st.subheader("Log today's weight")
    st.date_input("Date", key="entry_date")
    st.text_input("Weight (kg)", key="weight_input", placeholder="e.g. 72.4")
    st.text_area("Notes", key="notes_input", placeholder="Anything notable today (optional)", height=90)
    st.button("Save entry", key="save_entry", on_click=_on_add_entry, type="primary")
    st.info(f"\"{st.session_state.quote}\"")


def render_history_view(tracker: WeightTracker) -> None:
    st.subheader("History")
    if len(tracker) == 0:
        st.write("No entries yet.")
        return

    if len(tracker) > 1:
        change = tracker.weight_change()
        st.markdown(f"**Recent change:** :{_change_color(change)}[{_format_change(change)}]")

    header = st.columns([2, 2, 5, 1])
    header[0].markdown("**Date**")
    header[1].markdown("**Weight**")
    header[2].markdown("**Notes**")
    for entry in tracker.newest_first():
        row = st.columns([2, 2, 5, 1])
        row[0].write(entry.date)
        row[1].write(_format_weight(entry.weight))
        row[2].write(entry.notes)
        row[3].button(
            "⨯",
            key=f"delete_{entry.id}",
            on_click=_on_delete_entry,
            args=(entry.id,),
            help="Delete entry",
        )


def render_graph_view(tracker: WeightTracker) -> None:
    st.subheader("Weight trend")
    summary = tracker.trend_summary()
    if summary is None:
        st.write("At least two entries are needed to draw the graph.")
        return

    fig = make_weight_chart(tracker.frame(), goal=tracker.goal)
    st.plotly_chart(fig, key="weight_chart")

    st.markdown("#### Analysis")
    lines = [
        f"- First record ({summary.first.date}): {_format_weight(summary.first.weight)}",
        f"- Latest record ({summary.latest.date}): {_format_weight(summary.latest.weight)}",
        f"- Total change: :{_change_color(summary.total_change)}[{summary.total_change:.1f} kg]",
    ]
    if summary.to_goal is not None:
        color = "red" if summary.latest.weight > tracker.goal else "green"
        lines.append(f"- To goal: :{color}[{summary.to_goal:.1f} kg]")
    st.markdown("\n".join(lines))


def render_goal_view(tracker: WeightTracker) -> None:
    st.subheader("Goal weight")
    st.text_input("Goal weight (kg)", key="goal_input", placeholder="e.g. 68")
    set_col, clear_col = st.columns(2)
    with set_col:
        st.button("Set goal", key="set_goal", on_click=_on_set_goal, type="primary")
    with clear_col:
        st.button(
            "Clear goal",
            key="clear_goal",
            on_click=_on_clear_goal,
            disabled=tracker.goal is None,
        )

    if tracker.goal is None or len(tracker) == 0:
        return

    progress = tracker.goal_progress()
    st.markdown("#### Progress")
    st.progress(progress / 100.0)
    st.caption(f"{progress:.1f}% achieved")

    first = tracker.first()
    latest = tracker.latest()
    st.markdown(
        "\n".join([
            f"- **Start weight:** {_format_weight(first.weight)}",
            f"- **Current weight:** {_format_weight(latest.weight)}",
            f"- **Goal weight:** {_format_weight(tracker.goal)}",
        ])
    )


# Main UI
def main():
    st.set_page_config(page_title="Weight Tracker", layout="centered")

    config = Config.from_env()
    config.validate()
    logging.basicConfig(format=LOG_FORMAT, level=config.level)

    st.title("Weight Tracker")
    _init_state(config)

    _render_notification()

    st.radio(
        "View",
        options=VIEWS,
        format_func=VIEW_LABELS.get,
        key="active_view",
        horizontal=True,
        label_visibility="collapsed",
    )

    tracker: WeightTracker = st.session_state.tracker
    view = st.session_state.active_view
    if view == "entry":
        render_entry_view()
    elif view == "history":
        render_history_view(tracker)
    elif view == "graph":
        render_graph_view(tracker)
    elif view == "goal":
        render_goal_view(tracker)


# Call the Streamlit app entrypoint when the script is executed by Streamlit
main()
