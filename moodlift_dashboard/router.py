import streamlit as st

from moodlift_dashboard.constants import TAB_OPTIONS
from moodlift_dashboard.tabs.activity_tab import render_activity_tab
from moodlift_dashboard.tabs.consultants_tab import render_consultants_tab
from moodlift_dashboard.tabs.progress_tab import render_progress_tab


def render_router(ctx):
    active = st.session_state.get("ui.active_tab", TAB_OPTIONS[0])
    active = st.segmented_control(
        "Workspace",
        TAB_OPTIONS,
        key="ui.active_tab",
        default=active,
    )

    if active == "Activity":
        return _render_activity(ctx)

    if active == "Consultants":
        return _render_consultants(ctx)

    return _render_progress(ctx)


@st.fragment
def _render_progress(ctx):
    render_progress_tab(ctx)


@st.fragment
def _render_activity(ctx):
    render_activity_tab(ctx)


@st.fragment
def _render_consultants(ctx):
    render_consultants_tab(ctx)
