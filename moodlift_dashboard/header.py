import logging
from datetime import date

import streamlit as st

from moodlift_dashboard.data import api_client, repositories

logger = logging.getLogger(__name__)

STREAK_STATE_KEY = "streak.checked"


def needs_streak_check(cached, user_id, today):
    if not cached:
        return True
    return cached.get("user_id") != user_id or cached.get("checked_on") != today.isoformat()


def ensure_streak_checked(user_id, today=None):
    """Register the visit once per user and day for this browser session."""
    today = today or date.today()
    cached = st.session_state.get(STREAK_STATE_KEY)
    if not needs_streak_check(cached, user_id, today):
        return cached
    try:
        result = repositories.check_streak()
    except api_client.ApiError as exc:
        logger.warning("Streak check failed: %s", exc)
        return None
    state = {"user_id": user_id, "checked_on": today.isoformat(), **result}
    st.session_state[STREAK_STATE_KEY] = state
    return state


def streak_message(state):
    current = int(state.get("current_streak", 0) or 0)
    if state.get("streak_broken"):
        return "Your streak was reset. Today is day 1, let's build it back!"
    if state.get("is_new_streak") and current == 1:
        return "Welcome back! Your streak starts today."
    if current > 1:
        return f"{current} days in a row. Keep it going!"
    return "Come back tomorrow to grow your streak."


@st.fragment
def render_global_header(ctx):
    streak = ctx.get("streak") or {}
    current_name = ctx.get("current_user_name") or "Friend"
    backend_ok = ctx.get("backend_ok", True)

    current = int(streak.get("current_streak", 0) or 0)
    longest = int(streak.get("longest_streak", 0) or 0)

    st.markdown("<div class='sticky-header-wrap'>", unsafe_allow_html=True)
    st.markdown(f"<div class='small-label'>Hi {current_name}</div>", unsafe_allow_html=True)
    cols = st.columns(2)
    cols[0].metric("🔥 Current streak", f"{current} days")
    cols[1].metric("🏆 Longest streak", f"{longest} days")
    if not backend_ok:
        st.warning("Backend warming up… data may take a moment to appear.")
    elif streak:
        st.caption(streak_message(streak))
    st.markdown("</div>", unsafe_allow_html=True)
