import streamlit as st

from moodlift_dashboard.auth import enforce_login, get_current_user, get_display_name, get_secret
from moodlift_dashboard.context import DashboardContext
from moodlift_dashboard.data import api_client
from moodlift_dashboard.header import ensure_streak_checked, render_global_header
from moodlift_dashboard.logging_config import configure_logging
from moodlift_dashboard.router import render_router

logger = configure_logging()

st.set_page_config(page_title="MoodLift", page_icon="🌤️", layout="wide")

enforce_login()

current_user_id, current_user_email = get_current_user()
current_user_name = get_display_name(current_user_email)

api_client.configure(get_secret, get_current_user)

if not api_client.is_enabled():
    st.error("MoodLift API is not configured. Set API_BASE_URL and BACKEND_SESSION_SECRET.")
    st.stop()

streak = ensure_streak_checked(current_user_id)
if streak is None:
    logger.info("Rendering without streak data for %s", current_user_id)

render_global_header(
    {
        "streak": streak or {},
        "current_user_name": current_user_name,
        "backend_ok": streak is not None,
    }
)

context = DashboardContext(
    user_id=current_user_id,
    user_email=current_user_email,
    user_name=current_user_name,
    streak=streak or {},
)
render_router(context)
