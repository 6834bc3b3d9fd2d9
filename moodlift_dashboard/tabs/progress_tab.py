import streamlit as st

from moodlift_dashboard.constants import ACHIEVEMENT_ICONS
from moodlift_dashboard.data import api_client, repositories
from moodlift_dashboard.visualizations import weekly_activity_chart


def _render_achievements(achievements):
    st.markdown("<div class='small-label'>Achievements</div>", unsafe_allow_html=True)
    cols = st.columns(3)
    for idx, item in enumerate(achievements):
        icon = ACHIEVEMENT_ICONS.get(item["title"], "⭐")
        status = "Earned" if item.get("earned") else "Locked"
        with cols[idx % 3]:
            st.markdown(f"{icon} **{item['title']}** · {status}")
            st.caption(item.get("description", ""))


def _render_log_session_form():
    with st.form("progress.log_session", clear_on_submit=True):
        st.markdown("<div class='small-label'>Log a session</div>", unsafe_allow_html=True)
        game_title = st.text_input("Game")
        cols = st.columns(4)
        score = cols[0].number_input("Score", min_value=0, max_value=100, value=0)
        minutes = cols[1].number_input("Minutes", min_value=0, value=5)
        mood_before = cols[2].slider("Mood before", 1, 10, 5)
        mood_after = cols[3].slider("Mood after", 1, 10, 5)
        submitted = st.form_submit_button("Save")
    if not submitted:
        return
    if not game_title.strip():
        st.warning("Give the session a game name first.")
        return
    try:
        repositories.save_game_session(game_title.strip(), score, minutes * 60, mood_before, mood_after)
    except api_client.ApiError as exc:
        st.error(f"Could not save the session: {exc}")
        return
    st.success("Session saved.")


def render_progress_tab(ctx):
    st.markdown("<div class='section-title'>Your Progress</div>", unsafe_allow_html=True)
    try:
        progress = repositories.load_progress(ctx.user_id)
    except api_client.ApiError as exc:
        st.error(f"Progress unavailable: {exc}")
        return

    cols = st.columns(3)
    cols[0].metric("Games played", int(progress.get("total_games", 0)))
    cols[1].metric("Average mood", progress.get("avg_mood", 0))
    cols[2].metric("Active days in a row", int(progress.get("current_streak", 0)))

    weekly = progress.get("weekly_activity") or []
    if any(item.get("games") for item in weekly):
        st.plotly_chart(weekly_activity_chart(weekly), use_container_width=True)
    else:
        st.info("No games this week yet.")

    _render_achievements(progress.get("achievements") or [])
    _render_log_session_form()
