"""Read/write helpers for the dashboard, all backed by the MoodLift API.

Progress and heatmap are always read fresh. Listings are cached for a short
while, and writes clear the caches they affect.
"""
import logging

import streamlit as st

from moodlift_dashboard.data import api_client

logger = logging.getLogger(__name__)


def _items(payload):
    if not payload:
        return []
    return list(payload.get("items") or [])


def load_progress(user_id):
    return api_client.request("GET", "/v1/progress")


def load_heatmap(user_id):
    return _items(api_client.request("GET", "/v1/progress/heatmap"))


@st.cache_data(ttl=30, show_spinner=False)
def load_activities(user_id, limit=30):
    return _items(api_client.request("GET", "/v1/activities", params={"limit": limit}))


@st.cache_data(ttl=300, show_spinner=False)
def load_consultants():
    return _items(api_client.request("GET", "/v1/consultants"))


def check_streak():
    result = api_client.request("POST", "/v1/streak/check")
    invalidate_activity_cache()
    return result


def save_game_session(game_title, score, duration, mood_before=None, mood_after=None, description=None):
    payload = {
        "game_title": game_title,
        "score": int(score),
        "duration": int(duration),
        "mood_before": mood_before,
        "mood_after": mood_after,
        "description": description,
    }
    row = api_client.request("POST", "/v1/sessions", json=payload)
    invalidate_activity_cache()
    return row


def invalidate_activity_cache():
    load_activities.clear()
    logger.debug("Activity cache cleared")
