import logging

import streamlit as st

from moodlift_dashboard.components.consultant_carousel import render_consultant_carousel
from moodlift_dashboard.data import api_client, repositories

logger = logging.getLogger(__name__)


def render_consultants_tab(ctx):
    st.markdown("<div class='section-title'>Talk to a Therapist</div>", unsafe_allow_html=True)
    placeholder = st.empty()
    with placeholder.container():
        render_consultant_carousel([], loading=True)
    try:
        consultants = repositories.load_consultants()
    except api_client.ApiError as exc:
        logger.warning("Consultants unavailable: %s", exc)
        consultants = []
    with placeholder.container():
        render_consultant_carousel(consultants)
