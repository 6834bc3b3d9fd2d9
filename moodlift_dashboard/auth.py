from __future__ import annotations

import os

import streamlit as st

ENV_FALLBACK_KEYS = {
    ("auth", "redirect_uri"): "AUTH_REDIRECT_URI",
    ("auth", "cookie_secret"): "AUTH_COOKIE_SECRET",
    ("auth", "client_id"): "OAUTH_CLIENT_ID",
    ("auth", "client_secret"): "OAUTH_CLIENT_SECRET",
    ("auth", "server_metadata_url"): "OAUTH_SERVER_METADATA_URL",
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "BACKEND_SESSION_SECRET"): "BACKEND_SESSION_SECRET",
}


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except (FileNotFoundError, KeyError, TypeError):
            return default
    return current


def auth_configured():
    return bool(
        get_secret(("auth", "redirect_uri"))
        and get_secret(("auth", "cookie_secret"))
        and get_secret(("auth", "client_id"))
        and get_secret(("auth", "client_secret"))
    )


def enforce_login():
    if not auth_configured():
        st.markdown("<div class='section-title'>Sign-in Setup Required</div>", unsafe_allow_html=True)
        st.markdown("Configure the OAuth provider in Streamlit secrets before using MoodLift.")
        st.code(
            "[auth]\n"
            "redirect_uri = \"https://your-app.streamlit.app/oauth2callback\"\n"
            "cookie_secret = \"LONG_RANDOM_SECRET\"\n"
            "client_id = \"YOUR_CLIENT_ID\"\n"
            "client_secret = \"YOUR_CLIENT_SECRET\"\n"
            "server_metadata_url = \"https://provider.example/.well-known/openid-configuration\"\n\n"
            "[app]\n"
            "API_BASE_URL = \"https://api.moodlift.example\"\n"
            "BACKEND_SESSION_SECRET = \"SHARED_BACKEND_SECRET\"",
            language="toml",
        )
        st.stop()

    if not st.user.is_logged_in:
        st.markdown("<div class='section-title'>Welcome to MoodLift</div>", unsafe_allow_html=True)
        st.markdown("Sign in to track your mood, games and daily streak.")
        if st.button("Sign in", key="auth.login"):
            st.login()
        st.stop()

    with st.sidebar:
        st.caption(f"Signed in as: {getattr(st.user, 'email', 'unknown')}")
        if st.button("Sign out", key="auth.logout"):
            st.logout()


def get_current_user():
    """``(user_id, email)`` of the signed-in user; the OIDC subject is the id."""
    email = str(getattr(st.user, "email", "") or "").strip().lower() or None
    user_id = str(getattr(st.user, "sub", "") or "").strip() or email
    return user_id, email


def get_display_name(email=None):
    user_name = str(getattr(st.user, "name", "") or "").strip()
    if user_name:
        return user_name.split()[0]
    local = (email or "").split("@")[0].replace(".", " ").strip()
    return local.title() if local else "Friend"
