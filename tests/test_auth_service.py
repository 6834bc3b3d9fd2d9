import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from moodlift.db_init import AUTH_SESSIONS_TABLE
from moodlift.services import auth_service
from moodlift.services.auth_service import AuthExchangeError, AuthSession, AuthUser
from moodlift.settings import reset_settings


@pytest.fixture
def oauth_provider(monkeypatch):
    monkeypatch.setenv("OAUTH_TOKEN_URL", "https://auth.moodlift.test/token")
    monkeypatch.setenv("OAUTH_CLIENT_ID", "client-id")
    monkeypatch.setenv("OAUTH_CLIENT_SECRET", "client-secret")
    reset_settings()
    requests_seen = []
    responses = {}
    real_client = httpx.AsyncClient

    def handler(request):
        requests_seen.append(request)
        return responses["next"]

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(auth_service.httpx, "AsyncClient", client_factory)
    return requests_seen, responses


def test_exchange_posts_authorization_code(oauth_provider):
    requests_seen, responses = oauth_provider
    responses["next"] = httpx.Response(
        200,
        json={
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_in": 1800,
            "user": {"id": "user-7", "email": "sam@example.com"},
        },
    )
    session = asyncio.run(auth_service.exchange_code_for_session("the-code"))
    assert session.user == AuthUser(id="user-7", email="sam@example.com")
    assert session.expires_in == 1800

    body = requests_seen[0].content.decode()
    assert "grant_type=authorization_code" in body
    assert "code=the-code" in body
    assert requests_seen[0].url == "https://auth.moodlift.test/token"


def test_exchange_surfaces_provider_error(oauth_provider):
    _, responses = oauth_provider
    responses["next"] = httpx.Response(400, json={"error": "invalid_grant", "error_description": "Code expired"})
    with pytest.raises(AuthExchangeError, match="Code expired"):
        asyncio.run(auth_service.exchange_code_for_session("stale"))


def test_exchange_requires_user(oauth_provider):
    _, responses = oauth_provider
    responses["next"] = httpx.Response(200, json={"access_token": "access"})
    with pytest.raises(AuthExchangeError):
        asyncio.run(auth_service.exchange_code_for_session("code"))


def test_exchange_without_configuration():
    with pytest.raises(AuthExchangeError, match="not configured"):
        asyncio.run(auth_service.exchange_code_for_session("code"))


def test_refresh_tokens_are_encrypted():
    token = auth_service.encrypt_token("refresh-token")
    assert token != "refresh-token"
    assert auth_service.decrypt_token(token) == "refresh-token"


def test_stored_session_resolves_user(store):
    session = AuthSession(AuthUser(id="user-1", email="mia@example.com"), "access", "refresh", 3600)
    session_id = asyncio.run(auth_service.store_session(store, session))

    row = asyncio.run(store.table(AUTH_SESSIONS_TABLE).select("*").eq("id", session_id).maybe_single())
    assert auth_service.decrypt_token(row["refresh_token_enc"]) == "refresh"

    user = asyncio.run(auth_service.get_session_user(store, session_id))
    assert user == AuthUser(id="user-1", email="mia@example.com")
    assert asyncio.run(auth_service.get_session_user(store, "unknown")) is None


def test_expired_session_is_ignored(store):
    session = AuthSession(AuthUser(id="user-1"), None, None, 3600)
    session_id = asyncio.run(auth_service.store_session(store, session))
    past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    asyncio.run(store.table(AUTH_SESSIONS_TABLE).update({"expires_at": past}).eq("id", session_id).execute())
    assert asyncio.run(auth_service.get_session_user(store, session_id)) is None
