from __future__ import annotations

import base64
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx
from cryptography.fernet import Fernet

from moodlift.db_init import AUTH_SESSIONS_TABLE
from moodlift.settings import get_settings
from moodlift.store import RowStore, new_id

logger = logging.getLogger(__name__)


class AuthExchangeError(Exception):
    pass


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser
    access_token: str | None
    refresh_token: str | None
    expires_in: int


def _fernet() -> Fernet:
    digest = hashlib.sha256(get_settings().encryption_secret.encode("utf-8")).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt_token(value: str) -> str:
    return _fernet().encrypt(value.encode("utf-8")).decode("utf-8")


def decrypt_token(value: str) -> str:
    return _fernet().decrypt(value.encode("utf-8")).decode("utf-8")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if not isinstance(payload, dict):
        return response.text
    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message") or response.text
    return (
        payload.get("error_description")
        or payload.get("msg")
        or payload.get("message")
        or (error if isinstance(error, str) else None)
        or response.text
    )


def _session_from_token_data(token_data: dict) -> AuthSession:
    user_data = token_data.get("user") or {}
    user_id = user_data.get("id") or token_data.get("user_id")
    if not user_id:
        raise AuthExchangeError("Sign-in response did not include a user.")
    return AuthSession(
        user=AuthUser(id=str(user_id), email=user_data.get("email")),
        access_token=token_data.get("access_token"),
        refresh_token=token_data.get("refresh_token"),
        expires_in=int(token_data.get("expires_in", 3600) or 3600),
    )


async def exchange_code_for_session(code: str) -> AuthSession:
    settings = get_settings()
    if not settings.oauth_token_url:
        raise AuthExchangeError("OAuth sign-in is not configured.")
    payload = {
        "code": code,
        "client_id": settings.oauth_client_id,
        "client_secret": settings.oauth_client_secret,
        "redirect_uri": settings.oauth_redirect_uri,
        "grant_type": "authorization_code",
    }
    try:
        async with httpx.AsyncClient(timeout=20) as client:
            response = await client.post(settings.oauth_token_url, data=payload)
    except httpx.HTTPError as exc:
        raise AuthExchangeError(f"Auth provider unreachable: {exc}") from exc
    if response.status_code >= 400:
        raise AuthExchangeError(_error_message(response))
    try:
        token_data = response.json()
    except ValueError as exc:
        raise AuthExchangeError("Auth provider returned an invalid response.") from exc
    return _session_from_token_data(token_data)


async def store_session(store: RowStore, session: AuthSession) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    session_id = new_id()
    await store.table(AUTH_SESSIONS_TABLE).insert(
        {
            "id": session_id,
            "user_id": session.user.id,
            "email": session.user.email,
            "refresh_token_enc": encrypt_token(session.refresh_token) if session.refresh_token else None,
            "expires_at": (now + timedelta(days=settings.session_ttl_days)).isoformat(),
            "created_at": now.isoformat(),
        }
    ).execute()
    logger.info("Signed in user %s", session.user.id)
    return session_id


async def get_session_user(store: RowStore, session_id: str) -> AuthUser | None:
    if not session_id:
        return None
    row = await (
        store.table(AUTH_SESSIONS_TABLE)
        .select("user_id, email, expires_at")
        .eq("id", session_id)
        .maybe_single()
    )
    if not row:
        return None
    expires_at = row.get("expires_at")
    if expires_at:
        try:
            expires_dt = datetime.fromisoformat(str(expires_at).replace("Z", "+00:00"))
        except ValueError:
            expires_dt = None
        if expires_dt is None or expires_dt <= datetime.now(timezone.utc):
            return None
    return AuthUser(id=str(row["user_id"]), email=row.get("email"))

