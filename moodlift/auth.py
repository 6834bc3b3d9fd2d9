from __future__ import annotations

import hmac

from fastapi import Depends, HTTPException, Request

from moodlift.services.auth_service import AuthUser, get_session_user
from moodlift.settings import get_settings
from moodlift.store import RowStore, get_store


async def get_current_user(request: Request, store: RowStore = Depends(get_store)) -> AuthUser | None:
    settings = get_settings()
    backend_token = request.headers.get("X-Backend-Token")
    if backend_token is not None:
        if not hmac.compare_digest(backend_token, settings.backend_session_secret):
            raise HTTPException(status_code=401, detail="Invalid backend token")
        user_id = (request.headers.get("X-User-Id") or "").strip()
        if not user_id:
            raise HTTPException(status_code=401, detail="Missing user id")
        email = (request.headers.get("X-User-Email") or "").strip().lower() or None
        return AuthUser(id=user_id, email=email)

    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        return await get_session_user(store, session_id)
    return None


async def require_user(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    if user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return user
