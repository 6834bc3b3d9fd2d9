from __future__ import annotations

import html
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from moodlift.services import auth_service
from moodlift.services.auth_callback import FAILED_MESSAGE, AuthCallbackFlow, CallbackState
from moodlift.settings import get_settings
from moodlift.store import RowStore, StoreError, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


def render_callback_page(message: str) -> str:
    return (
        "<!doctype html>"
        "<html lang=\"en\"><head><meta charset=\"utf-8\"><title>Signing you in</title></head>"
        "<body><main class=\"min-h-screen flex items-center justify-center p-6\">"
        "<div class=\"max-w-md w-full text-center\">"
        "<h1 class=\"text-xl font-semibold\">Signing you in</h1>"
        f"<p class=\"mt-2 text-sm text-muted-foreground\">{html.escape(message)}</p>"
        "</div></main></body></html>"
    )


@router.get("/auth/callback")
async def auth_callback(request: Request, store: RowStore = Depends(get_store)):
    flow = AuthCallbackFlow(auth_service.exchange_code_for_session, is_disconnected=request.is_disconnected)
    outcome = await flow.run(request.query_params)

    if outcome.state == CallbackState.SUCCESS and outcome.session is not None:
        settings = get_settings()
        try:
            session_id = await auth_service.store_session(store, outcome.session)
        except StoreError as exc:
            logger.error("Could not persist sign-in session: %s", exc)
            return HTMLResponse(render_callback_page(FAILED_MESSAGE), status_code=400)
        response = RedirectResponse(outcome.redirect_to, status_code=302)
        response.set_cookie(
            settings.session_cookie_name,
            session_id,
            max_age=settings.session_ttl_days * 86400,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
        )
        return response

    status_code = 400 if outcome.state == CallbackState.ERROR else 202
    return HTMLResponse(render_callback_page(outcome.message), status_code=status_code)
