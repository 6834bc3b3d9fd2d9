from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional
from urllib.parse import unquote

from moodlift.services.auth_service import AuthExchangeError, AuthSession

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "Completing sign-in…"
MISSING_CODE_MESSAGE = "Missing OAuth code. Please try again."
FAILED_MESSAGE = "Failed to complete sign-in."
SUCCESS_REDIRECT = "/"

Exchanger = Callable[[str], Awaitable[AuthSession]]
DisconnectProbe = Callable[[], Awaitable[bool]]


class CallbackState(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class CallbackOutcome:
    state: CallbackState
    message: str
    redirect_to: str | None = None
    session: AuthSession | None = None


class AuthCallbackFlow:
    """OAuth redirect handling: ``pending`` ends in ``success`` or ``error``.

    Once cancelled (explicitly or because the client went away) the flow keeps
    whatever it had and never redirects.
    """

    def __init__(self, exchange_code: Exchanger, is_disconnected: Optional[DisconnectProbe] = None):
        self._exchange_code = exchange_code
        self._is_disconnected = is_disconnected
        self._cancelled = False
        self.state = CallbackState.PENDING
        self.message = PENDING_MESSAGE

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _fail(self, message: str) -> CallbackOutcome:
        self.state = CallbackState.ERROR
        self.message = message
        return CallbackOutcome(self.state, self.message)

    async def _check_cancelled(self) -> bool:
        if not self._cancelled and self._is_disconnected is not None and await self._is_disconnected():
            self._cancelled = True
        return self._cancelled

    async def run(self, params: Mapping[str, str]) -> CallbackOutcome:
        error = params.get("error")
        error_description = params.get("error_description")
        code = params.get("code")

        if error:
            return self._fail(unquote(error_description) if error_description else error)
        if not code:
            return self._fail(MISSING_CODE_MESSAGE)

        try:
            session = await self._exchange_code(code)
        except AuthExchangeError as exc:
            return self._fail(str(exc) or FAILED_MESSAGE)
        except Exception:
            logger.exception("Unexpected failure during OAuth code exchange")
            return self._fail(FAILED_MESSAGE)

        if await self._check_cancelled():
            logger.info("Sign-in finished after the client went away; discarding result")
            return CallbackOutcome(self.state, self.message)

        self.state = CallbackState.SUCCESS
        return CallbackOutcome(self.state, self.message, redirect_to=SUCCESS_REDIRECT, session=session)
