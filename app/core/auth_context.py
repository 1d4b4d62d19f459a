"""Auth context: the single owner of the stored bearer token and user.

Handlers and services read the session through this object instead of the
store directly, and observe sign-in/out through its ``subscribe``.
"""
from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from app.core.constants import AUTH_TOKEN_KEY, AUTH_USER_KEY, TOKEN_EXPIRES_KEY
from app.core.events import SignalHandler, SignalStore, SignalType
from app.core.exceptions import ApiError, AuthenticationRequired, SessionExpired
from app.core.session_store import SessionStore
from app.core.utils import to_int
from app.domain.entities import User
from logging_config import logger


def _now_ms() -> int:
    return int(time.time() * 1000)


class AuthContext:
    def __init__(
        self,
        store: SessionStore,
        api: Any,
        signals: SignalStore,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.api = api
        self.signals = signals
        self._clock = clock

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def token(self, user_id: int) -> str | None:
        return self.store.get(user_id, AUTH_TOKEN_KEY) or None

    def require_token(self, user_id: int) -> str:
        token = self.token(user_id)
        if not token:
            raise AuthenticationRequired()
        return token

    def user(self, user_id: int) -> User | None:
        """Stored user, or None when missing or unreadable."""
        raw = self.store.get(user_id, AUTH_USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning("Stored user for %s is corrupt: %s", user_id, e)
            return None

    def is_authenticated(self, user_id: int) -> bool:
        return bool(self.token(user_id)) and self.user(user_id) is not None

    def expires_at(self, user_id: int) -> int | None:
        raw = self.store.get(user_id, TOKEN_EXPIRES_KEY)
        if not raw:
            return None
        return to_int(raw) or None

    # ------------------------------------------------------------------
    # session changes
    # ------------------------------------------------------------------

    async def login(self, user_id: int, email: str, password: str) -> User:
        """Sign in against the API and persist token, user and expiry."""
        data = await self.api.login(email, password)
        user = User.model_validate(data.get("user") or {})

        self.store.set(user_id, AUTH_TOKEN_KEY, str(data["token"]))
        self.store.set(user_id, AUTH_USER_KEY, user.model_dump_json())
        expires_in = to_int(data.get("expires_in"))
        if expires_in > 0:
            self.store.set(user_id, TOKEN_EXPIRES_KEY, str(self._clock() + expires_in * 1000))
        else:
            self.store.delete(user_id, TOKEN_EXPIRES_KEY)

        logger.info("User %s signed in as %s (%s)", user_id, user.id, user.role)
        await self.signals.emit(SignalType.LOGGED_IN, user_id)
        return user

    async def logout(self, user_id: int) -> None:
        """Tell the API (best effort), then always drop the local session."""
        token = self.token(user_id)
        if token:
            try:
                await self.api.logout(token)
            except (ApiError, SessionExpired) as e:
                logger.warning("Logout API call failed for %s: %s", user_id, e)
        await self.clear_session(user_id)

    async def clear_session(self, user_id: int) -> None:
        """Drop the local session without calling the API (401, expiry)."""
        self.store.delete(user_id, AUTH_TOKEN_KEY, AUTH_USER_KEY, TOKEN_EXPIRES_KEY)
        logger.info("Session cleared for %s", user_id)
        await self.signals.emit(SignalType.LOGGED_OUT, user_id)

    async def check_expiry(self, user_id: int) -> bool:
        """Return True while the stored session is usable.

        Expired tokens and corrupt stored users clear the session and emit
        ``logged_out``. No session at all just returns False.
        """
        token = self.token(user_id)
        raw_user = self.store.get(user_id, AUTH_USER_KEY)
        if not token and not raw_user:
            return False

        expires_at = self.expires_at(user_id)
        if expires_at is not None and self._clock() > expires_at:
            logger.info("Token expired for %s", user_id)
            await self.clear_session(user_id)
            return False

        if not token or self.user(user_id) is None:
            await self.clear_session(user_id)
            return False
        return True

    def subscribe(self, handler: SignalHandler, user_id: int | None = None) -> Callable[[], None]:
        """Call ``handler(user_id)`` on every sign-in and sign-out."""
        off_in = self.signals.subscribe(SignalType.LOGGED_IN, handler, user_id)
        off_out = self.signals.subscribe(SignalType.LOGGED_OUT, handler, user_id)

        def unsubscribe() -> None:
            off_in()
            off_out()

        return unsubscribe
