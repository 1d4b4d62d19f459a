"""
Cart and auth signals with an in-memory pub/sub.

Components that show cart or session data subscribe here instead of
polling: the cart aggregator reloads on ``cart_changed`` and ``logged_in``
and drops its state on ``logged_out``.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from logging_config import logger


class SignalType(str, Enum):
    CART_CHANGED = "cart_changed"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"


SignalHandler = Callable[[int], Awaitable[None]]


class SignalStore:
    """Per-user signal channels.

    Handlers subscribed with a ``user_id`` only receive that user's signals;
    handlers subscribed without one receive every user's signals.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[SignalHandler]] = {}

    @staticmethod
    def _channel(signal: SignalType | str, user_id: int | None) -> str:
        name = SignalType(signal).value
        return name if user_id is None else f"{name}:{int(user_id)}"

    def subscribe(
        self,
        signal: SignalType | str,
        handler: SignalHandler,
        user_id: int | None = None,
    ) -> Callable[[], None]:
        """Register ``handler``; returns a callable that unsubscribes it."""
        channel = self._channel(signal, user_id)
        handlers = self._subscribers.setdefault(channel, [])
        if handler not in handlers:
            handlers.append(handler)
        logger.debug("Subscribed to %s, total: %s", channel, len(handlers))

        def unsubscribe() -> None:
            self.unsubscribe(signal, handler, user_id)

        return unsubscribe

    def unsubscribe(
        self,
        signal: SignalType | str,
        handler: SignalHandler,
        user_id: int | None = None,
    ) -> None:
        channel = self._channel(signal, user_id)
        handlers = self._subscribers.get(channel)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            del self._subscribers[channel]

    def subscriber_count(self, signal: SignalType | str, user_id: int | None = None) -> int:
        return len(self._subscribers.get(self._channel(signal, user_id), []))

    async def emit(self, signal: SignalType | str, user_id: int) -> None:
        """Deliver ``signal`` to the user's handlers, then to global ones."""
        handlers = list(self._subscribers.get(self._channel(signal, user_id), []))
        handlers += self._subscribers.get(self._channel(signal, None), [])

        for handler in handlers:
            try:
                await handler(user_id)
            except Exception as e:
                logger.error("Signal handler error for %s (user %s): %s", signal, user_id, e)
