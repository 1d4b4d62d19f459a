"""Tests for the in-memory signal store."""
from __future__ import annotations

import pytest

from app.core.events import SignalStore, SignalType


@pytest.mark.asyncio
async def test_user_channel_and_global_handlers() -> None:
    signals = SignalStore()
    seen: list[tuple[str, int]] = []

    async def scoped(user_id: int) -> None:
        seen.append(("scoped", user_id))

    async def everyone(user_id: int) -> None:
        seen.append(("global", user_id))

    signals.subscribe(SignalType.CART_CHANGED, scoped, user_id=1)
    signals.subscribe(SignalType.CART_CHANGED, everyone)

    await signals.emit(SignalType.CART_CHANGED, 1)
    await signals.emit(SignalType.CART_CHANGED, 2)

    assert seen == [("scoped", 1), ("global", 1), ("global", 2)]


@pytest.mark.asyncio
async def test_unsubscribe_and_duplicate_subscribe() -> None:
    signals = SignalStore()
    calls: list[int] = []

    async def handler(user_id: int) -> None:
        calls.append(user_id)

    off = signals.subscribe("logged_in", handler, 1)
    signals.subscribe(SignalType.LOGGED_IN, handler, 1)
    assert signals.subscriber_count(SignalType.LOGGED_IN, 1) == 1

    off()
    await signals.emit(SignalType.LOGGED_IN, 1)

    assert calls == []
    assert signals.subscriber_count(SignalType.LOGGED_IN, 1) == 0


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others() -> None:
    signals = SignalStore()
    calls: list[int] = []

    async def broken(user_id: int) -> None:
        raise RuntimeError("boom")

    async def healthy(user_id: int) -> None:
        calls.append(user_id)

    signals.subscribe(SignalType.LOGGED_OUT, broken, 5)
    signals.subscribe(SignalType.LOGGED_OUT, healthy, 5)

    await signals.emit(SignalType.LOGGED_OUT, 5)

    assert calls == [5]


def test_unknown_signal_name_rejected() -> None:
    signals = SignalStore()

    async def handler(user_id: int) -> None:
        return None

    with pytest.raises(ValueError):
        signals.subscribe("cart_deleted", handler)
