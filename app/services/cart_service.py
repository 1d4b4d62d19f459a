"""
Cart aggregator - the user's per-restaurant carts as one view.

The API keeps one open cart per restaurant. This service holds the last
fetched list for one Telegram user, runs every mutation through the API and
then reloads the whole list; no local patching of items.

Mutations of one aggregator are serialized by an asyncio lock, so rapid
quantity taps are applied in tap order.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any

from app.core.auth_context import AuthContext
from app.core.constants import MIN_QUANTITY, NOTES_MAX_LENGTH
from app.core.events import SignalStore, SignalType
from app.core.exceptions import (
    ApiError,
    ApiUnavailable,
    AuthenticationRequired,
    ConfirmationRequired,
    EmptyCartError,
    NotesTooLong,
    SessionExpired,
    ValidationException,
)
from app.domain.cart import Cart, CartItem
from logging_config import logger


def clean_notes(text: str | None, limit: int = NOTES_MAX_LENGTH) -> str | None:
    """Trim notes; empty becomes None, over ``limit`` characters is rejected."""
    value = (text or "").strip()
    if len(value) > limit:
        raise NotesTooLong(len(value), limit)
    return value or None


class CartAggregator:
    """All open carts of one user, kept in sync with the API."""

    def __init__(
        self,
        user_id: int,
        api: Any,
        auth: AuthContext,
        signals: SignalStore,
    ) -> None:
        self.user_id = user_id
        self.api = api
        self.auth = auth
        self.signals = signals

        self.carts: list[Cart] = []
        self.is_loading = False
        self.is_updating = False
        self.clear_confirm_open = False

        self._lock = asyncio.Lock()
        self._emitting = False
        self._unsubscribers = [
            signals.subscribe(SignalType.CART_CHANGED, self._on_cart_changed, user_id),
            signals.subscribe(SignalType.LOGGED_IN, self._on_logged_in, user_id),
            signals.subscribe(SignalType.LOGGED_OUT, self._on_logged_out, user_id),
        ]

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @property
    def carts_with_items(self) -> list[Cart]:
        return [cart for cart in self.carts if not cart.is_empty]

    @property
    def total_item_count(self) -> int:
        return sum(cart.item_count for cart in self.carts_with_items)

    @property
    def total_price(self) -> Decimal:
        return sum((cart.total_price for cart in self.carts_with_items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.carts_with_items

    def find_item(self, item_id: int) -> CartItem | None:
        for cart in self.carts:
            item = cart.find_item(item_id)
            if item is not None:
                return item
        return None

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> list[Cart]:
        """Replace the cart list with the API's current state.

        No token clears the list. An API error keeps the previous list;
        a request that never completed resets it to empty.
        """
        token = self.auth.token(self.user_id)
        if not token:
            self.carts = []
            return self.carts

        self.is_loading = True
        try:
            self.carts = await self.api.list_carts(token)
        except SessionExpired:
            await self._expire_session()
            raise
        except ApiUnavailable as e:
            logger.warning("Cart load for %s did not complete: %s", self.user_id, e)
            self.carts = []
        except ApiError as e:
            logger.warning("Cart load for %s failed: %s", self.user_id, e)
        finally:
            self.is_loading = False
        return self.carts

    def reset(self) -> None:
        self.carts = []
        self.clear_confirm_open = False
        self.is_loading = False
        self.is_updating = False

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def _mutate(self, action: str, call: Callable[[str], Awaitable[Any]]) -> None:
        """Run one API mutation under the lock, then reload."""
        token = self.auth.require_token(self.user_id)
        async with self._lock:
            self.is_updating = True
            try:
                await call(token)
            except SessionExpired:
                await self._expire_session()
                raise
            except ApiError as e:
                logger.warning("Cart %s failed for %s: %s", action, self.user_id, e)
                raise
            finally:
                self.is_updating = False
            await self.load()

    async def add_item(
        self,
        menu_id: int,
        restaurant_id: int,
        quantity: int = 1,
        notes: str | None = None,
    ) -> None:
        if not self.auth.is_authenticated(self.user_id):
            raise AuthenticationRequired()
        if quantity < MIN_QUANTITY:
            raise ValidationException(f"Quantity must be at least {MIN_QUANTITY}")
        notes_value = clean_notes(notes)

        await self._mutate(
            "add",
            lambda token: self.api.add_cart_item(
                token,
                menu_id=menu_id,
                restaurant_id=restaurant_id,
                quantity=quantity,
                notes=notes_value,
            ),
        )
        logger.info("User %s added menu %s x%s", self.user_id, menu_id, quantity)
        await self._notify(SignalType.CART_CHANGED)

    async def update_quantity(self, item_id: int, new_quantity: int) -> bool:
        """Set an item's quantity. Below 1 is ignored and returns False."""
        if new_quantity < MIN_QUANTITY:
            return False
        await self._mutate(
            "quantity update",
            lambda token: self.api.update_cart_item_quantity(token, item_id, new_quantity),
        )
        return True

    async def remove_item(self, item_id: int) -> None:
        await self._mutate("remove", lambda token: self.api.remove_cart_item(token, item_id))

    async def update_notes(self, item_id: int, text: str | None) -> None:
        notes_value = clean_notes(text)
        await self._mutate(
            "notes update",
            lambda token: self.api.update_cart_item_notes(token, item_id, notes_value),
        )

    def request_clear_all(self) -> None:
        self.clear_confirm_open = True

    def cancel_clear_all(self) -> None:
        self.clear_confirm_open = False

    async def clear_all(self) -> None:
        """Empty every cart. Only allowed while the confirmation is open."""
        if not self.clear_confirm_open:
            raise ConfirmationRequired("Clearing the cart needs confirmation")
        await self._mutate("clear", self.api.clear_cart)
        self.clear_confirm_open = False

    async def checkout(self, notes: str | None = None) -> int:
        """Create an order from all carts and return its id.

        The local list is emptied as soon as the order exists. The follow-up
        cart clear is best effort.
        """
        if self.is_empty:
            raise EmptyCartError()
        token = self.auth.require_token(self.user_id)
        notes_value = (notes or "").strip() or None

        async with self._lock:
            self.is_updating = True
            try:
                order_id = await self.api.create_order(token, notes_value)
            except SessionExpired:
                await self._expire_session()
                raise
            except ApiError as e:
                logger.warning("Checkout failed for %s: %s", self.user_id, e)
                raise
            finally:
                self.is_updating = False
            self.carts = []
            self.clear_confirm_open = False

        logger.info("User %s checked out order %s", self.user_id, order_id)
        await self._notify(SignalType.CART_CHANGED)

        try:
            await self.api.clear_cart(token)
        except (ApiError, SessionExpired) as e:
            logger.warning("Cart clear after checkout failed for %s: %s", self.user_id, e)
        return order_id

    # =========================================================================
    # SIGNALS
    # =========================================================================

    async def _notify(self, signal: SignalType) -> None:
        self._emitting = True
        try:
            await self.signals.emit(signal, self.user_id)
        finally:
            self._emitting = False

    async def _on_cart_changed(self, user_id: int) -> None:
        if self._emitting:
            return
        await self.load()

    async def _on_logged_in(self, user_id: int) -> None:
        await self.load()

    async def _on_logged_out(self, user_id: int) -> None:
        self.reset()

    async def _expire_session(self) -> None:
        logger.info("Session expired for %s during cart call", self.user_id)
        await self.auth.clear_session(self.user_id)

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []


class CartRegistry:
    """Lazily created aggregator per Telegram user."""

    def __init__(self, api: Any, auth: AuthContext, signals: SignalStore) -> None:
        self.api = api
        self.auth = auth
        self.signals = signals
        self._aggregators: dict[int, CartAggregator] = {}
        signals.subscribe(SignalType.LOGGED_OUT, self._on_logged_out)

    def get(self, user_id: int) -> CartAggregator:
        aggregator = self._aggregators.get(user_id)
        if aggregator is None:
            aggregator = CartAggregator(user_id, self.api, self.auth, self.signals)
            self._aggregators[user_id] = aggregator
        return aggregator

    def drop(self, user_id: int) -> None:
        aggregator = self._aggregators.pop(user_id, None)
        if aggregator is not None:
            aggregator.close()

    async def _on_logged_out(self, user_id: int) -> None:
        self.drop(user_id)

    def __len__(self) -> int:
        return len(self._aggregators)
