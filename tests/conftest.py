"""Shared pytest fixtures: in-memory API double, session store, services."""
from __future__ import annotations

import json
import os
from decimal import Decimal
from typing import Any

import pytest

from app.core.exceptions import NotFoundError
from app.domain.cart import Cart
from app.domain.entities import Restaurant
from app.domain.order import Order, Payment

os.environ.setdefault("TELEGRAM_BOT_TOKEN", "TEST_TOKEN")

USER_ID = 1001
NOW_MS = 1_700_000_000_000


def make_item(
    item_id: int,
    menu_id: int,
    price: str | int,
    quantity: int = 1,
    *,
    restaurant_id: int = 1,
    cart_id: int = 1,
    name: str | None = None,
    notes: str | None = None,
) -> dict[str, Any]:
    return {
        "id": item_id,
        "cart_id": cart_id,
        "menu_id": menu_id,
        "quantity": quantity,
        "price": str(price),
        "notes": notes,
        "menu": {
            "id": menu_id,
            "restaurant_id": restaurant_id,
            "name": name or f"Menu {menu_id}",
            "price": str(price),
        },
    }


def make_cart(cart_id: int, restaurant_id: int, items: list[dict[str, Any]], name: str = "") -> dict[str, Any]:
    return {
        "id": cart_id,
        "user_id": 7,
        "restaurant_id": restaurant_id,
        "items": items,
        "restaurant": {"id": restaurant_id, "name": name or f"Resto {restaurant_id}"},
    }


def make_order(
    order_id: int = 55,
    status: str = "pending",
    items: list[dict[str, Any]] | None = None,
    total: str = "80000.00",
) -> dict[str, Any]:
    if items is None:
        items = [
            make_item(1, 10, "25000", 2, restaurant_id=1),
            make_item(2, 20, "30000", 1, restaurant_id=2),
        ]
    return {
        "id": order_id,
        "order_code": f"ORD-{order_id}",
        "user_id": 7,
        "restaurant_id": 1,
        "total_price": total,
        "status": status,
        "notes": None,
        "items": items,
        "created_at": "2024-05-01T10:00:00Z",
    }


def make_payment(payment_id: int = 9, status: str = "pending", method: str = "qris") -> dict[str, Any]:
    return {
        "id": payment_id,
        "order_id": 55,
        "payment_method": method,
        "payment_status": status,
        "proof_image": "proofs/9.jpg",
        "order": make_order(55),
    }


class FakeKantinApi:
    """In-memory stand-in for ``KantinApiClient``.

    Keeps raw API payloads, records every call as ``(name, kwargs)`` and
    raises whatever exception is registered in ``fail`` for a method name.
    """

    def __init__(self) -> None:
        self.carts: list[dict[str, Any]] = []
        self.orders: dict[int, dict[str, Any]] = {}
        self.restaurants: dict[int, dict[str, Any]] = {}
        self.payments: dict[int, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail: dict[str, Exception] = {}
        self.next_item_id = 100
        self.next_order_id = 500
        self.login_data: dict[str, Any] = {
            "token": "tok-123",
            "expires_in": 3600,
            "user": {"id": 7, "name": "Sari", "email": "sari@kampus.ac.id", "role": "user"},
        }

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))
        if name in self.fail:
            raise self.fail[name]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _find_item(self, item_id: int) -> dict[str, Any] | None:
        for cart in self.carts:
            for item in cart["items"]:
                if item["id"] == item_id:
                    return item
        return None

    # auth
    async def login(self, email: str, password: str) -> dict[str, Any]:
        self._record("login", email=email, password=password)
        return json.loads(json.dumps(self.login_data))

    async def logout(self, token: str) -> None:
        self._record("logout", token=token)

    # cart
    async def list_carts(self, token: str) -> list[Cart]:
        self._record("list_carts", token=token)
        return [Cart.from_dict(json.loads(json.dumps(cart))) for cart in self.carts]

    async def add_cart_item(
        self, token: str, *, menu_id: int, restaurant_id: int, quantity: int, notes: str | None
    ) -> dict[str, Any]:
        self._record(
            "add_cart_item",
            token=token,
            menu_id=menu_id,
            restaurant_id=restaurant_id,
            quantity=quantity,
            notes=notes,
        )
        cart = next((c for c in self.carts if c["restaurant_id"] == restaurant_id), None)
        if cart is None:
            cart = make_cart(len(self.carts) + 1, restaurant_id, [])
            self.carts.append(cart)
        self.next_item_id += 1
        cart["items"].append(
            make_item(
                self.next_item_id,
                menu_id,
                "10000",
                quantity,
                restaurant_id=restaurant_id,
                cart_id=cart["id"],
                notes=notes,
            )
        )
        return {"success": True}

    async def update_cart_item_quantity(self, token: str, item_id: int, quantity: int) -> None:
        self._record("update_cart_item_quantity", token=token, item_id=item_id, quantity=quantity)
        item = self._find_item(item_id)
        if item is None:
            raise NotFoundError()
        item["quantity"] = quantity

    async def update_cart_item_notes(self, token: str, item_id: int, notes: str | None) -> None:
        self._record("update_cart_item_notes", token=token, item_id=item_id, notes=notes)
        item = self._find_item(item_id)
        if item is None:
            raise NotFoundError()
        item["notes"] = notes

    async def remove_cart_item(self, token: str, item_id: int) -> None:
        self._record("remove_cart_item", token=token, item_id=item_id)
        for cart in self.carts:
            cart["items"] = [item for item in cart["items"] if item["id"] != item_id]

    async def clear_cart(self, token: str) -> None:
        self._record("clear_cart", token=token)
        self.carts = []

    # orders
    async def create_order(self, token: str, notes: str | None) -> int:
        self._record("create_order", token=token, notes=notes)
        self.next_order_id += 1
        self.orders[self.next_order_id] = make_order(self.next_order_id)
        return self.next_order_id

    async def list_orders(self, token: str) -> list[Order]:
        self._record("list_orders", token=token)
        return [Order.from_dict(order) for order in self.orders.values()]

    async def get_order(self, token: str, order_id: int) -> Order:
        self._record("get_order", token=token, order_id=order_id)
        if order_id not in self.orders:
            raise NotFoundError(f"Order {order_id} not found")
        return Order.from_dict(self.orders[order_id])

    async def cancel_order(self, token: str, order_id: int) -> None:
        self._record("cancel_order", token=token, order_id=order_id)
        self.orders[order_id]["status"] = "canceled"

    async def confirm_payment(self, token: str, order_id: int, **kwargs: Any) -> dict[str, Any]:
        self._record("confirm_payment", token=token, order_id=order_id, **kwargs)
        return {"success": True}

    # restaurants
    async def list_restaurants(self, token: str | None = None) -> list[Restaurant]:
        self._record("list_restaurants", token=token)
        return [Restaurant.model_validate(r) for r in self.restaurants.values()]

    async def get_restaurant(self, restaurant_id: int, token: str | None = None) -> Restaurant:
        self._record("get_restaurant", restaurant_id=restaurant_id, token=token)
        if restaurant_id not in self.restaurants:
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        return Restaurant.model_validate(self.restaurants[restaurant_id])

    # admin payments
    async def admin_list_payments(self, token: str, per_page: int = 100) -> list[Payment]:
        self._record("admin_list_payments", token=token, per_page=per_page)
        return [Payment.from_dict(p) for p in self.payments.values()]

    async def admin_get_payment(self, token: str, payment_id: int) -> Payment:
        self._record("admin_get_payment", token=token, payment_id=payment_id)
        if payment_id not in self.payments:
            raise NotFoundError(f"Payment {payment_id} not found")
        return Payment.from_dict(self.payments[payment_id])

    async def admin_confirm_payment(self, token: str, payment_id: int) -> Payment | None:
        self._record("admin_confirm_payment", token=token, payment_id=payment_id)
        self.payments[payment_id]["payment_status"] = "completed"
        return Payment.from_dict(self.payments[payment_id])

    async def admin_reject_payment(self, token: str, payment_id: int) -> Payment | None:
        self._record("admin_reject_payment", token=token, payment_id=payment_id)
        self.payments[payment_id]["payment_status"] = "rejected"
        return None


@pytest.fixture()
def api() -> FakeKantinApi:
    return FakeKantinApi()


@pytest.fixture()
def store():
    from app.core.session_store import SessionStore

    # empty URL keeps the store in memory mode
    return SessionStore(redis_url="")


@pytest.fixture()
def signals():
    from app.core.events import SignalStore

    return SignalStore()


@pytest.fixture()
def clock():
    """Mutable fake clock in epoch milliseconds."""

    class _Clock:
        now = NOW_MS

        def __call__(self) -> int:
            return self.now

    return _Clock()


@pytest.fixture()
def auth(store, api, signals, clock):
    from app.core.auth_context import AuthContext

    return AuthContext(store, api, signals, clock=clock)


@pytest.fixture()
async def logged_in(auth):
    """Sign USER_ID in against the fake API."""
    await auth.login(USER_ID, "sari@kampus.ac.id", "secret")
    return auth


@pytest.fixture()
def cart(api, auth, signals):
    from app.services.cart_service import CartAggregator

    aggregator = CartAggregator(USER_ID, api, auth, signals)
    yield aggregator
    aggregator.close()


@pytest.fixture()
def two_restaurant_carts(api) -> FakeKantinApi:
    """R1 totals 50.000 (2 x 25.000), R2 totals 30.000 (3 x 10.000), plus an empty cart."""
    api.carts = [
        make_cart(1, 1, [make_item(11, 101, "25000", 2, restaurant_id=1, cart_id=1)]),
        make_cart(2, 2, [make_item(21, 201, "10000", 3, restaurant_id=2, cart_id=2)]),
        make_cart(3, 3, []),
    ]
    return api


@pytest.fixture()
def container(api, store, signals, auth):
    """Service container wired to the fake API, installed for handlers."""
    from app.core.bootstrap import AppContainer
    from app.core.config import ApiConfig, Settings
    from app.services.cart_service import CartRegistry
    from app.services.checkout_service import CheckoutRegistry
    from app.services.menu_service import MenuService
    from handlers.common import utils

    settings = Settings(
        bot_token="TEST_TOKEN",
        api=ApiConfig(base_url="http://kantin.test", timeout=5),
        redis_url=None,
        default_language="id",
        debug=False,
    )
    instance = AppContainer(
        settings=settings,
        api=api,
        store=store,
        signals=signals,
        auth=auth,
        carts=CartRegistry(api, auth, signals),
        checkouts=CheckoutRegistry(api, auth, signals),
        menus=MenuService(api),
    )
    previous = utils.deps
    utils.setup_dependencies(instance)
    yield instance
    utils.deps = previous


@pytest.fixture()
async def aiohttp_client():
    """Minimal aiohttp_client fixture to avoid pytest-aiohttp dependency."""
    clients: list[object] = []

    async def _make_client(app):
        from aiohttp.test_utils import TestClient, TestServer

        server = TestServer(app)
        client = TestClient(server)
        await client.start_server()
        clients.append(client)
        return client

    try:
        yield _make_client
    finally:
        for client in clients:
            await client.close()


def money(value: str | int) -> Decimal:
    return Decimal(str(value))
