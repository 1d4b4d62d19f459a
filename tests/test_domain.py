"""Tests for parsing API payloads into domain types."""
from __future__ import annotations

from decimal import Decimal

from app.domain.cart import Cart
from app.domain.entities import Restaurant, User
from app.domain.order import Order, Payment
from conftest import make_cart, make_item, make_order, make_payment


def test_cart_item_price_falls_back_to_menu() -> None:
    raw = make_item(1, 10, "12000")
    del raw["price"]

    cart = Cart.from_dict(make_cart(1, 1, [raw], name="Warung Bu Tini"))

    assert cart.items[0].unit_price == Decimal("12000")
    assert cart.display_name == "Warung Bu Tini"
    assert cart.total_price == Decimal("12000")


def test_cart_without_restaurant_uses_id() -> None:
    raw = make_cart(1, 4, [])
    del raw["restaurant"]

    assert Cart.from_dict(raw).display_name == "Restaurant 4"


def test_order_groups_items_by_restaurant() -> None:
    order = Order.from_dict(make_order())

    grouped = order.items_by_restaurant()

    assert list(grouped) == [1, 2]
    assert order.total_price == Decimal("80000.00")
    assert order.is_pending


def test_order_total_computed_when_missing() -> None:
    raw = make_order()
    del raw["total_price"]

    assert Order.from_dict(raw).total_price == Decimal("80000")


def test_cancelled_spelling_is_normalized() -> None:
    order = Order.from_dict(make_order(status="Cancelled"))

    assert order.status == "canceled"
    assert not order.is_cancelable


def test_payment_with_nested_order() -> None:
    payment = Payment.from_dict(make_payment(method="transfer"))

    assert payment.payment_method == "bank_transfer"
    assert payment.is_pending
    assert payment.order is not None and payment.order.order_code == "ORD-55"


def test_restaurant_flags_and_staff_roles() -> None:
    restaurant = Restaurant.model_validate({"id": 1, "name": "Kedai", "is_open": "0", "address": None})
    admin = User.model_validate({"id": 1, "role": "admin"})
    customer = User.model_validate({"id": 2, "email": "a@b.c"})

    assert restaurant.is_open is False
    assert restaurant.address == ""
    assert admin.is_staff
    assert not customer.is_staff
    assert customer.display_name == "a@b.c"
