"""Cart domain types parsed from the cart API payloads."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from app.core.utils import to_bool, to_decimal, to_int


@dataclass(frozen=True)
class MenuSummary:
    """Menu entry as embedded in cart and order items. Read-only."""

    id: int
    restaurant_id: int
    name: str
    price: Decimal
    image: str | None = None
    is_available: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MenuSummary:
        data = data or {}
        return cls(
            id=to_int(data.get("id")),
            restaurant_id=to_int(data.get("restaurant_id")),
            name=str(data.get("name") or ""),
            price=to_decimal(data.get("price")),
            image=data.get("image"),
            is_available=to_bool(data.get("is_available", True)),
        )


@dataclass(frozen=True)
class RestaurantSummary:
    id: int
    name: str
    address: str = ""
    description: str = ""
    is_open: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RestaurantSummary:
        return cls(
            id=to_int(data.get("id")),
            name=str(data.get("name") or ""),
            address=str(data.get("address") or ""),
            description=str(data.get("description") or ""),
            is_open=to_bool(data.get("is_open", True)),
        )


@dataclass
class CartItem:
    """Single line in a restaurant cart."""

    id: int
    cart_id: int
    menu_id: int
    quantity: int
    unit_price: Decimal
    menu: MenuSummary
    notes: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def name(self) -> str:
        return self.menu.name or f"Menu {self.menu_id}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartItem:
        menu = MenuSummary.from_dict(data.get("menu"))
        return cls(
            id=to_int(data.get("id")),
            cart_id=to_int(data.get("cart_id")),
            menu_id=to_int(data.get("menu_id"), menu.id),
            quantity=max(to_int(data.get("quantity"), 1), 1),
            unit_price=to_decimal(data.get("price"), menu.price),
            menu=menu,
            notes=data.get("notes") or None,
        )


@dataclass
class Cart:
    """One open cart per restaurant for the signed-in user."""

    id: int
    user_id: int
    restaurant_id: int
    items: list[CartItem] = field(default_factory=list)
    restaurant: RestaurantSummary | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def display_name(self) -> str:
        if self.restaurant and self.restaurant.name:
            return self.restaurant.name
        return f"Restaurant {self.restaurant_id}"

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    def find_item(self, item_id: int) -> CartItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cart:
        restaurant = data.get("restaurant")
        return cls(
            id=to_int(data.get("id")),
            user_id=to_int(data.get("user_id")),
            restaurant_id=to_int(data.get("restaurant_id")),
            items=[CartItem.from_dict(item) for item in data.get("items") or []],
            restaurant=RestaurantSummary.from_dict(restaurant) if restaurant else None,
        )
