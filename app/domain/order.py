"""Order and payment domain types."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.core.utils import parse_datetime, to_decimal, to_int
from app.domain.cart import MenuSummary
from app.domain.value_objects import OrderStatus, PaymentMethod, PaymentStatus


@dataclass
class OrderItem:
    id: int
    order_id: int
    menu_id: int
    quantity: int
    unit_price: Decimal
    menu: MenuSummary
    notes: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def restaurant_id(self) -> int:
        return self.menu.restaurant_id

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OrderItem:
        menu = MenuSummary.from_dict(data.get("menu"))
        return cls(
            id=to_int(data.get("id")),
            order_id=to_int(data.get("order_id")),
            menu_id=to_int(data.get("menu_id"), menu.id),
            quantity=to_int(data.get("quantity"), 1),
            unit_price=to_decimal(data.get("price"), menu.price),
            menu=menu,
            notes=data.get("notes") or None,
        )


@dataclass
class Order:
    """Immutable record created from the user's carts at checkout."""

    id: int
    order_code: str
    user_id: int
    restaurant_id: int
    total_price: Decimal
    status: str
    items: list[OrderItem] = field(default_factory=list)
    notes: str | None = None
    created_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    @property
    def is_cancelable(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    def items_by_restaurant(self) -> dict[int, list[OrderItem]]:
        """Group items by the restaurant of their menu, keeping API order."""
        grouped: dict[int, list[OrderItem]] = {}
        for item in self.items:
            grouped.setdefault(item.restaurant_id or self.restaurant_id, []).append(item)
        return grouped

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        items = [OrderItem.from_dict(item) for item in data.get("items") or []]
        total = data.get("total_price")
        return cls(
            id=to_int(data.get("id")),
            order_code=str(data.get("order_code") or ""),
            user_id=to_int(data.get("user_id")),
            restaurant_id=to_int(data.get("restaurant_id")),
            total_price=(
                to_decimal(total)
                if total is not None
                else sum((item.subtotal for item in items), Decimal("0"))
            ),
            status=OrderStatus.normalize(data.get("status")),
            items=items,
            notes=data.get("notes") or None,
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass
class Payment:
    """Customer-submitted payment confirmation awaiting admin verification."""

    id: int
    order_id: int
    payment_method: str
    payment_status: str
    proof_image: str | None = None
    transaction_id: str | None = None
    paid_at: datetime | None = None
    notes: str | None = None
    order: Order | None = None

    @property
    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING.value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Payment:
        order = data.get("order")
        return cls(
            id=to_int(data.get("id")),
            order_id=to_int(data.get("order_id")),
            payment_method=PaymentMethod.normalize(data.get("payment_method")),
            payment_status=str(data.get("payment_status") or PaymentStatus.PENDING.value),
            proof_image=data.get("proof_image"),
            transaction_id=data.get("transaction_id"),
            paid_at=parse_datetime(data.get("paid_at")),
            notes=data.get("notes") or None,
            order=Order.from_dict(order) if isinstance(order, dict) else None,
        )
