"""Restaurant/menu browsing and the per-menu "add to cart" dialog state."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any

from app.core.constants import MAX_QUANTITY, MIN_QUANTITY
from app.core.exceptions import ApiError
from app.domain.entities import Menu, Restaurant
from app.services.cart_service import clean_notes
from logging_config import logger


@dataclass
class MenuItemView:
    """Dialog state for one menu entry."""

    open: bool = False
    quantity: int = MIN_QUANTITY
    notes: str | None = None

    def subtotal(self, price: Decimal) -> Decimal:
        return price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MenuItemView:
        data = data or {}
        return cls(
            open=bool(data.get("open", False)),
            quantity=max(int(data.get("quantity", MIN_QUANTITY) or MIN_QUANTITY), MIN_QUANTITY),
            notes=data.get("notes") or None,
        )


class MenuDialogs:
    """Map of menu id -> MenuItemView.

    Serializable to a plain dict so it can live in aiogram FSM data.
    """

    def __init__(self, views: dict[int, MenuItemView] | None = None) -> None:
        self.views: dict[int, MenuItemView] = views or {}

    def get(self, menu_id: int) -> MenuItemView:
        return self.views.get(menu_id) or MenuItemView()

    def open(self, menu_id: int) -> MenuItemView:
        view = MenuItemView(open=True)
        self.views[menu_id] = view
        return view

    def close(self, menu_id: int) -> None:
        self.views.pop(menu_id, None)

    def change_quantity(self, menu_id: int, delta: int) -> MenuItemView:
        view = self.get(menu_id)
        view.quantity = min(max(view.quantity + delta, MIN_QUANTITY), MAX_QUANTITY)
        self.views[menu_id] = view
        return view

    def set_notes(self, menu_id: int, text: str | None) -> MenuItemView:
        view = self.get(menu_id)
        view.notes = clean_notes(text)
        self.views[menu_id] = view
        return view

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {str(menu_id): view.to_dict() for menu_id, view in self.views.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MenuDialogs:
        views: dict[int, MenuItemView] = {}
        for key, raw in (data or {}).items():
            try:
                views[int(key)] = MenuItemView.from_dict(raw)
            except (TypeError, ValueError):
                continue
        return cls(views)


class MenuService:
    """Read-only restaurant catalogue."""

    def __init__(self, api: Any) -> None:
        self.api = api

    async def list_restaurants(self, token: str | None = None) -> list[Restaurant]:
        return await self.api.list_restaurants(token)

    async def get_restaurant(self, restaurant_id: int, token: str | None = None) -> Restaurant:
        return await self.api.get_restaurant(restaurant_id, token=token)

    async def find_menu(
        self, restaurant_id: int, menu_id: int, token: str | None = None
    ) -> tuple[Restaurant | None, Menu | None]:
        try:
            restaurant = await self.get_restaurant(restaurant_id, token)
        except ApiError as e:
            logger.warning("Restaurant %s lookup failed: %s", restaurant_id, e)
            return None, None
        return restaurant, restaurant.find_menu(menu_id)
