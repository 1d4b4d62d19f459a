"""Restaurant and menu entities used by the browsing screens."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Menu(BaseModel):
    """Menu entry as listed under a restaurant."""

    model_config = ConfigDict(extra="ignore")

    id: int
    restaurant_id: int = 0
    name: str
    price: Decimal = Field(Decimal("0"), ge=0)
    image: str | None = None
    description: str | None = None
    is_available: bool = True

    @field_validator("is_available", mode="before")
    @classmethod
    def coerce_flag(cls, v: object) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes"}
        return bool(v)


class Restaurant(BaseModel):
    """Restaurant with its menus (menus only present on detail responses)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    area_id: int | None = None
    address: str = ""
    description: str = ""
    is_open: bool = True
    menus: list[Menu] = Field(default_factory=list)

    @field_validator("is_open", mode="before")
    @classmethod
    def coerce_flag(cls, v: object) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes"}
        return bool(v)

    @field_validator("address", "description", mode="before")
    @classmethod
    def blank_text(cls, v: object) -> str:
        return "" if v is None else str(v)

    def find_menu(self, menu_id: int) -> Menu | None:
        return next((menu for menu in self.menus if menu.id == menu_id), None)
