"""Restaurant list, menu list and the per-menu add dialog keyboards."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.core.constants import MAX_QUANTITY, MIN_QUANTITY, RESTAURANTS_PER_PAGE
from app.core.utils import format_price, short_title
from app.domain.entities import Restaurant
from app.keyboards.common import pagination_row
from app.services.menu_service import MenuItemView
from localization import get_text


def restaurants_keyboard(
    restaurants: list[Restaurant], page: int = 0, lang: str = "id"
) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    pages = max((len(restaurants) + RESTAURANTS_PER_PAGE - 1) // RESTAURANTS_PER_PAGE, 1)
    page = min(max(page, 0), pages - 1)
    chunk = restaurants[page * RESTAURANTS_PER_PAGE : (page + 1) * RESTAURANTS_PER_PAGE]

    for restaurant in chunk:
        title = short_title(restaurant.name)
        if not restaurant.is_open:
            title = f"{title} · {get_text(lang, 'restaurant_closed')}"
        builder.button(text=title, callback_data=f"rest_{restaurant.id}")

    nav = pagination_row(builder, "rest_page", page, pages, lang)
    builder.adjust(*([1] * len(chunk)), *([nav] if nav else []))
    return builder.as_markup()


def restaurant_menu_keyboard(restaurant: Restaurant, lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for menu in restaurant.menus:
        label = f"{short_title(menu.name)} · {format_price(menu.price)}"
        if not menu.is_available:
            label = f"🚫 {label}"
        builder.button(text=label, callback_data=f"menu_open_{restaurant.id}_{menu.id}")
    builder.button(text=get_text(lang, "back"), callback_data="rest_page_0")
    builder.adjust(1)
    return builder.as_markup()


def menu_item_keyboard(
    restaurant_id: int, menu_id: int, view: MenuItemView, lang: str = "id"
) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    ids = f"{restaurant_id}_{menu_id}"

    builder.button(
        text="➖" if view.quantity > MIN_QUANTITY else "·", callback_data=f"menu_dec_{ids}"
    )
    builder.button(text=str(view.quantity), callback_data="noop")
    builder.button(
        text="➕" if view.quantity < MAX_QUANTITY else "·", callback_data=f"menu_inc_{ids}"
    )
    builder.button(text=get_text(lang, "btn_item_notes"), callback_data=f"menu_notes_{ids}")
    builder.button(text=get_text(lang, "btn_add_to_cart"), callback_data=f"menu_add_{ids}")
    builder.button(text=get_text(lang, "btn_close"), callback_data=f"menu_close_{ids}")
    builder.adjust(3, 1, 1, 1)
    return builder.as_markup()
