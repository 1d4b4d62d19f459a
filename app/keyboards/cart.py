"""Cart panel keyboards."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.core.constants import MAX_INLINE_BUTTONS
from app.core.utils import short_title
from app.domain.cart import Cart
from localization import get_text

ACTION_BUTTONS = 2


def cart_keyboard(carts: list[Cart], lang: str = "id") -> InlineKeyboardMarkup:
    """One title row and one ➖ qty ➕ 📝 🗑 row per item, then cart actions.

    Long carts drop the title rows and put the name on the quantity button;
    items that still do not fit under Telegram's button limit get no controls.
    """
    builder = InlineKeyboardBuilder()
    rows: list[int] = []

    items = [item for cart in carts for item in cart.items]
    compact = len(items) * 6 + ACTION_BUTTONS > MAX_INLINE_BUTTONS
    if compact:
        items = items[: (MAX_INLINE_BUTTONS - ACTION_BUTTONS) // 5]

    for item in items:
        if compact:
            quantity = f"{short_title(item.name, 12)} ×{item.quantity}"
        else:
            builder.button(text=short_title(item.name), callback_data="noop")
            rows.append(1)
            quantity = str(item.quantity)
        builder.button(text="➖", callback_data=f"cart_dec_{item.id}")
        builder.button(text=quantity, callback_data="noop")
        builder.button(text="➕", callback_data=f"cart_inc_{item.id}")
        builder.button(text="📝", callback_data=f"cart_notes_{item.id}")
        builder.button(text="🗑", callback_data=f"cart_rm_{item.id}")
        rows.append(5)

    builder.button(text=get_text(lang, "btn_checkout"), callback_data="cart_checkout")
    builder.button(text=get_text(lang, "btn_clear_cart"), callback_data="cart_clear")
    rows.append(ACTION_BUTTONS)
    builder.adjust(*rows)
    return builder.as_markup()


def clear_confirm_keyboard(lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=get_text(lang, "btn_clear_yes"), callback_data="cart_clear_yes")
    builder.button(text=get_text(lang, "btn_clear_no"), callback_data="cart_clear_no")
    builder.adjust(2)
    return builder.as_markup()


def empty_cart_keyboard(lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=get_text(lang, "btn_restaurants"), callback_data="rest_page_0")
    return builder.as_markup()
