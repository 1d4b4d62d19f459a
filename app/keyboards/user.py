"""Customer main menu keyboard."""
from __future__ import annotations

from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from localization import get_text


def main_menu_customer(
    lang: str = "id",
    cart_count: int = 0,
    logged_in: bool = False,
    is_staff: bool = False,
) -> ReplyKeyboardMarkup:
    """Main menu; the cart button shows the item count.

    Args:
        lang: Interface language
        cart_count: Total quantity in all carts
        logged_in: Show logout instead of login
        is_staff: Add the payment verification entry for admins
    """
    builder = ReplyKeyboardBuilder()

    # Row 1: browse + cart
    builder.button(text=get_text(lang, "btn_restaurants"))
    cart_text = get_text(lang, "btn_cart")
    if cart_count > 0:
        cart_text = f"{cart_text} ({cart_count})"
    builder.button(text=cart_text)

    # Row 2: orders + pay now
    builder.button(text=get_text(lang, "btn_orders"))
    builder.button(text=get_text(lang, "btn_pay_now"))

    # Row 3: account
    rows = [2, 2]
    if is_staff:
        builder.button(text=get_text(lang, "btn_admin_payments"))
        rows.append(1)
    builder.button(text=get_text(lang, "btn_logout" if logged_in else "btn_login"))
    builder.button(text=get_text(lang, "btn_language"))
    rows.append(2)

    builder.adjust(*rows)
    return builder.as_markup(resize_keyboard=True)
