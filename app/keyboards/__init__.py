"""Keyboards package - centralized keyboard management.

Usage:
    from app.keyboards import (
        # Common
        language_keyboard,
        cancel_keyboard,

        # Customer
        main_menu_customer,
        restaurants_keyboard,
        cart_keyboard,
        checkout_keyboard,
        orders_keyboard,

        # Admin
        payments_keyboard,
    )
"""

# Common keyboards
from .common import cancel_keyboard, language_keyboard, pagination_row, skip_cancel_keyboard

# Customer keyboards
from .user import main_menu_customer
from .menu import menu_item_keyboard, restaurant_menu_keyboard, restaurants_keyboard
from .cart import cart_keyboard, clear_confirm_keyboard, empty_cart_keyboard
from .checkout import (
    cancel_order_confirm_keyboard,
    checkout_keyboard,
    payment_submitted_keyboard,
    proof_cancel_keyboard,
)
from .orders import order_detail_keyboard, orders_keyboard

# Admin keyboards
from .admin import payment_decision_keyboard, payments_keyboard

__all__ = [
    # Common
    "language_keyboard",
    "cancel_keyboard",
    "skip_cancel_keyboard",
    "pagination_row",
    # Customer
    "main_menu_customer",
    "restaurants_keyboard",
    "restaurant_menu_keyboard",
    "menu_item_keyboard",
    "cart_keyboard",
    "clear_confirm_keyboard",
    "empty_cart_keyboard",
    "checkout_keyboard",
    "cancel_order_confirm_keyboard",
    "proof_cancel_keyboard",
    "payment_submitted_keyboard",
    "orders_keyboard",
    "order_detail_keyboard",
    # Admin
    "payments_keyboard",
    "payment_decision_keyboard",
]
