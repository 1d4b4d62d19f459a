"""Checkout confirmation keyboards."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.domain.value_objects import PaymentMethod
from localization import get_text


def checkout_keyboard(payment_method: str, lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for method in PaymentMethod.customer_choices():
        label = get_text(lang, f"method_{method.value}")
        if method.value == payment_method:
            label = f"● {label}"
        builder.button(text=label, callback_data=f"pay_method_{method.value}")
    builder.button(text=get_text(lang, "btn_attach_proof"), callback_data="pay_proof")
    builder.button(text=get_text(lang, "btn_pay_notes"), callback_data="pay_notes")
    builder.button(text=get_text(lang, "btn_submit_payment"), callback_data="pay_submit")
    builder.button(text=get_text(lang, "btn_cancel_order"), callback_data="pay_cancel")
    builder.adjust(2, 2, 1, 1)
    return builder.as_markup()


def cancel_order_confirm_keyboard(lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=get_text(lang, "btn_cancel_order_yes"), callback_data="pay_cancel_yes")
    builder.button(text=get_text(lang, "back"), callback_data="pay_back")
    builder.adjust(2)
    return builder.as_markup()


def proof_cancel_keyboard(lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=get_text(lang, "cancel"), callback_data="pay_back")
    return builder.as_markup()


def payment_submitted_keyboard(lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=get_text(lang, "btn_view_orders"), callback_data="orders_page_0")
    return builder.as_markup()
