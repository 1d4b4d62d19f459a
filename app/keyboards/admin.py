"""Admin payment verification keyboards."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.core.constants import ORDERS_PER_PAGE
from app.domain.order import Payment
from app.keyboards.common import pagination_row
from localization import get_text


def payments_keyboard(
    payments: list[Payment], page: int = 0, lang: str = "id"
) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    pages = max((len(payments) + ORDERS_PER_PAGE - 1) // ORDERS_PER_PAGE, 1)
    page = min(max(page, 0), pages - 1)
    chunk = payments[page * ORDERS_PER_PAGE : (page + 1) * ORDERS_PER_PAGE]

    for payment in chunk:
        code = payment.order.order_code if payment.order else payment.order_id
        builder.button(
            text=get_text(
                lang,
                "admin_payment_line",
                id=payment.id,
                code=code,
                method=get_text(lang, f"method_{payment.payment_method}"),
            ),
            callback_data=f"adm_payment_{payment.id}",
        )
    nav = pagination_row(builder, "adm_payments", page, pages, lang)
    builder.adjust(*([1] * len(chunk)), *([nav] if nav else []))
    return builder.as_markup()


def payment_decision_keyboard(payment: Payment, lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    if payment.is_pending:
        builder.button(
            text=get_text(lang, "btn_confirm_payment"), callback_data=f"adm_confirm_{payment.id}"
        )
        builder.button(
            text=get_text(lang, "btn_reject_payment"), callback_data=f"adm_reject_{payment.id}"
        )
    builder.button(text=get_text(lang, "back"), callback_data="adm_payments_0")
    if payment.is_pending:
        builder.adjust(2, 1)
    else:
        builder.adjust(1)
    return builder.as_markup()
