"""Order history keyboards."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.core.constants import ORDERS_PER_PAGE
from app.core.utils import format_price
from app.domain.order import Order
from app.keyboards.common import pagination_row
from localization import get_text


def orders_keyboard(orders: list[Order], page: int = 0, lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    pages = max((len(orders) + ORDERS_PER_PAGE - 1) // ORDERS_PER_PAGE, 1)
    page = min(max(page, 0), pages - 1)
    chunk = orders[page * ORDERS_PER_PAGE : (page + 1) * ORDERS_PER_PAGE]

    for order in chunk:
        badge = get_text(lang, f"status_{order.status}").split(" ", 1)[0]
        builder.button(
            text=get_text(
                lang,
                "order_line",
                badge=badge,
                code=order.order_code or order.id,
                total=format_price(order.total_price),
            ),
            callback_data=f"order_{order.id}",
        )
    nav = pagination_row(builder, "orders_page", page, pages, lang)
    builder.adjust(*([1] * len(chunk)), *([nav] if nav else []))
    return builder.as_markup()


def order_detail_keyboard(order: Order, lang: str = "id") -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    if order.is_pending:
        builder.button(text=get_text(lang, "btn_pay"), callback_data=f"pay_open_{order.id}")
    builder.button(text=get_text(lang, "back"), callback_data="orders_page_0")
    builder.adjust(1)
    return builder.as_markup()
