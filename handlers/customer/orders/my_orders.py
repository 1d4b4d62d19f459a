"""
My orders: history list, detail grouped by restaurant, and the "Pay now"
shortcut to the newest pending order.
"""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from app.core.exceptions import KantinException
from app.core.utils import esc, format_datetime, format_price, parse_callback_id
from app.domain.order import Order
from app.keyboards import order_detail_keyboard, orders_keyboard
from handlers.common import utils
from handlers.common.utils import button, get_lang, report_error, show_screen
from handlers.customer.payment_proof import open_checkout
from localization import get_text

router = Router(name="my_orders")


def order_detail_text(order: Order, lang: str) -> str:
    lines = [
        get_text(
            lang,
            "order_detail",
            code=esc(order.order_code or order.id),
            status=get_text(lang, f"status_{order.status}"),
            date=format_datetime(order.created_at),
        )
    ]
    for restaurant_id, items in order.items_by_restaurant().items():
        lines.append(get_text(lang, "checkout_group_header", name=f"#{restaurant_id}"))
        for item in items:
            lines.append(
                get_text(
                    lang,
                    "checkout_item_line",
                    name=esc(item.menu.name or f"Menu {item.menu_id}"),
                    quantity=item.quantity,
                    subtotal=format_price(item.subtotal),
                )
            )
            if item.notes:
                lines.append(f"   <i>{esc(item.notes)}</i>")
    lines.append(get_text(lang, "checkout_total", total=format_price(order.total_price)))
    if order.notes:
        lines.append(get_text(lang, "order_notes", notes=esc(order.notes)))
    return "\n".join(lines)


def latest_pending(orders: list[Order]) -> Order | None:
    pending = [order for order in orders if order.is_pending]
    if not pending:
        return None
    return max(pending, key=lambda order: order.id)


async def _load_orders(
    event: types.Message | types.CallbackQuery, state: FSMContext
) -> list[Order] | None:
    user_id = event.from_user.id
    container = utils.get_deps()
    try:
        token = container.auth.require_token(user_id)
        return await container.api.list_orders(token)
    except KantinException as e:
        await report_error(event, get_lang(user_id), e, state)
        return None


async def show_orders(
    event: types.Message | types.CallbackQuery, state: FSMContext, page: int = 0
) -> None:
    orders = await _load_orders(event, state)
    if orders is None:
        return
    lang = get_lang(event.from_user.id)
    if not orders:
        await show_screen(event, get_text(lang, "orders_empty"))
        return
    await show_screen(
        event, get_text(lang, "orders_title"), reply_markup=orders_keyboard(orders, page, lang)
    )


@router.message(Command("orders"))
@router.message(button("btn_orders"))
async def my_orders(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    await state.set_state(None)
    await show_orders(message, state)


@router.callback_query(F.data.startswith("orders_page_"))
async def orders_page(callback: types.CallbackQuery, state: FSMContext) -> None:
    await show_orders(callback, state, parse_callback_id(callback.data) or 0)


@router.callback_query(F.data.regexp(r"^order_\d+$"))
async def order_detail(callback: types.CallbackQuery, state: FSMContext) -> None:
    order_id = parse_callback_id(callback.data)
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    container = utils.get_deps()
    try:
        token = container.auth.require_token(user_id)
        order = await container.api.get_order(token, int(order_id or 0))
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return
    await show_screen(
        callback, order_detail_text(order, lang), reply_markup=order_detail_keyboard(order, lang)
    )


@router.message(button("btn_pay_now"))
async def pay_now(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    await state.set_state(None)
    orders = await _load_orders(message, state)
    if orders is None:
        return
    order = latest_pending(orders)
    if order is None:
        await message.answer(get_text(get_lang(message.from_user.id), "no_payment_waiting"))
        return
    await open_checkout(message, message.from_user.id, order.id, state)
