"""Cart view and editing handlers.

Contains the `show_cart` helper used by other modules and every handler
that changes quantities, removes items or clears the cart.
"""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import InlineKeyboardMarkup

from app.core.exceptions import AuthenticationRequired, KantinException
from app.core.utils import esc, format_price, parse_callback_id
from app.keyboards import cart_keyboard, clear_confirm_keyboard, empty_cart_keyboard
from app.services.cart_service import CartAggregator
from handlers.common import utils
from handlers.common.utils import button, get_lang, report_error, show_screen
from localization import get_text


def build_cart_view(cart: CartAggregator, lang: str) -> tuple[str, InlineKeyboardMarkup]:
    """Cart text and keyboard; empty carts are left out."""
    carts = cart.carts_with_items
    if not carts:
        return get_text(lang, "cart_empty"), empty_cart_keyboard(lang)

    lines: list[str] = [get_text(lang, "cart_title")]
    for restaurant_cart in carts:
        lines.append(get_text(lang, "cart_restaurant_header", name=esc(restaurant_cart.display_name)))
        for item in restaurant_cart.items:
            lines.append(
                get_text(
                    lang,
                    "cart_item_line",
                    name=esc(item.name),
                    quantity=item.quantity,
                    price=format_price(item.unit_price),
                    subtotal=format_price(item.subtotal),
                )
            )
            if item.notes:
                lines.append(get_text(lang, "cart_item_notes", notes=esc(item.notes)))

    lines.append("\n" + "─" * 25)
    lines.append(
        get_text(
            lang,
            "cart_total",
            total=format_price(cart.total_price),
            count=cart.total_item_count,
        )
    )

    if cart.clear_confirm_open:
        lines.append(f"\n{get_text(lang, 'clear_confirm_text')}")
        return "\n".join(lines), clear_confirm_keyboard(lang)
    return "\n".join(lines), cart_keyboard(carts, lang)


async def show_cart(
    event: types.Message | types.CallbackQuery,
    state: FSMContext | None = None,
    reload: bool = True,
    notice: str | None = None,
) -> None:
    """Public helper to display the current cart.

    Used by local handlers and by the menu and checkout flows.
    """
    if not event.from_user:
        return
    user_id = event.from_user.id
    lang = get_lang(user_id)
    container = utils.get_deps()

    if not container.auth.token(user_id):
        await report_error(event, lang, AuthenticationRequired(), state)
        return

    cart = container.carts.get(user_id)
    if reload:
        try:
            await cart.load()
        except KantinException as e:
            await report_error(event, lang, e, state)
            return

    text, markup = build_cart_view(cart, lang)
    await show_screen(event, text, reply_markup=markup, notice=notice)


async def _run(
    callback: types.CallbackQuery,
    state: FSMContext,
    action,
    done_key: str | None = None,
) -> None:
    """Run a cart mutation, then re-render without another fetch."""
    lang = get_lang(callback.from_user.id)
    try:
        await action()
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return
    notice = get_text(lang, done_key) if done_key else None
    await show_cart(callback, state, reload=False, notice=notice)


def register(router: Router) -> None:
    """Register cart view and editing handlers on the given router."""

    @router.message(Command("cart"))
    @router.message(button("btn_cart"))
    async def show_cart_message(message: types.Message, state: FSMContext) -> None:
        await state.set_state(None)
        await show_cart(message, state)

    @router.callback_query(F.data == "cart_view")
    async def view_cart_callback(callback: types.CallbackQuery, state: FSMContext) -> None:
        await show_cart(callback, state)

    @router.callback_query(F.data.startswith("cart_inc_") | F.data.startswith("cart_dec_"))
    async def cart_quantity(callback: types.CallbackQuery, state: FSMContext) -> None:
        item_id = parse_callback_id(callback.data)
        cart = utils.get_deps().carts.get(callback.from_user.id)
        item = cart.find_item(item_id) if item_id is not None else None
        if item is None:
            await callback.answer(get_text(get_lang(callback.from_user.id), "not_found"), show_alert=True)
            return

        delta = 1 if callback.data.startswith("cart_inc_") else -1
        new_quantity = item.quantity + delta
        if new_quantity < 1:
            # quantity never drops below 1; use 🗑 to remove
            await callback.answer()
            return
        await _run(callback, state, lambda: cart.update_quantity(item.id, new_quantity))

    @router.callback_query(F.data.startswith("cart_rm_"))
    async def cart_remove_item(callback: types.CallbackQuery, state: FSMContext) -> None:
        item_id = parse_callback_id(callback.data)
        if item_id is None:
            await callback.answer()
            return
        cart = utils.get_deps().carts.get(callback.from_user.id)
        await _run(callback, state, lambda: cart.remove_item(item_id), "item_removed")

    @router.callback_query(F.data == "cart_clear")
    async def cart_clear(callback: types.CallbackQuery, state: FSMContext) -> None:
        cart = utils.get_deps().carts.get(callback.from_user.id)
        cart.request_clear_all()
        await show_cart(callback, state, reload=False)

    @router.callback_query(F.data == "cart_clear_yes")
    async def cart_clear_yes(callback: types.CallbackQuery, state: FSMContext) -> None:
        cart = utils.get_deps().carts.get(callback.from_user.id)
        await _run(callback, state, cart.clear_all, "cart_cleared")

    @router.callback_query(F.data == "cart_clear_no")
    async def cart_clear_no(callback: types.CallbackQuery, state: FSMContext) -> None:
        cart = utils.get_deps().carts.get(callback.from_user.id)
        cart.cancel_clear_all()
        await show_cart(callback, state, reload=False)
