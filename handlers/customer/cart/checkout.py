"""Checkout: order notes prompt, order creation, hand-off to payment."""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext

from app.core.exceptions import EmptyCartError, KantinException
from app.keyboards import skip_cancel_keyboard
from handlers.common import utils
from handlers.common.states import CartEdit
from handlers.common.utils import get_lang, main_menu_markup, matches_button, report_error
from handlers.customer.payment_proof import open_checkout
from localization import get_text
from logging_config import logger


async def _place_order(message: types.Message, user_id: int, state: FSMContext, notes: str | None) -> None:
    lang = get_lang(user_id)
    cart = utils.get_deps().carts.get(user_id)
    try:
        order_id = await cart.checkout(notes)
    except KantinException as e:
        await report_error(message, lang, e, state)
        return

    await state.set_state(None)
    logger.info("Checkout done for %s, order %s", user_id, order_id)
    await message.answer(
        get_text(lang, "checkout_success"), reply_markup=await main_menu_markup(user_id, lang)
    )
    await open_checkout(message, user_id, order_id)


def register(router: Router) -> None:
    @router.callback_query(F.data == "cart_checkout")
    async def cart_checkout(callback: types.CallbackQuery, state: FSMContext) -> None:
        user_id = callback.from_user.id
        lang = get_lang(user_id)
        cart = utils.get_deps().carts.get(user_id)
        if cart.is_empty:
            await report_error(callback, lang, EmptyCartError())
            return
        if not isinstance(callback.message, types.Message):
            await callback.answer()
            return

        await state.set_state(CartEdit.checkout_notes)
        await callback.message.answer(
            get_text(lang, "checkout_notes_prompt"), reply_markup=skip_cancel_keyboard(lang)
        )
        await callback.answer()

    @router.message(CartEdit.checkout_notes, utils.free_text)
    async def checkout_notes_input(message: types.Message, state: FSMContext) -> None:
        if not message.from_user:
            return
        notes = None if matches_button(message.text, "btn_skip") else message.text
        await _place_order(message, message.from_user.id, state, notes)
