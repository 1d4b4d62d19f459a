"""Per-item notes editing in the cart."""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext

from app.core.constants import NOTES_MAX_LENGTH
from app.core.exceptions import KantinException
from app.core.utils import esc, parse_callback_id
from app.keyboards import cancel_keyboard
from handlers.common import utils
from handlers.common.states import CartEdit
from handlers.common.utils import get_lang, main_menu_markup, report_error
from localization import get_text

from .view import show_cart

CLEAR_NOTES = "-"


def register(router: Router) -> None:
    @router.callback_query(F.data.startswith("cart_notes_"))
    async def cart_notes_prompt(callback: types.CallbackQuery, state: FSMContext) -> None:
        user_id = callback.from_user.id
        lang = get_lang(user_id)
        item_id = parse_callback_id(callback.data)
        item = utils.get_deps().carts.get(user_id).find_item(item_id) if item_id else None
        if item is None or not isinstance(callback.message, types.Message):
            await callback.answer(get_text(lang, "not_found"), show_alert=True)
            return

        await state.set_state(CartEdit.item_notes)
        await state.update_data(cart_item_id=item.id)
        await callback.message.answer(
            get_text(lang, "cart_notes_prompt", name=esc(item.name), limit=NOTES_MAX_LENGTH),
            reply_markup=cancel_keyboard(lang),
        )
        await callback.answer()

    @router.message(CartEdit.item_notes, utils.free_text)
    async def cart_notes_input(message: types.Message, state: FSMContext) -> None:
        if not message.from_user or not message.text:
            return
        user_id = message.from_user.id
        lang = get_lang(user_id)
        data = await state.get_data()
        item_id = data.get("cart_item_id")
        text = None if message.text.strip() == CLEAR_NOTES else message.text

        try:
            await utils.get_deps().carts.get(user_id).update_notes(int(item_id or 0), text)
        except KantinException as e:
            await report_error(message, lang, e, state)
            return

        await state.set_state(None)
        await message.answer(
            get_text(lang, "notes_saved"), reply_markup=await main_menu_markup(user_id, lang)
        )
        await show_cart(message, state, reload=False)
