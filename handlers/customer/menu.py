"""Restaurant and menu browsing with the per-menu add-to-cart dialog.

Dialog state (open, quantity, notes per menu id) lives in FSM data under
``menu_dialogs`` so it survives between callbacks.
"""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext

from app.core.constants import NOTES_MAX_LENGTH
from app.core.exceptions import KantinException
from app.core.utils import esc, format_price, parse_callback_id, parse_callback_ids
from app.domain.entities import Menu, Restaurant
from app.keyboards import menu_item_keyboard, restaurant_menu_keyboard, restaurants_keyboard
from app.services.menu_service import MenuDialogs, MenuItemView
from handlers.common import utils
from handlers.common.states import MenuDialog
from handlers.common.utils import button, get_lang, report_error, show_screen
from localization import get_text
from logging_config import logger

router = Router(name="customer_menu")

DIALOGS_KEY = "menu_dialogs"


async def _load_dialogs(state: FSMContext) -> MenuDialogs:
    data = await state.get_data()
    return MenuDialogs.from_dict(data.get(DIALOGS_KEY))


async def _save_dialogs(state: FSMContext, dialogs: MenuDialogs) -> None:
    await state.update_data({DIALOGS_KEY: dialogs.to_dict()})


def restaurant_text(restaurant: Restaurant, lang: str) -> str:
    text = get_text(
        lang,
        "restaurant_header",
        name=esc(restaurant.name),
        address=esc(restaurant.address) or "—",
        description=esc(restaurant.description),
    )
    if not restaurant.is_open:
        text = f"{text}\n{get_text(lang, 'restaurant_closed')}"
    if not restaurant.menus:
        text = f"{text}\n\n{get_text(lang, 'menu_empty')}"
    return text


def menu_dialog_text(menu: Menu, view: MenuItemView, lang: str) -> str:
    return get_text(
        lang,
        "menu_item_dialog",
        name=esc(menu.name),
        price=format_price(menu.price),
        quantity=view.quantity,
        subtotal=format_price(view.subtotal(menu.price)),
        notes=esc(view.notes) if view.notes else get_text(lang, "no_notes"),
    )


async def show_restaurants(
    event: types.Message | types.CallbackQuery, user_id: int, page: int = 0
) -> None:
    container = utils.get_deps()
    lang = get_lang(user_id)
    try:
        restaurants = await container.menus.list_restaurants(container.auth.token(user_id))
    except KantinException as e:
        await report_error(event, lang, e)
        return

    if not restaurants:
        await show_screen(event, get_text(lang, "restaurants_empty"))
        return
    await show_screen(
        event,
        get_text(lang, "restaurants_title"),
        reply_markup=restaurants_keyboard(restaurants, page, lang),
    )


async def _find_menu(
    callback: types.CallbackQuery, restaurant_id: int, menu_id: int, lang: str
) -> tuple[Restaurant | None, Menu | None]:
    container = utils.get_deps()
    token = container.auth.token(callback.from_user.id)
    restaurant, menu = await container.menus.find_menu(restaurant_id, menu_id, token)
    if restaurant is None or menu is None:
        await callback.answer(get_text(lang, "not_found"), show_alert=True)
        return None, None
    return restaurant, menu


@router.message(button("btn_restaurants"))
async def restaurants_message(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    await state.set_state(None)
    await show_restaurants(message, message.from_user.id)


@router.callback_query(F.data.startswith("rest_page_"))
async def restaurants_page(callback: types.CallbackQuery) -> None:
    page = parse_callback_id(callback.data) or 0
    await show_restaurants(callback, callback.from_user.id, page)


async def show_restaurant(callback: types.CallbackQuery, restaurant_id: int) -> None:
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    container = utils.get_deps()
    try:
        restaurant = await container.menus.get_restaurant(
            restaurant_id, container.auth.token(user_id)
        )
    except KantinException as e:
        await report_error(callback, lang, e)
        return

    await show_screen(
        callback,
        restaurant_text(restaurant, lang),
        reply_markup=restaurant_menu_keyboard(restaurant, lang),
    )


@router.callback_query(F.data.regexp(r"^rest_\d+$"))
async def restaurant_detail(callback: types.CallbackQuery) -> None:
    restaurant_id = parse_callback_id(callback.data)
    if restaurant_id is None:
        await callback.answer()
        return
    await show_restaurant(callback, restaurant_id)


# =============================================================================
# MENU ITEM DIALOG
# =============================================================================


@router.callback_query(F.data.startswith("menu_open_"))
async def menu_open(callback: types.CallbackQuery, state: FSMContext) -> None:
    ids = parse_callback_ids(callback.data, 2)
    lang = get_lang(callback.from_user.id)
    if ids is None:
        await callback.answer()
        return
    restaurant_id, menu_id = ids

    restaurant, menu = await _find_menu(callback, restaurant_id, menu_id, lang)
    if menu is None:
        return
    if not menu.is_available or (restaurant and not restaurant.is_open):
        await callback.answer(get_text(lang, "menu_unavailable"), show_alert=True)
        return

    dialogs = await _load_dialogs(state)
    view = dialogs.open(menu_id)
    await _save_dialogs(state, dialogs)
    await show_screen(
        callback,
        menu_dialog_text(menu, view, lang),
        reply_markup=menu_item_keyboard(restaurant_id, menu_id, view, lang),
    )


@router.callback_query(F.data.startswith("menu_inc_") | F.data.startswith("menu_dec_"))
async def menu_quantity(callback: types.CallbackQuery, state: FSMContext) -> None:
    ids = parse_callback_ids(callback.data, 2)
    lang = get_lang(callback.from_user.id)
    if ids is None:
        await callback.answer()
        return
    restaurant_id, menu_id = ids
    delta = 1 if callback.data.startswith("menu_inc_") else -1

    dialogs = await _load_dialogs(state)
    before = dialogs.get(menu_id).quantity
    view = dialogs.change_quantity(menu_id, delta)
    await _save_dialogs(state, dialogs)
    if view.quantity == before:
        await callback.answer()
        return

    _, menu = await _find_menu(callback, restaurant_id, menu_id, lang)
    if menu is None:
        return
    await show_screen(
        callback,
        menu_dialog_text(menu, view, lang),
        reply_markup=menu_item_keyboard(restaurant_id, menu_id, view, lang),
    )


@router.callback_query(F.data.startswith("menu_notes_"))
async def menu_notes_prompt(callback: types.CallbackQuery, state: FSMContext) -> None:
    ids = parse_callback_ids(callback.data, 2)
    lang = get_lang(callback.from_user.id)
    if ids is None or not isinstance(callback.message, types.Message):
        await callback.answer()
        return
    await state.update_data(menu_dialog_ids=list(ids))
    await state.set_state(MenuDialog.notes)
    await callback.message.answer(get_text(lang, "item_notes_prompt", limit=NOTES_MAX_LENGTH))
    await callback.answer()


@router.message(MenuDialog.notes, utils.free_text)
async def menu_notes_input(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    lang = get_lang(message.from_user.id)
    data = await state.get_data()
    ids = data.get("menu_dialog_ids") or []
    if len(ids) != 2:
        await state.set_state(None)
        return
    restaurant_id, menu_id = int(ids[0]), int(ids[1])

    dialogs = await _load_dialogs(state)
    try:
        view = dialogs.set_notes(menu_id, message.text)
    except KantinException as e:
        await report_error(message, lang, e)
        return
    await _save_dialogs(state, dialogs)
    await state.set_state(None)

    _, menu = await utils.get_deps().menus.find_menu(
        restaurant_id, menu_id, utils.get_deps().auth.token(message.from_user.id)
    )
    if menu is None:
        await message.answer(get_text(lang, "not_found"))
        return
    await message.answer(
        menu_dialog_text(menu, view, lang),
        reply_markup=menu_item_keyboard(restaurant_id, menu_id, view, lang),
    )


@router.callback_query(F.data.startswith("menu_add_"))
async def menu_add(callback: types.CallbackQuery, state: FSMContext) -> None:
    ids = parse_callback_ids(callback.data, 2)
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    if ids is None:
        await callback.answer()
        return
    restaurant_id, menu_id = ids

    dialogs = await _load_dialogs(state)
    view = dialogs.get(menu_id)
    cart = utils.get_deps().carts.get(user_id)
    try:
        await cart.add_item(menu_id, restaurant_id, view.quantity, view.notes)
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return

    dialogs.close(menu_id)
    await _save_dialogs(state, dialogs)
    item = next(
        (i for c in cart.carts for i in c.items if i.menu_id == menu_id), None
    )
    name = item.name if item else f"#{menu_id}"
    logger.info("Menu %s added from dialog by %s", menu_id, user_id)
    await callback.answer(
        get_text(lang, "item_added", name=name, quantity=view.quantity)
    )

    container = utils.get_deps()
    try:
        restaurant = await container.menus.get_restaurant(restaurant_id, container.auth.token(user_id))
    except KantinException as e:
        logger.warning("Restaurant %s reload failed: %s", restaurant_id, e)
        return
    if isinstance(callback.message, types.Message):
        await utils.safe_edit_message(
            callback.message,
            restaurant_text(restaurant, lang),
            reply_markup=restaurant_menu_keyboard(restaurant, lang),
        )


@router.callback_query(F.data.startswith("menu_close_"))
async def menu_close(callback: types.CallbackQuery, state: FSMContext) -> None:
    ids = parse_callback_ids(callback.data, 2)
    if ids is None:
        await callback.answer()
        return
    restaurant_id, menu_id = ids
    dialogs = await _load_dialogs(state)
    dialogs.close(menu_id)
    await _save_dialogs(state, dialogs)

    await show_restaurant(callback, restaurant_id)
