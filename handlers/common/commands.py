"""
User command handlers (start, help, language, login/logout, cancel).
"""
from __future__ import annotations

import re

from aiogram import F, Router, types
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext

from app.core.exceptions import ApiError, SessionExpired
from app.core.sentry_integration import set_user_context
from app.keyboards import language_keyboard
from handlers.common import utils
from handlers.common.states import Login
from handlers.common.utils import button, get_lang, main_menu_markup, start_login
from localization import get_all_texts, get_text
from logging_config import logger

router = Router(name="commands")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


async def send_main_menu(message: types.Message, user_id: int, text: str | None = None) -> None:
    """Main menu; also the moment the stored session expiry is checked."""
    container = utils.get_deps()
    lang = get_lang(user_id)
    if await container.auth.check_expiry(user_id):
        try:
            await container.carts.get(user_id).load()
        except SessionExpired:
            # session already cleared; menu shows the login button
            logger.info("Session expired for %s on main menu", user_id)
    await message.answer(
        text or get_text(lang, "main_menu"),
        reply_markup=await main_menu_markup(user_id, lang),
    )


@router.message(CommandStart())
async def cmd_start(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    await state.clear()
    user_id = message.from_user.id
    lang = get_lang(user_id)
    user = utils.get_deps().auth.user(user_id)
    greeting = get_text(lang, "welcome")
    if user:
        greeting = f"{get_text(lang, 'welcome_back', name=user.display_name)}\n\n{greeting}"
    await send_main_menu(message, user_id, greeting)


@router.message(Command("help"))
async def cmd_help(message: types.Message) -> None:
    if not message.from_user:
        return
    await message.answer(get_text(get_lang(message.from_user.id), "help_text"))


# =============================================================================
# LANGUAGE
# =============================================================================


@router.message(Command("language"))
@router.message(button("btn_language"))
async def cmd_language(message: types.Message) -> None:
    if not message.from_user:
        return
    lang = get_lang(message.from_user.id)
    await message.answer(get_text(lang, "choose_language"), reply_markup=language_keyboard())


@router.callback_query(F.data.startswith("lang_"))
async def choose_language(callback: types.CallbackQuery) -> None:
    if not callback.from_user or not callback.data:
        await callback.answer()
        return
    user_id = callback.from_user.id
    lang = utils.set_lang(user_id, callback.data.removeprefix("lang_"))
    await callback.answer(get_text(lang, "language_changed"))
    if isinstance(callback.message, types.Message):
        await utils.safe_delete_message(callback.message)
        await send_main_menu(callback.message, user_id, get_text(lang, "language_changed"))


# =============================================================================
# LOGIN / LOGOUT
# =============================================================================


@router.message(Command("login"))
@router.message(button("btn_login"))
async def cmd_login(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    user_id = message.from_user.id
    lang = get_lang(user_id)
    user = utils.get_deps().auth.user(user_id)
    if user and await utils.get_deps().auth.check_expiry(user_id):
        await message.answer(get_text(lang, "already_logged_in", name=user.display_name))
        return
    await start_login(message, state, lang)


@router.message(F.text.func(lambda text: (text or "").strip() in get_all_texts("cancel")))
async def cancel_any(message: types.Message, state: FSMContext) -> None:
    """Cancel button on any free-text prompt."""
    if not message.from_user:
        return
    await state.clear()
    lang = get_lang(message.from_user.id)
    await send_main_menu(message, message.from_user.id, get_text(lang, "cancelled"))


@router.message(Login.email, utils.free_text)
async def login_email(message: types.Message, state: FSMContext) -> None:
    if not message.from_user or not message.text:
        return
    lang = get_lang(message.from_user.id)
    email = message.text.strip()
    if not EMAIL_RE.match(email):
        await message.answer(get_text(lang, "login_invalid_email"))
        return
    await state.update_data(email=email)
    await state.set_state(Login.password)
    await message.answer(get_text(lang, "login_prompt_password"))


@router.message(Login.password, utils.free_text)
async def login_password(message: types.Message, state: FSMContext) -> None:
    if not message.from_user or not message.text:
        return
    user_id = message.from_user.id
    lang = get_lang(user_id)
    data = await state.get_data()
    password = message.text
    # The password must not stay in the chat history
    await utils.safe_delete_message(message)

    try:
        user = await utils.get_deps().auth.login(user_id, data.get("email", ""), password)
    except (ApiError, SessionExpired) as e:
        # wrong credentials come back as 401
        logger.info("Login failed for %s: %s", user_id, e)
        await state.set_state(Login.email)
        await message.answer(get_text(lang, "login_failed", error=e.message))
        await message.answer(get_text(lang, "login_prompt_email"))
        return

    set_user_context(user_id, api_user_id=user.id, role=user.role)
    await state.clear()
    await send_main_menu(message, user_id, get_text(lang, "login_success", name=user.display_name))


@router.message(Command("logout"))
@router.message(button("btn_logout"))
async def cmd_logout(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    user_id = message.from_user.id
    await state.clear()
    await utils.get_deps().auth.logout(user_id)
    await send_main_menu(message, user_id, get_text(get_lang(user_id), "logout_done"))


@router.callback_query(F.data == "noop")
async def noop(callback: types.CallbackQuery) -> None:
    await callback.answer()
