"""
Shared handler dependencies, language lookup and safe message helpers.
"""
from __future__ import annotations

from typing import Any

from aiogram import F, types
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import ReplyKeyboardMarkup

from app.core.bootstrap import AppContainer
from app.core.exceptions import (
    ApiError,
    ApiUnavailable,
    AuthenticationRequired,
    ConfirmationRequired,
    EmptyCartError,
    InvalidFlowState,
    InvalidPaymentMethod,
    KantinException,
    NotesTooLong,
    NotFoundError,
    ProofImageRequired,
    ProofImageTooLarge,
    SessionExpired,
)
from app.keyboards import cancel_keyboard, main_menu_customer
from handlers.common.states import Login
from localization import get_all_texts, get_text, normalize_language
from logging_config import logger

LANGUAGE_KEY = "language"

# Set from `setup_dependencies` in bot.py
deps: AppContainer | None = None


def setup_dependencies(container: AppContainer) -> None:
    global deps
    deps = container


def get_deps() -> AppContainer:
    if deps is None:
        raise RuntimeError("Handler dependencies are not initialized")
    return deps


# =============================================================================
# Language
# =============================================================================


def get_lang(user_id: int) -> str:
    container = get_deps()
    stored = container.store.get(user_id, LANGUAGE_KEY)
    return normalize_language(stored or container.settings.default_language)


def set_lang(user_id: int, lang: str) -> str:
    lang = normalize_language(lang)
    get_deps().store.set(user_id, LANGUAGE_KEY, lang)
    return lang


# =============================================================================
# Reply keyboard buttons
# =============================================================================


def matches_button(text: str | None, key: str) -> bool:
    """Match a main menu button in any language, ignoring a ``(3)`` counter."""
    if not text:
        return False
    value = text.strip()
    if value.endswith(")") and " (" in value:
        value = value.rsplit(" (", 1)[0]
    return value in get_all_texts(key)


def button(key: str):
    """Message filter for a main menu button."""
    return F.text.func(lambda text: matches_button(text, key))


MAIN_MENU_KEYS = (
    "btn_restaurants",
    "btn_cart",
    "btn_orders",
    "btn_pay_now",
    "btn_login",
    "btn_logout",
    "btn_admin_payments",
    "btn_language",
)


def is_main_menu_button(text: str | None) -> bool:
    """Main menu buttons leave any free-text prompt."""
    return any(matches_button(text, key) for key in MAIN_MENU_KEYS)


# Text input for FSM prompts, excluding main menu buttons
free_text = F.text.func(lambda text: not is_main_menu_button(text))


async def main_menu_markup(user_id: int, lang: str) -> ReplyKeyboardMarkup:
    container = get_deps()
    user = container.auth.user(user_id)
    cart_count = container.carts.get(user_id).total_item_count if user else 0
    return main_menu_customer(
        lang,
        cart_count=cart_count,
        logged_in=user is not None,
        is_staff=bool(user and user.is_staff),
    )


# =============================================================================
# Errors
# =============================================================================


def error_text(lang: str, exc: Exception) -> str:
    """Localized alert for a failed action."""
    if isinstance(exc, SessionExpired):
        return get_text(lang, "session_expired")
    if isinstance(exc, AuthenticationRequired):
        return get_text(lang, "login_required")
    if isinstance(exc, EmptyCartError):
        return get_text(lang, "cart_empty_checkout")
    if isinstance(exc, ProofImageRequired):
        return get_text(lang, "proof_required")
    if isinstance(exc, ProofImageTooLarge):
        return get_text(lang, "proof_too_large")
    if isinstance(exc, NotesTooLong):
        return get_text(lang, "notes_too_long", limit=exc.limit)
    if isinstance(exc, ConfirmationRequired):
        return get_text(lang, "clear_confirm_required")
    if isinstance(exc, InvalidPaymentMethod):
        return get_text(lang, "invalid_payment_method")
    if isinstance(exc, InvalidFlowState):
        return get_text(lang, "flow_state_error")
    if isinstance(exc, NotFoundError):
        return get_text(lang, "not_found")
    if isinstance(exc, ApiUnavailable):
        return get_text(lang, "api_unavailable")
    if isinstance(exc, ApiError):
        return get_text(lang, "api_error", error=exc.message)
    if isinstance(exc, KantinException):
        return get_text(lang, "api_error", error=exc.message)
    return get_text(lang, "error_generic")


def needs_login(exc: Exception) -> bool:
    return isinstance(exc, (SessionExpired, AuthenticationRequired))


async def start_login(message: types.Message, state: FSMContext, lang: str) -> None:
    await state.clear()
    await state.set_state(Login.email)
    await message.answer(get_text(lang, "login_prompt_email"), reply_markup=cancel_keyboard(lang))


async def report_error(
    event: types.Message | types.CallbackQuery,
    lang: str,
    exc: Exception,
    state: FSMContext | None = None,
) -> None:
    """Show the error as an alert (callbacks) or a reply (messages).

    Auth failures also open the login prompt when ``state`` is given, and a
    401 drops the stored session.
    """
    text = error_text(lang, exc)
    user_id = event.from_user.id if event.from_user else None
    logger.info("Action failed for %s: %s: %s", user_id, type(exc).__name__, exc)
    if isinstance(exc, SessionExpired) and user_id is not None:
        # 401 from a direct API call; services clear the session themselves
        if get_deps().auth.token(user_id):
            await get_deps().auth.clear_session(user_id)

    if isinstance(event, types.CallbackQuery):
        await event.answer(text, show_alert=True)
        message = event.message if isinstance(event.message, types.Message) else None
    else:
        await event.answer(text)
        message = event

    if state is not None and message is not None and needs_login(exc):
        await start_login(message, state, lang)


# =============================================================================
# Safe message operations
# =============================================================================


async def safe_delete_message(message: Any) -> bool:
    """Delete a message, returning True if successful.

    The message may already be gone or too old to delete.
    """
    try:
        await message.delete()
        return True
    except TelegramBadRequest:
        return False


async def safe_edit_message(
    message: Any,
    text: str,
    reply_markup: Any = None,
) -> bool:
    """Edit a message in place, returning True if successful."""
    try:
        if getattr(message, "photo", None):
            await message.edit_caption(caption=text, reply_markup=reply_markup)
        else:
            await message.edit_text(text, reply_markup=reply_markup)
        return True
    except TelegramBadRequest as e:
        # "message is not modified" is expected on repeated taps
        logger.debug("Edit skipped: %s", e)
        return False


async def show_screen(
    event: types.Message | types.CallbackQuery,
    text: str,
    reply_markup: Any = None,
    notice: str | None = None,
) -> None:
    """Edit the callback's message, or send a new one.

    ``notice`` is the toast shown when answering the callback.
    """
    if isinstance(event, types.CallbackQuery):
        message = event.message
        if isinstance(message, types.Message):
            try:
                await message.edit_text(text, reply_markup=reply_markup)
            except TelegramBadRequest as e:
                if "not modified" not in str(e):
                    await message.answer(text, reply_markup=reply_markup)
        await event.answer(notice)
    else:
        await event.answer(text, reply_markup=reply_markup)
