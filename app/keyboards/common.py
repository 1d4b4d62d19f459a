"""Common keyboards used across the bot."""
from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup, ReplyKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from localization import LANGUAGES, get_text


def language_keyboard() -> InlineKeyboardMarkup:
    """Language selection keyboard."""
    builder = InlineKeyboardBuilder()
    for code, title in LANGUAGES.items():
        builder.button(text=title, callback_data=f"lang_{code}")
    builder.adjust(2)
    return builder.as_markup()


def cancel_keyboard(lang: str = "id") -> ReplyKeyboardMarkup:
    """Cancel keyboard for free-text prompts."""
    builder = ReplyKeyboardBuilder()
    builder.button(text=get_text(lang, "cancel"))
    return builder.as_markup(resize_keyboard=True)


def skip_cancel_keyboard(lang: str = "id") -> ReplyKeyboardMarkup:
    builder = ReplyKeyboardBuilder()
    builder.button(text=get_text(lang, "btn_skip"))
    builder.button(text=get_text(lang, "cancel"))
    builder.adjust(2)
    return builder.as_markup(resize_keyboard=True)


def pagination_row(
    builder: InlineKeyboardBuilder, prefix: str, page: int, pages: int, lang: str
) -> int:
    """Append ◀️ page/pages ▶️ buttons; returns how many were added."""
    if pages <= 1:
        return 0
    added = 0
    if page > 0:
        builder.button(text="◀️", callback_data=f"{prefix}_{page - 1}")
        added += 1
    builder.button(
        text=get_text(lang, "page", page=page + 1, pages=pages), callback_data="noop"
    )
    added += 1
    if page < pages - 1:
        builder.button(text="▶️", callback_data=f"{prefix}_{page + 1}")
        added += 1
    return added
