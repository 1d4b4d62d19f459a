"""Tests for the localization module."""
from __future__ import annotations

import re

from localization import TEXTS, get_all_texts, get_language_name, get_text, normalize_language


def test_both_languages_have_the_same_keys() -> None:
    assert set(TEXTS["id"]) == set(TEXTS["en"])


def test_placeholders_match_between_languages() -> None:
    pattern = re.compile(r"{(\w+)}")
    for key, text in TEXTS["id"].items():
        assert set(pattern.findall(text)) == set(pattern.findall(TEXTS["en"][key])), key


def test_get_text_formats() -> None:
    assert get_text("en", "notes_too_long", limit=200) == "⚠️ Notes can be at most 200 characters"


def test_unknown_language_falls_back_to_indonesian() -> None:
    assert normalize_language("uz") == "id"
    assert get_text("uz", "login_required") == TEXTS["id"]["login_required"]


def test_unknown_key_returns_key() -> None:
    assert get_text("en", "missing_key") == "missing_key"


def test_missing_format_argument_returns_raw_text() -> None:
    assert get_text("en", "notes_too_long", other=1) == TEXTS["en"]["notes_too_long"]


def test_get_all_texts() -> None:
    assert get_all_texts("btn_cart") == {"🛒 Keranjang", "🛒 Cart"}
    assert get_language_name("xx") == get_language_name("id")
