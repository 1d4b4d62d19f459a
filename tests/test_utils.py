"""Tests for shared helpers in app.core.utils."""
from __future__ import annotations

from decimal import Decimal

import pytest

from app.core.utils import (
    esc,
    format_price,
    format_size,
    parse_callback_id,
    parse_callback_ids,
    parse_datetime,
    to_bool,
    to_decimal,
)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        ("80000.00", "Rp 80.000"),
        (Decimal("1250000"), "Rp 1.250.000"),
        ("12500.50", "Rp 12.500,50"),
        (0, "Rp 0"),
        (None, "Rp 0"),
    ],
)
def test_format_price(amount, expected: str) -> None:
    assert format_price(amount) == expected


def test_to_decimal_handles_api_strings() -> None:
    assert to_decimal("15000.00") == Decimal("15000.00")
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal("", Decimal("5")) == Decimal("5")


def test_to_bool_flags() -> None:
    assert to_bool("1") is True
    assert to_bool("0") is False
    assert to_bool(1) is True
    assert to_bool(None) is False


def test_parse_callback_id() -> None:
    assert parse_callback_id("cart_inc_12") == 12
    assert parse_callback_id("cart_clear") is None
    assert parse_callback_id(None) is None


def test_parse_callback_ids() -> None:
    assert parse_callback_ids("menu_open_3_17", 2) == (3, 17)
    assert parse_callback_ids("menu_open_x_17", 2) is None
    assert parse_callback_ids("17", 2) is None


def test_format_size() -> None:
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"


def test_parse_datetime_with_zulu_suffix() -> None:
    parsed = parse_datetime("2024-05-01T10:00:00Z")

    assert parsed is not None
    assert parsed.hour == 10
    assert parsed.utcoffset().total_seconds() == 0
    assert parse_datetime("yesterday") is None


def test_esc() -> None:
    assert esc("<b>Nasi & Ayam</b>") == "&lt;b&gt;Nasi &amp; Ayam&lt;/b&gt;"
    assert esc(None) == ""
