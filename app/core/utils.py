"""Shared helper utilities reused across handlers and services."""
from __future__ import annotations

import html
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from app.core.constants import MAX_BUTTON_TITLE_LENGTH


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Parse API money values ("15000.00", 15000, None) into Decimal."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_bool(value: Any) -> bool:
    """API flags arrive as 0/1, "0"/"1" or real booleans."""
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def format_price(amount: Any, currency: str = "Rp") -> str:
    """Format money the Indonesian way: ``Rp 80.000`` or ``Rp 12.500,50``."""
    value = to_decimal(amount)
    negative = value < 0
    value = abs(value).quantize(Decimal("0.01"))
    whole, _, fraction = f"{value:.2f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    text = grouped if fraction == "00" else f"{grouped},{fraction}"
    return f"{'-' if negative else ''}{currency} {text}"


def parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return "—"
    return value.strftime("%d %b %Y %H:%M")


def esc(val: Any) -> str:
    """HTML-escape helper used in message texts."""
    if val is None:
        return ""
    return html.escape(str(val))


def short_title(title: str, limit: int = MAX_BUTTON_TITLE_LENGTH) -> str:
    return title[:limit] + "..." if len(title) > limit else title


def parse_callback_id(data: str | None) -> int | None:
    """Take the trailing numeric id from callback data like ``cart_inc_12``."""
    if not data:
        return None
    try:
        return int(data.rsplit("_", 1)[-1])
    except ValueError:
        return None


def parse_callback_ids(data: str | None, count: int) -> tuple[int, ...] | None:
    """Take ``count`` trailing ids, e.g. ``menu_open_3_17`` -> (3, 17)."""
    if not data:
        return None
    parts = data.rsplit("_", count)
    if len(parts) <= count:
        return None
    try:
        return tuple(int(part) for part in parts[1:])
    except ValueError:
        return None


def format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size} B"
