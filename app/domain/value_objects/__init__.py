"""Value Objects for domain model."""
from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported languages."""

    INDONESIAN = "id"
    ENGLISH = "en"


class UserRole(str, Enum):
    """User roles as issued by the API."""

    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @classmethod
    def is_staff(cls, role: str | None) -> bool:
        return role in (cls.ADMIN.value, cls.SUPERADMIN.value)


class OrderStatus(str, Enum):
    """Order lifecycle statuses."""

    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @classmethod
    def normalize(cls, status: str | None) -> str:
        value = str(status or "").strip().lower()
        # British spelling shows up in some API responses
        return cls.CANCELED.value if value == "cancelled" else value


class PaymentMethod(str, Enum):
    """Payment methods known to the API."""

    QRIS = "qris"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    E_WALLET = "e_wallet"

    @classmethod
    def customer_choices(cls) -> tuple[PaymentMethod, ...]:
        """Methods a customer can pick on the confirmation screen."""
        return (cls.QRIS, cls.BANK_TRANSFER)

    @classmethod
    def normalize(cls, method: str | None) -> str:
        value = str(method or "").strip().lower()
        return cls.BANK_TRANSFER.value if value == "transfer" else value


class PaymentStatus(str, Enum):
    """Payment verification status. Only admins move it out of pending."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


__all__ = [
    "Language",
    "UserRole",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
]
