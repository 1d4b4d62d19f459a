"""Use case: admin confirms a customer's payment."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.core.exceptions import ApiError, NotFoundError
from app.domain.order import Payment
from app.domain.value_objects import PaymentStatus
from logging_config import logger


@dataclass
class PaymentDecisionResult:
    ok: bool
    error_key: str | None = None
    payment: Payment | None = None
    payment_status: str | None = None


async def load_pending_payment(
    payment_id: int, *, api: Any, token: str
) -> tuple[Payment | None, PaymentDecisionResult | None]:
    """Fetch a payment and refuse anything that is not pending."""
    try:
        payment = await api.admin_get_payment(token, payment_id)
    except NotFoundError:
        return None, PaymentDecisionResult(False, "not_found")

    if not payment.is_pending:
        return payment, PaymentDecisionResult(
            False,
            "already_processed",
            payment=payment,
            payment_status=payment.payment_status,
        )
    return payment, None


async def confirm_payment(payment_id: int, *, api: Any, token: str) -> PaymentDecisionResult:
    if not token:
        return PaymentDecisionResult(False, "login_required")

    payment, refusal = await load_pending_payment(payment_id, api=api, token=token)
    if refusal is not None:
        return refusal

    try:
        updated = await api.admin_confirm_payment(token, payment_id)
    except NotFoundError:
        return PaymentDecisionResult(False, "not_found", payment=payment)
    except ApiError as e:
        logger.warning("Payment %s confirm failed: %s", payment_id, e)
        return PaymentDecisionResult(
            False,
            "processing_error",
            payment=payment,
            payment_status=payment.payment_status,
        )

    logger.info("Payment %s confirmed", payment_id)
    return PaymentDecisionResult(
        True, payment=updated or payment, payment_status=PaymentStatus.COMPLETED.value
    )
