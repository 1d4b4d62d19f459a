"""Use case: admin rejects a customer's payment."""
from __future__ import annotations

from typing import Any

from app.application.orders.confirm_payment import PaymentDecisionResult, load_pending_payment
from app.core.exceptions import ApiError, NotFoundError
from app.domain.value_objects import PaymentStatus
from logging_config import logger


async def reject_payment(payment_id: int, *, api: Any, token: str) -> PaymentDecisionResult:
    if not token:
        return PaymentDecisionResult(False, "login_required")

    payment, refusal = await load_pending_payment(payment_id, api=api, token=token)
    if refusal is not None:
        return refusal

    try:
        updated = await api.admin_reject_payment(token, payment_id)
    except NotFoundError:
        return PaymentDecisionResult(False, "not_found", payment=payment)
    except ApiError as e:
        logger.warning("Payment %s reject failed: %s", payment_id, e)
        return PaymentDecisionResult(
            False,
            "processing_error",
            payment=payment,
            payment_status=payment.payment_status,
        )

    logger.info("Payment %s rejected", payment_id)
    return PaymentDecisionResult(
        True, payment=updated or payment, payment_status=PaymentStatus.REJECTED.value
    )
