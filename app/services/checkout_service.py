"""
Checkout confirmation flow for one pending order.

States::

    loading -> awaiting_proof | not_found
    awaiting_proof -> submitting -> confirmed
                                 -> awaiting_proof (error kept, form kept)

The customer picks QRIS or bank transfer (this only changes the static
instructions shown), attaches a proof-of-payment image of at most 5 MB and
submits it as a multipart upload.
"""
from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.core.auth_context import AuthContext
from app.core.constants import (
    ACCOUNT_NAME,
    BANK_ACCOUNT,
    BANK_NAME,
    MAX_PROOF_IMAGE_BYTES,
    NOTES_MAX_LENGTH,
    QRIS_PAYLOAD,
)
from app.core.events import SignalStore, SignalType
from app.core.exceptions import (
    ApiError,
    InvalidFlowState,
    InvalidPaymentMethod,
    NotFoundError,
    ProofImageRequired,
    ProofImageTooLarge,
    SessionExpired,
)
from app.domain.order import Order
from app.domain.value_objects import PaymentMethod
from app.services.cart_service import clean_notes
from localization import get_text
from logging_config import logger


class CheckoutState(str, Enum):
    LOADING = "loading"
    AWAITING_PROOF = "awaiting_proof"
    NOT_FOUND = "not_found"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"


@dataclass
class ProofImage:
    filename: str
    content: bytes
    content_type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.content)


class CheckoutConfirmation:
    """Confirmation screen state for a single order."""

    def __init__(self, user_id: int, order_id: int, api: Any, auth: AuthContext) -> None:
        self.user_id = user_id
        self.order_id = order_id
        self.api = api
        self.auth = auth

        self.state = CheckoutState.LOADING
        self.order: Order | None = None
        self.restaurant_names: dict[int, str] = {}
        self.payment_method: str = PaymentMethod.QRIS.value
        self.proof: ProofImage | None = None
        self.notes: str | None = None
        self.last_error: str | None = None
        self.load_error: ApiError | None = None

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> CheckoutState:
        """Fetch the order; anything but a pending order ends in not_found.

        A failed request also ends in not_found, with the error kept in
        ``load_error`` so the caller can tell the user.
        """
        token = self.auth.require_token(self.user_id)
        self.state = CheckoutState.LOADING
        self.load_error = None
        try:
            order = await self.api.get_order(token, self.order_id)
        except SessionExpired:
            await self.auth.clear_session(self.user_id)
            raise
        except NotFoundError:
            logger.info("Order %s not found for %s", self.order_id, self.user_id)
            self.state = CheckoutState.NOT_FOUND
            return self.state
        except ApiError as e:
            logger.warning("Order %s load failed for %s: %s", self.order_id, self.user_id, e)
            self.load_error = e
            self.state = CheckoutState.NOT_FOUND
            return self.state

        self.order = order
        if not order.is_pending:
            logger.info("Order %s is %s, no payment waiting", order.id, order.status)
            self.state = CheckoutState.NOT_FOUND
            return self.state

        await self._load_restaurant_names(token)
        self.state = CheckoutState.AWAITING_PROOF
        return self.state

    async def _load_restaurant_names(self, token: str) -> None:
        """Best-effort names for the per-restaurant item groups."""
        if self.order is None:
            return
        for restaurant_id in self.order.items_by_restaurant():
            if not restaurant_id or restaurant_id in self.restaurant_names:
                continue
            try:
                restaurant = await self.api.get_restaurant(restaurant_id, token=token)
            except ApiError as e:
                logger.warning("Restaurant %s lookup failed: %s", restaurant_id, e)
                continue
            self.restaurant_names[restaurant_id] = restaurant.name

    # =========================================================================
    # FORM
    # =========================================================================

    def _require_state(self, action: str, *states: CheckoutState) -> None:
        if self.state not in states:
            raise InvalidFlowState(self.state.value, action)

    def select_payment_method(self, method: str) -> None:
        value = PaymentMethod.normalize(method)
        if value not in {choice.value for choice in PaymentMethod.customer_choices()}:
            raise InvalidPaymentMethod(method)
        self.payment_method = value

    def attach_proof(self, filename: str, content: bytes, content_type: str | None = None) -> ProofImage:
        """Keep the proof image for submit. Over 5 MB is rejected."""
        self._require_state("attach proof", CheckoutState.AWAITING_PROOF)
        if len(content) > MAX_PROOF_IMAGE_BYTES:
            raise ProofImageTooLarge(len(content), MAX_PROOF_IMAGE_BYTES)
        guessed = content_type or mimetypes.guess_type(filename)[0] or "image/jpeg"
        self.proof = ProofImage(filename=filename, content=content, content_type=guessed)
        return self.proof

    def set_notes(self, text: str | None) -> None:
        self.notes = clean_notes(text, NOTES_MAX_LENGTH)

    def reset_form(self) -> None:
        self.proof = None
        self.notes = None
        self.payment_method = PaymentMethod.QRIS.value

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def submit(self) -> None:
        self._require_state("submit", CheckoutState.AWAITING_PROOF)
        if self.proof is None:
            raise ProofImageRequired()
        if self.order is None:
            raise InvalidFlowState(self.state.value, "submit")
        token = self.auth.require_token(self.user_id)

        self.state = CheckoutState.SUBMITTING
        self.last_error = None
        try:
            await self.api.confirm_payment(
                token,
                self.order.id,
                order_code=self.order.order_code,
                payment_method=self.payment_method,
                proof_image=self.proof.content,
                filename=self.proof.filename,
                content_type=self.proof.content_type,
                notes=self.notes,
            )
        except SessionExpired as e:
            self.state = CheckoutState.AWAITING_PROOF
            self.last_error = e.message
            await self.auth.clear_session(self.user_id)
            raise
        except ApiError as e:
            logger.warning("Payment confirmation for order %s failed: %s", self.order.id, e)
            self.state = CheckoutState.AWAITING_PROOF
            self.last_error = e.message
            raise

        logger.info(
            "Payment proof submitted for order %s via %s", self.order.id, self.payment_method
        )
        self.state = CheckoutState.CONFIRMED
        self.reset_form()

    async def cancel_order(self) -> None:
        self._require_state("cancel", CheckoutState.AWAITING_PROOF)
        token = self.auth.require_token(self.user_id)
        try:
            await self.api.cancel_order(token, self.order_id)
        except SessionExpired:
            await self.auth.clear_session(self.user_id)
            raise
        logger.info("Order %s canceled by %s", self.order_id, self.user_id)
        self.state = CheckoutState.NOT_FOUND

    def payment_instructions(self, lang: str) -> str:
        if self.payment_method == PaymentMethod.BANK_TRANSFER.value:
            return get_text(
                lang,
                "payment_instructions_bank",
                bank=BANK_NAME,
                account=BANK_ACCOUNT,
                name=ACCOUNT_NAME,
            )
        return get_text(lang, "payment_instructions_qris", payload=QRIS_PAYLOAD)


class CheckoutRegistry:
    """The confirmation screen currently open for each user."""

    def __init__(self, api: Any, auth: AuthContext, signals: SignalStore) -> None:
        self.api = api
        self.auth = auth
        self._flows: dict[int, CheckoutConfirmation] = {}
        # An open flow belongs to the account that started it
        signals.subscribe(SignalType.LOGGED_OUT, self._on_logged_out)

    def start(self, user_id: int, order_id: int) -> CheckoutConfirmation:
        flow = CheckoutConfirmation(user_id, order_id, self.api, self.auth)
        self._flows[user_id] = flow
        return flow

    def get(self, user_id: int) -> CheckoutConfirmation | None:
        return self._flows.get(user_id)

    def finish(self, user_id: int) -> None:
        self._flows.pop(user_id, None)

    async def _on_logged_out(self, user_id: int) -> None:
        self.finish(user_id)
