"""Tests for the checkout confirmation flow (payment proof upload)."""
from __future__ import annotations

import pytest

from app.core.constants import MAX_PROOF_IMAGE_BYTES
from app.core.exceptions import (
    ApiError,
    ApiUnavailable,
    InvalidFlowState,
    InvalidPaymentMethod,
    NotesTooLong,
    ProofImageRequired,
    ProofImageTooLarge,
    SessionExpired,
)
from app.services.checkout_service import CheckoutConfirmation, CheckoutRegistry, CheckoutState
from conftest import USER_ID, make_order


@pytest.fixture()
def order_api(api):
    api.orders[55] = make_order(55)
    api.restaurants = {
        1: {"id": 1, "name": "Warung Bu Tini"},
        2: {"id": 2, "name": "Kedai Kopi"},
    }
    return api


@pytest.fixture()
async def flow(logged_in, order_api):
    confirmation = CheckoutConfirmation(USER_ID, 55, order_api, logged_in)
    await confirmation.load()
    return confirmation


class TestLoad:
    @pytest.mark.asyncio
    async def test_pending_order_awaits_proof(self, flow) -> None:
        assert flow.state == CheckoutState.AWAITING_PROOF
        assert flow.order.order_code == "ORD-55"
        assert flow.restaurant_names == {1: "Warung Bu Tini", 2: "Kedai Kopi"}
        assert flow.payment_method == "qris"

    @pytest.mark.asyncio
    async def test_missing_order_is_not_found(self, logged_in, order_api) -> None:
        confirmation = CheckoutConfirmation(USER_ID, 999, order_api, logged_in)

        assert await confirmation.load() == CheckoutState.NOT_FOUND
        assert confirmation.load_error is None

    @pytest.mark.asyncio
    async def test_unreachable_api_keeps_load_error(self, logged_in, order_api) -> None:
        order_api.fail["get_order"] = ApiUnavailable("timeout")
        confirmation = CheckoutConfirmation(USER_ID, 55, order_api, logged_in)

        assert await confirmation.load() == CheckoutState.NOT_FOUND
        assert isinstance(confirmation.load_error, ApiUnavailable)
        assert logged_in.token(USER_ID) == "tok-123"

    @pytest.mark.asyncio
    async def test_paid_order_is_not_found(self, logged_in, order_api) -> None:
        order_api.orders[56] = make_order(56, status="paid")
        confirmation = CheckoutConfirmation(USER_ID, 56, order_api, logged_in)

        assert await confirmation.load() == CheckoutState.NOT_FOUND

    @pytest.mark.asyncio
    async def test_restaurant_names_are_best_effort(self, logged_in, order_api) -> None:
        del order_api.restaurants[2]
        confirmation = CheckoutConfirmation(USER_ID, 55, order_api, logged_in)

        assert await confirmation.load() == CheckoutState.AWAITING_PROOF
        assert confirmation.restaurant_names == {1: "Warung Bu Tini"}

    @pytest.mark.asyncio
    async def test_expired_session_is_cleared(self, logged_in, order_api) -> None:
        order_api.fail["get_order"] = SessionExpired()
        confirmation = CheckoutConfirmation(USER_ID, 55, order_api, logged_in)

        with pytest.raises(SessionExpired):
            await confirmation.load()

        assert logged_in.token(USER_ID) is None


class TestForm:
    @pytest.mark.asyncio
    async def test_exactly_five_megabytes_is_accepted(self, flow) -> None:
        proof = flow.attach_proof("bukti.png", b"x" * MAX_PROOF_IMAGE_BYTES)

        assert proof.size == 5 * 1024 * 1024
        assert proof.content_type == "image/png"

    @pytest.mark.asyncio
    async def test_one_byte_over_is_rejected_without_upload(self, flow, order_api) -> None:
        with pytest.raises(ProofImageTooLarge):
            flow.attach_proof("bukti.jpg", b"x" * (MAX_PROOF_IMAGE_BYTES + 1))

        assert flow.proof is None
        assert "confirm_payment" not in order_api.call_names()

    @pytest.mark.asyncio
    async def test_bank_transfer_changes_instructions(self, flow) -> None:
        flow.select_payment_method("bank_transfer")

        text = flow.payment_instructions("en")

        assert flow.payment_method == "bank_transfer"
        assert "1234567890" in text

    @pytest.mark.asyncio
    async def test_qris_instructions(self, flow) -> None:
        assert "QRIS" in flow.payment_instructions("en")

    @pytest.mark.asyncio
    async def test_unknown_method_rejected(self, flow) -> None:
        with pytest.raises(InvalidPaymentMethod):
            flow.select_payment_method("credit_card")

    @pytest.mark.asyncio
    async def test_notes_limit(self, flow) -> None:
        flow.set_notes("  transfer dari BCA  ")
        assert flow.notes == "transfer dari BCA"

        with pytest.raises(NotesTooLong):
            flow.set_notes("n" * 201)

    @pytest.mark.asyncio
    async def test_attach_requires_awaiting_state(self, logged_in, order_api) -> None:
        confirmation = CheckoutConfirmation(USER_ID, 55, order_api, logged_in)

        with pytest.raises(InvalidFlowState):
            confirmation.attach_proof("a.jpg", b"123")


class TestSubmit:
    @pytest.mark.asyncio
    async def test_requires_proof_before_any_call(self, flow, order_api) -> None:
        with pytest.raises(ProofImageRequired):
            await flow.submit()

        assert "confirm_payment" not in order_api.call_names()
        assert flow.state == CheckoutState.AWAITING_PROOF

    @pytest.mark.asyncio
    async def test_success_confirms_and_resets_form(self, flow, order_api) -> None:
        flow.select_payment_method("bank_transfer")
        flow.attach_proof("bukti.jpg", b"jpeg-bytes")
        flow.set_notes("sudah transfer")

        await flow.submit()

        name, kwargs = order_api.calls[-1]
        assert name == "confirm_payment"
        assert kwargs["order_id"] == 55
        assert kwargs["order_code"] == "ORD-55"
        assert kwargs["payment_method"] == "bank_transfer"
        assert kwargs["proof_image"] == b"jpeg-bytes"
        assert kwargs["filename"] == "bukti.jpg"
        assert kwargs["notes"] == "sudah transfer"
        assert flow.state == CheckoutState.CONFIRMED
        assert flow.proof is None

    @pytest.mark.asyncio
    async def test_failure_keeps_form_for_retry(self, flow, order_api) -> None:
        flow.attach_proof("bukti.jpg", b"jpeg-bytes")
        flow.set_notes("catatan")
        order_api.fail["confirm_payment"] = ApiError("Upload gagal", status=500)

        with pytest.raises(ApiError):
            await flow.submit()

        assert flow.state == CheckoutState.AWAITING_PROOF
        assert flow.last_error == "Upload gagal"
        assert flow.proof is not None
        assert flow.notes == "catatan"

    @pytest.mark.asyncio
    async def test_unauthorized_submit_clears_session(self, flow, order_api, logged_in) -> None:
        flow.attach_proof("bukti.jpg", b"jpeg-bytes")
        order_api.fail["confirm_payment"] = SessionExpired()

        with pytest.raises(SessionExpired):
            await flow.submit()

        assert logged_in.token(USER_ID) is None
        assert flow.state == CheckoutState.AWAITING_PROOF

    @pytest.mark.asyncio
    async def test_submit_twice_is_rejected(self, flow) -> None:
        flow.attach_proof("bukti.jpg", b"jpeg-bytes")
        await flow.submit()

        with pytest.raises(InvalidFlowState):
            await flow.submit()


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_order(self, flow, order_api) -> None:
        await flow.cancel_order()

        assert flow.state == CheckoutState.NOT_FOUND
        assert order_api.orders[55]["status"] == "canceled"


class TestRegistry:
    def test_start_replaces_previous_flow(self, api, auth, signals) -> None:
        registry = CheckoutRegistry(api, auth, signals)

        first = registry.start(USER_ID, 1)
        second = registry.start(USER_ID, 2)

        assert registry.get(USER_ID) is second
        assert first is not second

    def test_finish(self, api, auth, signals) -> None:
        registry = CheckoutRegistry(api, auth, signals)
        registry.start(USER_ID, 1)

        registry.finish(USER_ID)

        assert registry.get(USER_ID) is None

    @pytest.mark.asyncio
    async def test_logout_closes_open_flow(self, api, logged_in, signals) -> None:
        registry = CheckoutRegistry(api, logged_in, signals)
        registry.start(USER_ID, 55)
        registry.start(USER_ID + 1, 56)

        await logged_in.logout(USER_ID)

        assert registry.get(USER_ID) is None
        assert registry.get(USER_ID + 1) is not None
