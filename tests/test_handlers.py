"""Tests for handler rendering helpers and shared handler utilities."""
from __future__ import annotations

import pytest
from aiogram import types

from app.application.orders.confirm_payment import PaymentDecisionResult
from app.core.exceptions import (
    ApiError,
    ApiUnavailable,
    NotesTooLong,
    ProofImageTooLarge,
    SessionExpired,
)
from app.domain.order import Order, Payment
from app.services.checkout_service import CheckoutConfirmation
from conftest import USER_ID, make_order, make_payment
from handlers.admin.payments import decision_text, payment_detail_text
from handlers.common.utils import (
    error_text,
    get_lang,
    is_main_menu_button,
    matches_button,
    report_error,
    set_lang,
)
from handlers.customer.cart.view import build_cart_view, show_cart
from handlers.customer.orders.my_orders import latest_pending, order_detail_text
from handlers.customer.payment_proof import checkout_text, open_checkout, pay_submit


def _message(mocker, user_id: int = USER_ID):
    message = mocker.Mock(spec=types.Message)
    message.from_user = mocker.Mock(id=user_id)
    message.answer = mocker.AsyncMock()
    return message


def _callback(mocker, data: str, user_id: int = USER_ID):
    callback = mocker.Mock(spec=types.CallbackQuery)
    callback.from_user = mocker.Mock(id=user_id)
    callback.data = data
    callback.answer = mocker.AsyncMock()
    callback.message = _message(mocker, user_id)
    callback.message.edit_text = mocker.AsyncMock()
    return callback


class TestButtons:
    def test_matches_any_language_and_counter(self) -> None:
        assert matches_button("🛒 Cart", "btn_cart")
        assert matches_button("🛒 Keranjang (3)", "btn_cart")
        assert not matches_button("🛒 Cart", "btn_orders")
        assert not matches_button(None, "btn_cart")

    def test_main_menu_buttons_leave_prompts(self) -> None:
        assert is_main_menu_button("💳 Pay now")
        assert not is_main_menu_button("tanpa sambal")


class TestErrorText:
    def test_known_errors(self) -> None:
        assert error_text("en", SessionExpired()) == "⌛ Your session expired, please log in again"
        assert error_text("en", NotesTooLong(201, 200)) == "⚠️ Notes can be at most 200 characters"
        assert error_text("en", ProofImageTooLarge(6, 5)) == "⚠️ Maximum file size is 5MB"
        assert error_text("en", RuntimeError()) == "❌ Something went wrong"

    def test_api_error_shows_server_message(self) -> None:
        assert error_text("en", ApiError("Stok habis", status=422)) == "❌ Stok habis"


class TestLanguage:
    def test_default_then_stored(self, container) -> None:
        assert get_lang(USER_ID) == "id"

        set_lang(USER_ID, "en")

        assert get_lang(USER_ID) == "en"
        assert set_lang(USER_ID, "fr") == "id"


class TestCartView:
    @pytest.mark.asyncio
    async def test_groups_by_restaurant_and_totals(self, logged_in, cart, two_restaurant_carts) -> None:
        await cart.load()

        text, markup = build_cart_view(cart, "en")

        assert "Resto 1" in text and "Resto 2" in text
        assert "Resto 3" not in text
        assert "Rp 80.000" in text
        assert markup.inline_keyboard[-1][0].callback_data == "cart_checkout"

    @pytest.mark.asyncio
    async def test_clear_modal_swaps_keyboard(self, logged_in, cart, two_restaurant_carts) -> None:
        await cart.load()
        cart.request_clear_all()

        _, markup = build_cart_view(cart, "en")

        assert [b.callback_data for b in markup.inline_keyboard[0]] == ["cart_clear_yes", "cart_clear_no"]

    def test_empty(self, cart) -> None:
        text, markup = build_cart_view(cart, "en")

        assert text.startswith("🛒 Your cart is empty")
        assert markup.inline_keyboard[0][0].callback_data == "rest_page_0"

    @pytest.mark.asyncio
    async def test_show_cart_requires_login(self, container, mocker) -> None:
        message = _message(mocker)

        await show_cart(message)

        message.answer.assert_awaited_once_with("🔑 Silakan login terlebih dahulu")

    @pytest.mark.asyncio
    async def test_show_cart_renders_loaded_cart(self, container, logged_in, two_restaurant_carts, mocker) -> None:
        message = _message(mocker)

        await show_cart(message)

        text = message.answer.await_args.args[0]
        assert "Rp 80.000" in text
        assert two_restaurant_carts.call_names()[-1] == "list_carts"


class TestCheckoutText:
    @pytest.mark.asyncio
    async def test_groups_and_proof_status(self, logged_in, api) -> None:
        api.orders[55] = make_order(55)
        api.restaurants = {1: {"id": 1, "name": "Warung Bu Tini"}}
        flow = CheckoutConfirmation(USER_ID, 55, api, logged_in)
        await flow.load()
        flow.attach_proof("bukti.jpg", b"x" * 2048)

        text = checkout_text(flow, "en")

        assert "ORD-55" in text
        assert "Warung Bu Tini" in text
        assert "#2" in text
        assert "bukti.jpg (2 KB)" in text
        assert "Rp 80.000" in text

    @pytest.mark.asyncio
    async def test_not_found(self, logged_in, api) -> None:
        flow = CheckoutConfirmation(USER_ID, 1, api, logged_in)
        await flow.load()

        assert checkout_text(flow, "en") == "ℹ️ There is no payment waiting for this order."


class TestOrders:
    def test_latest_pending_picks_highest_id(self) -> None:
        orders = [
            Order.from_dict(make_order(3)),
            Order.from_dict(make_order(8, status="paid")),
            Order.from_dict(make_order(5)),
        ]

        assert latest_pending(orders).id == 5
        assert latest_pending([]) is None

    def test_order_detail_text(self) -> None:
        text = order_detail_text(Order.from_dict(make_order(55)), "en")

        assert "ORD-55" in text
        assert "Rp 80.000" in text


class TestAdminTexts:
    def test_detail(self) -> None:
        text = payment_detail_text(Payment.from_dict(make_payment(9)), "en")

        assert "ORD-55" in text
        assert "proofs/9.jpg" in text

    def test_decisions(self) -> None:
        assert "9" in decision_text(PaymentDecisionResult(True), 9, "en", confirmed=True)
        refused = decision_text(
            PaymentDecisionResult(False, "already_processed", payment_status="completed"), 9, "en", True
        )
        assert refused != decision_text(PaymentDecisionResult(False, "processing_error"), 9, "en", True)


class TestReportError:
    @pytest.mark.asyncio
    async def test_unauthorized_clears_stored_session(self, container, logged_in, mocker) -> None:
        message = _message(mocker)

        await report_error(message, "en", SessionExpired())

        message.answer.assert_awaited_once_with("⌛ Your session expired, please log in again")
        assert logged_in.token(USER_ID) is None

    @pytest.mark.asyncio
    async def test_validation_error_keeps_session(self, container, logged_in, mocker) -> None:
        message = _message(mocker)

        await report_error(message, "en", NotesTooLong(300, 200))

        assert logged_in.token(USER_ID) == "tok-123"


class TestPaymentScreen:
    @pytest.mark.asyncio
    async def test_submit_shows_order_code_and_history_link(self, container, logged_in, api, mocker) -> None:
        api.orders[55] = make_order(55)
        flow = container.checkouts.start(USER_ID, 55)
        await flow.load()
        flow.attach_proof("bukti.jpg", b"jpeg-bytes")
        callback = _callback(mocker, "pay_submit")

        await pay_submit(callback, mocker.AsyncMock())

        edit = callback.message.edit_text.await_args
        assert "ORD-55" in edit.args[0]
        markup = edit.kwargs["reply_markup"]
        assert markup.inline_keyboard[0][0].callback_data == "orders_page_0"
        assert markup.inline_keyboard[0][0].text == "📋 Lihat Pesanan Saya"
        assert container.checkouts.get(USER_ID) is None

    @pytest.mark.asyncio
    async def test_unreachable_api_is_reported_before_no_payment(self, container, logged_in, api, mocker) -> None:
        api.orders[55] = make_order(55)
        api.fail["get_order"] = ApiUnavailable("timeout")
        message = _message(mocker)

        await open_checkout(message, USER_ID, 55)

        texts = [call.args[0] for call in message.answer.await_args_list]
        assert texts == [
            "📡 Server tidak dapat dihubungi, coba lagi nanti",
            "ℹ️ Tidak ada pembayaran yang menunggu untuk pesanan ini.",
        ]

    @pytest.mark.asyncio
    async def test_missing_order_shows_only_no_payment(self, container, logged_in, mocker) -> None:
        message = _message(mocker)

        await open_checkout(message, USER_ID, 999)

        message.answer.assert_awaited_once_with(
            "ℹ️ Tidak ada pembayaran yang menunggu untuk pesanan ini.", reply_markup=None
        )
