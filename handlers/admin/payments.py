"""
Admin payment verification: pending payment list, detail, confirm/reject.
"""
from __future__ import annotations

from aiogram import F, Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from app.application.orders.confirm_payment import PaymentDecisionResult, confirm_payment
from app.application.orders.reject_payment import reject_payment
from app.core.exceptions import KantinException
from app.core.utils import esc, format_datetime, format_price, parse_callback_id
from app.domain.order import Payment
from app.keyboards import payment_decision_keyboard, payments_keyboard
from handlers.common import utils
from handlers.common.utils import button, get_lang, report_error, show_screen
from localization import get_text
from logging_config import logger

router = Router(name="admin_payments")


def payment_detail_text(payment: Payment, lang: str) -> str:
    order = payment.order
    text = get_text(
        lang,
        "admin_payment_detail",
        id=payment.id,
        code=esc(order.order_code if order else payment.order_id),
        total=format_price(order.total_price) if order else "—",
        method=get_text(lang, f"method_{payment.payment_method}"),
        status=get_text(lang, f"payment_status_{payment.payment_status}"),
        paid_at=format_datetime(payment.paid_at),
    )
    if payment.notes:
        text = f"{text}\n📝 {esc(payment.notes)}"
    if payment.proof_image:
        text = f"{text}\n📎 {esc(payment.proof_image)}"
    return text


def decision_text(
    result: PaymentDecisionResult, payment_id: int, lang: str, confirmed: bool
) -> str:
    if result.ok:
        return get_text(lang, "payment_confirmed" if confirmed else "payment_rejected", id=payment_id)
    if result.error_key == "already_processed":
        return get_text(
            lang,
            "payment_already_processed",
            status=get_text(lang, f"payment_status_{result.payment_status}"),
        )
    if result.error_key == "login_required":
        return get_text(lang, "login_required")
    if result.error_key == "not_found":
        return get_text(lang, "payment_not_found")
    return get_text(lang, "payment_processing_error")


async def _staff_token(event: types.Message | types.CallbackQuery) -> str | None:
    """Token of a signed-in admin, or None after telling the user why."""
    user_id = event.from_user.id
    lang = get_lang(user_id)
    auth = utils.get_deps().auth
    user = auth.user(user_id)
    token = auth.token(user_id)
    if user is None or not token:
        text = get_text(lang, "login_required")
    elif not user.is_staff:
        text = get_text(lang, "not_staff")
    else:
        return token

    if isinstance(event, types.CallbackQuery):
        await event.answer(text, show_alert=True)
    else:
        await event.answer(text)
    return None


async def show_payments(
    event: types.Message | types.CallbackQuery, state: FSMContext, page: int = 0
) -> None:
    token = await _staff_token(event)
    if token is None:
        return
    lang = get_lang(event.from_user.id)
    try:
        payments = await utils.get_deps().api.admin_list_payments(token)
    except KantinException as e:
        await report_error(event, lang, e, state)
        return

    pending = [payment for payment in payments if payment.is_pending]
    if not pending:
        await show_screen(event, get_text(lang, "admin_payments_empty"))
        return
    await show_screen(
        event,
        get_text(lang, "admin_payments_title"),
        reply_markup=payments_keyboard(pending, page, lang),
    )


@router.message(Command("payments"))
@router.message(button("btn_admin_payments"))
async def admin_payments(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    await state.set_state(None)
    await show_payments(message, state)


@router.callback_query(F.data.startswith("adm_payments_"))
async def admin_payments_page(callback: types.CallbackQuery, state: FSMContext) -> None:
    await show_payments(callback, state, parse_callback_id(callback.data) or 0)


@router.callback_query(F.data.startswith("adm_payment_"))
async def admin_payment_detail(callback: types.CallbackQuery, state: FSMContext) -> None:
    token = await _staff_token(callback)
    payment_id = parse_callback_id(callback.data)
    if token is None or payment_id is None:
        return
    lang = get_lang(callback.from_user.id)
    try:
        payment = await utils.get_deps().api.admin_get_payment(token, payment_id)
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return
    await show_screen(
        callback,
        payment_detail_text(payment, lang),
        reply_markup=payment_decision_keyboard(payment, lang),
    )


@router.callback_query(F.data.startswith("adm_confirm_") | F.data.startswith("adm_reject_"))
async def admin_payment_decision(callback: types.CallbackQuery, state: FSMContext) -> None:
    token = await _staff_token(callback)
    payment_id = parse_callback_id(callback.data)
    if token is None or payment_id is None:
        return
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    confirmed = callback.data.startswith("adm_confirm_")
    usecase = confirm_payment if confirmed else reject_payment

    try:
        result = await usecase(payment_id, api=utils.get_deps().api, token=token)
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return

    text = decision_text(result, payment_id, lang, confirmed)
    logger.info(
        "Admin %s %s payment %s: ok=%s error=%s",
        user_id,
        "confirmed" if confirmed else "rejected",
        payment_id,
        result.ok,
        result.error_key,
    )
    if not result.ok:
        await callback.answer(text, show_alert=True)
        return

    payment = result.payment
    if payment is not None:
        payment.payment_status = result.payment_status or payment.payment_status
        await show_screen(
            callback,
            f"{payment_detail_text(payment, lang)}\n\n{text}",
            reply_markup=payment_decision_keyboard(payment, lang),
            notice=text,
        )
    else:
        await callback.answer(text)
