"""
Payment confirmation screen for a pending order.

Customer picks QRIS or bank transfer, attaches a screenshot of the transfer
(photo or image document, max 5MB), optionally adds a note for the admin and
submits. The order can also be canceled from here.
"""
from __future__ import annotations

from aiogram import Bot, F, Router, types
from aiogram.fsm.context import FSMContext

from app.core.constants import MAX_PROOF_IMAGE_BYTES, NOTES_MAX_LENGTH
from app.core.exceptions import KantinException, ProofImageTooLarge
from app.core.utils import esc, format_price, format_size, parse_callback_id
from app.keyboards import (
    cancel_order_confirm_keyboard,
    checkout_keyboard,
    payment_submitted_keyboard,
    proof_cancel_keyboard,
)
from app.services.checkout_service import CheckoutConfirmation, CheckoutState
from handlers.common import utils
from handlers.common.states import PaymentProof
from handlers.common.utils import get_lang, main_menu_markup, report_error, show_screen
from localization import get_text
from logging_config import logger

router = Router(name="payment_proof")


def checkout_text(flow: CheckoutConfirmation, lang: str) -> str:
    order = flow.order
    if order is None or flow.state == CheckoutState.NOT_FOUND:
        return get_text(lang, "no_payment_waiting")

    lines = [get_text(lang, "checkout_title", code=esc(order.order_code or order.id))]
    for restaurant_id, items in order.items_by_restaurant().items():
        name = flow.restaurant_names.get(restaurant_id) or f"#{restaurant_id}"
        lines.append(get_text(lang, "checkout_group_header", name=esc(name)))
        for item in items:
            lines.append(
                get_text(
                    lang,
                    "checkout_item_line",
                    name=esc(item.menu.name or f"Menu {item.menu_id}"),
                    quantity=item.quantity,
                    subtotal=format_price(item.subtotal),
                )
            )
    lines.append(get_text(lang, "checkout_total", total=format_price(order.total_price)))
    lines.append(
        get_text(
            lang,
            "payment_method_title",
            method=get_text(lang, f"method_{flow.payment_method}"),
        )
    )
    lines.append(flow.payment_instructions(lang))
    lines.append("")

    if flow.proof:
        lines.append(
            get_text(
                lang,
                "proof_status_attached",
                filename=esc(flow.proof.filename),
                size=format_size(flow.proof.size),
            )
        )
    else:
        lines.append(get_text(lang, "proof_status_missing"))
    if flow.notes:
        lines.append(get_text(lang, "pay_notes_line", notes=esc(flow.notes)))
    if flow.last_error:
        lines.append(f"\n❌ {esc(flow.last_error)}")
    return "\n".join(lines)


async def show_checkout(
    event: types.Message | types.CallbackQuery,
    flow: CheckoutConfirmation,
    lang: str,
    notice: str | None = None,
) -> None:
    markup = None
    if flow.state == CheckoutState.AWAITING_PROOF:
        markup = checkout_keyboard(flow.payment_method, lang)
    await show_screen(event, checkout_text(flow, lang), reply_markup=markup, notice=notice)


async def open_checkout(
    event: types.Message | types.CallbackQuery,
    user_id: int,
    order_id: int,
    state: FSMContext | None = None,
) -> None:
    """Start a fresh confirmation flow for the order and show it."""
    lang = get_lang(user_id)
    checkouts = utils.get_deps().checkouts
    flow = checkouts.start(user_id, order_id)
    try:
        await flow.load()
    except KantinException as e:
        checkouts.finish(user_id)
        await report_error(event, lang, e, state)
        return

    if flow.state == CheckoutState.NOT_FOUND:
        checkouts.finish(user_id)
    notice = None
    if flow.load_error is not None:
        notice = utils.error_text(lang, flow.load_error)
        if isinstance(event, types.Message):
            await event.answer(notice)
    await show_checkout(event, flow, lang, notice=notice)


async def _current_flow(callback: types.CallbackQuery) -> CheckoutConfirmation | None:
    flow = utils.get_deps().checkouts.get(callback.from_user.id)
    if flow is None or flow.state not in (CheckoutState.AWAITING_PROOF, CheckoutState.SUBMITTING):
        lang = get_lang(callback.from_user.id)
        await callback.answer(get_text(lang, "no_payment_waiting"), show_alert=True)
        return None
    return flow


# =============================================================================
# OPEN / PAYMENT METHOD
# =============================================================================


@router.callback_query(F.data.startswith("pay_open_"))
async def pay_open(callback: types.CallbackQuery, state: FSMContext) -> None:
    order_id = parse_callback_id(callback.data)
    if order_id is None:
        await callback.answer()
        return
    await state.set_state(None)
    await open_checkout(callback, callback.from_user.id, order_id, state)


@router.callback_query(F.data.startswith("pay_method_"))
async def pay_method(callback: types.CallbackQuery) -> None:
    flow = await _current_flow(callback)
    if flow is None:
        return
    lang = get_lang(callback.from_user.id)
    try:
        flow.select_payment_method(callback.data.removeprefix("pay_method_"))
    except KantinException as e:
        await report_error(callback, lang, e)
        return
    await show_checkout(callback, flow, lang)


# =============================================================================
# PROOF IMAGE
# =============================================================================


@router.callback_query(F.data == "pay_proof")
async def pay_proof_prompt(callback: types.CallbackQuery, state: FSMContext) -> None:
    flow = await _current_flow(callback)
    if flow is None or not isinstance(callback.message, types.Message):
        return
    lang = get_lang(callback.from_user.id)
    await state.set_state(PaymentProof.waiting_for_proof)
    await callback.message.answer(
        get_text(lang, "proof_send_photo"), reply_markup=proof_cancel_keyboard(lang)
    )
    await callback.answer()


async def _attach(
    message: types.Message,
    state: FSMContext,
    bot: Bot,
    file: types.PhotoSize | types.Document,
    filename: str,
    content_type: str | None,
) -> None:
    if not message.from_user:
        return
    user_id = message.from_user.id
    lang = get_lang(user_id)
    flow = utils.get_deps().checkouts.get(user_id)
    if flow is None:
        await state.set_state(None)
        await message.answer(get_text(lang, "no_payment_waiting"))
        return

    try:
        # Telegram reports the size up front; skip the download when too big
        if file.file_size and file.file_size > MAX_PROOF_IMAGE_BYTES:
            raise ProofImageTooLarge(file.file_size, MAX_PROOF_IMAGE_BYTES)
        downloaded = await bot.download(file)
        content = downloaded.read() if downloaded else b""
        flow.attach_proof(filename, content, content_type)
    except KantinException as e:
        await report_error(message, lang, e)
        return

    logger.info("Proof image attached for order %s (%s bytes)", flow.order_id, len(content))
    await state.set_state(None)
    await message.answer(get_text(lang, "proof_attached"))
    await show_checkout(message, flow, lang)


@router.message(PaymentProof.waiting_for_proof, F.photo)
async def receive_proof_photo(message: types.Message, state: FSMContext, bot: Bot) -> None:
    if not message.photo:
        return
    photo = message.photo[-1]
    await _attach(message, state, bot, photo, f"proof_{photo.file_unique_id}.jpg", "image/jpeg")


@router.message(PaymentProof.waiting_for_proof, F.document)
async def receive_proof_document(message: types.Message, state: FSMContext, bot: Bot) -> None:
    document = message.document
    if not document or not message.from_user:
        return
    if not (document.mime_type or "").startswith("image/"):
        await message.answer(get_text(get_lang(message.from_user.id), "proof_send_photo"))
        return
    filename = document.file_name or f"proof_{document.file_unique_id}"
    await _attach(message, state, bot, document, filename, document.mime_type)


@router.message(PaymentProof.waiting_for_proof, utils.free_text)
async def receive_proof_other(message: types.Message) -> None:
    if not message.from_user:
        return
    await message.answer(get_text(get_lang(message.from_user.id), "proof_send_photo"))


# =============================================================================
# NOTES
# =============================================================================


@router.callback_query(F.data == "pay_notes")
async def pay_notes_prompt(callback: types.CallbackQuery, state: FSMContext) -> None:
    flow = await _current_flow(callback)
    if flow is None or not isinstance(callback.message, types.Message):
        return
    lang = get_lang(callback.from_user.id)
    await state.set_state(PaymentProof.waiting_for_notes)
    await callback.message.answer(
        get_text(lang, "pay_notes_prompt", limit=NOTES_MAX_LENGTH),
        reply_markup=proof_cancel_keyboard(lang),
    )
    await callback.answer()


@router.message(PaymentProof.waiting_for_notes, utils.free_text)
async def pay_notes_input(message: types.Message, state: FSMContext) -> None:
    if not message.from_user:
        return
    user_id = message.from_user.id
    lang = get_lang(user_id)
    flow = utils.get_deps().checkouts.get(user_id)
    if flow is None:
        await state.set_state(None)
        await message.answer(get_text(lang, "no_payment_waiting"))
        return
    try:
        flow.set_notes(message.text)
    except KantinException as e:
        await report_error(message, lang, e)
        return
    await state.set_state(None)
    await show_checkout(message, flow, lang)


# =============================================================================
# SUBMIT / CANCEL
# =============================================================================


@router.callback_query(F.data == "pay_submit")
async def pay_submit(callback: types.CallbackQuery, state: FSMContext) -> None:
    flow = await _current_flow(callback)
    if flow is None:
        return
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    if flow.state == CheckoutState.SUBMITTING:
        await callback.answer(get_text(lang, "submitting"))
        return

    try:
        await flow.submit()
    except KantinException as e:
        await report_error(callback, lang, e, state)
        if isinstance(callback.message, types.Message) and flow.last_error:
            await utils.safe_edit_message(
                callback.message,
                checkout_text(flow, lang),
                reply_markup=checkout_keyboard(flow.payment_method, lang),
            )
        return

    order_code = flow.order.order_code if flow.order else None
    utils.get_deps().checkouts.finish(user_id)
    await show_screen(
        callback,
        get_text(lang, "payment_submitted", code=esc(order_code or flow.order_id)),
        reply_markup=payment_submitted_keyboard(lang),
    )
    if isinstance(callback.message, types.Message):
        await callback.message.answer(
            get_text(lang, "main_menu"), reply_markup=await main_menu_markup(user_id, lang)
        )


@router.callback_query(F.data == "pay_cancel")
async def pay_cancel(callback: types.CallbackQuery) -> None:
    flow = await _current_flow(callback)
    if flow is None:
        return
    lang = get_lang(callback.from_user.id)
    await show_screen(
        callback,
        f"{checkout_text(flow, lang)}\n\n{get_text(lang, 'cancel_order_confirm')}",
        reply_markup=cancel_order_confirm_keyboard(lang),
    )


@router.callback_query(F.data == "pay_cancel_yes")
async def pay_cancel_yes(callback: types.CallbackQuery, state: FSMContext) -> None:
    flow = await _current_flow(callback)
    if flow is None:
        return
    user_id = callback.from_user.id
    lang = get_lang(user_id)
    try:
        await flow.cancel_order()
    except KantinException as e:
        await report_error(callback, lang, e, state)
        return
    utils.get_deps().checkouts.finish(user_id)
    await show_screen(callback, get_text(lang, "order_canceled"))


@router.callback_query(F.data == "pay_back")
async def pay_back(callback: types.CallbackQuery, state: FSMContext) -> None:
    flow = await _current_flow(callback)
    if flow is None:
        return
    if await state.get_state() in (
        PaymentProof.waiting_for_proof.state,
        PaymentProof.waiting_for_notes.state,
    ):
        await state.set_state(None)
        if isinstance(callback.message, types.Message):
            await utils.safe_delete_message(callback.message)
        await callback.answer(get_text(get_lang(callback.from_user.id), "cancelled"))
        return
    await show_checkout(callback, flow, get_lang(callback.from_user.id))
