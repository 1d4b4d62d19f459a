"""
Kantin Telegram Bot - Main Module

Telegram client for the Kantin campus canteen API: browse restaurants,
fill a multi-restaurant cart, check out, upload proof of payment and,
for staff, verify submitted payments.
Architecture: aiogram 3.x routers over a shared service container.
"""
from __future__ import annotations

import asyncio
import signal
import sys
from types import FrameType

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext
from aiogram.types import ErrorEvent

from app.core.bootstrap import build_application
from app.core.config import load_settings
from app.core.sentry_integration import capture_exception, init_sentry
from handlers.common.utils import get_lang, main_menu_markup
from localization import get_text
from logging_config import logger, setup_logging

# =============================================================================
# CONFIGURATION
# =============================================================================

settings = load_settings()
if settings.debug:
    setup_logging("DEBUG")

sentry_enabled = init_sentry(settings.sentry_dsn, environment=settings.environment)

# =============================================================================
# APPLICATION BOOTSTRAP
# =============================================================================

bot, dp, container = build_application(settings)


# =============================================================================
# FALLBACK ROUTER (CATCH-ALL HANDLERS)
# =============================================================================

fallback_router = Router(name="fallback")


@fallback_router.message(F.text)
async def fallback_text_handler(message: types.Message, state: FSMContext) -> None:
    """Unknown text: point the user back to the main menu."""
    if not message.from_user:
        return
    user_id = message.from_user.id
    lang = get_lang(user_id)
    logger.debug("Unknown message from %s (state: %s)", user_id, await state.get_state())
    await message.answer(
        get_text(lang, "main_menu"), reply_markup=await main_menu_markup(user_id, lang)
    )


@fallback_router.callback_query()
async def fallback_callback_handler(callback: types.CallbackQuery) -> None:
    """Stale buttons from old messages."""
    logger.debug("Unhandled callback from %s: %s", callback.from_user.id, callback.data)
    await callback.answer()


@dp.errors()
async def errors_handler(event: ErrorEvent) -> bool:
    """Log and report handler errors that nothing else caught."""
    update = event.update
    logger.error(
        "Unhandled error in update %s: %s",
        update.update_id,
        event.exception,
        exc_info=event.exception,
    )
    capture_exception(event.exception, update_id=update.update_id)

    callback = update.callback_query
    if callback is not None:
        lang = get_lang(callback.from_user.id)
        await callback.answer(get_text(lang, "error_generic"), show_alert=True)
    return True


# =============================================================================
# HANDLER REGISTRATION
# =============================================================================


def _register_handlers() -> None:
    """Register all handlers in correct priority order."""
    from handlers.admin import payments as admin_payments
    from handlers.common import common_router, setup_dependencies
    from handlers.customer import menu as customer_menu
    from handlers.customer import payment_proof as customer_payment_proof
    from handlers.customer.cart import router as cart_router
    from handlers.customer.cart import setup_dependencies as setup_cart
    from handlers.customer.orders.router import router as orders_router

    setup_dependencies(container)
    setup_cart()

    # Common first: /start, cancel and login prompts win over other states
    dp.include_router(common_router)
    dp.include_router(customer_menu.router)
    dp.include_router(cart_router)
    dp.include_router(customer_payment_proof.router)
    dp.include_router(orders_router)
    dp.include_router(admin_payments.router)

    # Fallback must be last
    dp.include_router(fallback_router)


# =============================================================================
# LIFECYCLE HOOKS
# =============================================================================


async def on_startup() -> None:
    try:
        await bot.delete_webhook(drop_pending_updates=True)
        logger.info("Polling mode activated")
    except Exception as e:
        logger.warning("Failed to delete webhook: %s", e)


async def on_shutdown() -> None:
    await container.api.close()
    await bot.session.close()
    logger.info("Bot stopped")


# =============================================================================
# SIGNAL HANDLING
# =============================================================================

shutdown_event = asyncio.Event()


def signal_handler(sig: int, frame: FrameType | None) -> None:
    """Handle termination signals."""
    logger.info("Received signal %s, initiating shutdown...", sig)
    shutdown_event.set()


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


async def main() -> None:
    """Main bot entry point."""
    logger.info("=" * 50)
    logger.info("Starting Kantin Bot")
    logger.info("API: %s", settings.api.base_url)
    logger.info("Session store: %s", container.store.backend)
    logger.info("Sentry: %s", "enabled" if sentry_enabled else "disabled")
    logger.info("=" * 50)

    await on_startup()
    polling_task = asyncio.create_task(
        dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            handle_signals=False,
        )
    )

    try:
        await shutdown_event.wait()
        logger.info("Shutting down...")
        polling_task.cancel()
        try:
            await polling_task
        except asyncio.CancelledError:
            pass
    finally:
        await on_shutdown()


# =============================================================================
# STARTUP
# =============================================================================

if __name__ == "__main__":
    _register_handlers()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error("Bot crashed: %s", e)
        sys.exit(1)
