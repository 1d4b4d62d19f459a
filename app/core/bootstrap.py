"""Application bootstrap wiring bot, dispatcher, storage and API services."""
from __future__ import annotations

from dataclasses import dataclass

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage

from app.core.auth_context import AuthContext
from app.core.config import Settings
from app.core.events import SignalStore
from app.core.session_store import SessionStore
from app.integrations.api_client import KantinApiClient
from app.services.cart_service import CartRegistry
from app.services.checkout_service import CheckoutRegistry
from app.services.menu_service import MenuService
from logging_config import logger


@dataclass
class AppContainer:
    """Services shared by all handlers."""

    settings: Settings
    api: KantinApiClient
    store: SessionStore
    signals: SignalStore
    auth: AuthContext
    carts: CartRegistry
    checkouts: CheckoutRegistry
    menus: MenuService


def build_services(settings: Settings, api: KantinApiClient | None = None) -> AppContainer:
    """Create the API client and the per-user state services."""
    api = api or KantinApiClient(settings.api.base_url, timeout=settings.api.timeout)
    store = SessionStore(settings.redis_url)
    signals = SignalStore()
    auth = AuthContext(store, api, signals)
    return AppContainer(
        settings=settings,
        api=api,
        store=store,
        signals=signals,
        auth=auth,
        carts=CartRegistry(api, auth, signals),
        checkouts=CheckoutRegistry(api, auth, signals),
        menus=MenuService(api),
    )


def build_storage(redis_url: str | None) -> BaseStorage:
    # Priority 1: Redis (survives restarts)
    if redis_url:
        try:
            storage = RedisStorage.from_url(redis_url)
            logger.info("Using Redis for FSM storage")
            return storage
        except ValueError as e:
            logger.warning("Failed to initialize Redis storage, using MemoryStorage: %s", e)

    # Priority 2: Memory (local dev)
    logger.info("Using MemoryStorage for FSM, states are lost on restart")
    return MemoryStorage()


def build_application(settings: Settings) -> tuple[Bot, Dispatcher, AppContainer]:
    """Create bot runtime components from configuration."""
    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dispatcher = Dispatcher(storage=build_storage(settings.redis_url))
    container = build_services(settings)
    logger.info(
        "Kantin API at %s (session store: %s)", settings.api.base_url, container.store.backend
    )
    return bot, dispatcher, container
