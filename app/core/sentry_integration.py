"""Sentry integration for error tracking and monitoring."""
from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from logging_config import logger

_initialized = False


def init_sentry(
    dsn: str | None,
    environment: str = "production",
    enable_logging: bool = True,
    sample_rate: float = 1.0,
    traces_sample_rate: float = 0.1,
) -> bool:
    """Initialize Sentry error tracking.

    Args:
        dsn: Project DSN; nothing is initialized when empty
        environment: Environment name (production, staging, development)
        enable_logging: Turn ERROR log records into Sentry events
        sample_rate: Error sampling rate (1.0 = 100%)
        traces_sample_rate: Performance tracing rate (0.1 = 10%)

    Returns:
        True if Sentry was initialized
    """
    global _initialized
    if not dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    integrations = []
    if enable_logging:
        integrations.append(
            LoggingIntegration(
                level=logging.INFO,  # breadcrumbs
                event_level=logging.ERROR,
            )
        )

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=integrations,
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
    )
    _initialized = True
    logger.info("Sentry initialized for %s environment", environment)
    return True


def capture_exception(error: Exception, **extra: Any) -> None:
    """Send an exception to Sentry with extra context blocks."""
    if not _initialized:
        return
    with sentry_sdk.new_scope() as scope:
        for key, value in extra.items():
            scope.set_context(key, value if isinstance(value, dict) else {"value": value})
        sentry_sdk.capture_exception(error)


def set_user_context(user_id: int, **extra: Any) -> None:
    """Tag subsequent events with the Telegram user (and API user, if known)."""
    if not _initialized:
        return
    sentry_sdk.set_user({"id": str(user_id), **extra})
