import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from loggers import get_logger
from src.main.config import Config, config

logger = get_logger(__name__)

_sentry_initialized = False


def _skip_reason(settings: Config) -> str | None:
    if settings.app.DEBUG or settings.app.TESTING:
        return "DEBUG/TESTING enabled"
    if not (settings.sentry.SENTRY_ENABLED and settings.sentry.SENTRY_DSN):
        return "Sentry disabled or DSN empty"
    return None


def sentry_options(settings: Config) -> dict[str, Any]:
    """
    Client options shared by the web app, the Celery worker and the scripts.

    Errors are captured explicitly at the boundaries; the logging integration
    only records breadcrumbs and turns CRITICAL lines into events.
    """
    return {
        "dsn": settings.sentry.SENTRY_DSN,
        "environment": settings.sentry.SENTRY_ENV,
        "release": settings.app.VERSION,
        "send_default_pii": False,
        "integrations": [
            CeleryIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.CRITICAL),
        ],
    }


def init_sentry() -> None:
    global _sentry_initialized

    if _sentry_initialized:
        return
    reason = _skip_reason(config)
    if reason:
        logger.info("%s. Skipping Sentry initialization.", reason)
        return

    sentry_sdk.init(**sentry_options(config))
    _sentry_initialized = True
    logger.info("Sentry initialized for environment '%s'.", config.sentry.SENTRY_ENV)
