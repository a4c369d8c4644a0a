from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from loggers import get_logger
from src.core.database.lifecycle import on_database_shutdown, on_database_startup
from src.main.config import config
from src.main.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Engine and session factory live on `app.state` for the lifetime of the process."""
    init_sentry()
    postgres = config.postgres
    await on_database_startup(app, postgres.dsn_async, echo=postgres.DB_ECHO)
    logger.info("%s %s started.", config.app.PROJECT_NAME, config.app.VERSION)
    try:
        yield
    finally:
        await on_database_shutdown(app)
