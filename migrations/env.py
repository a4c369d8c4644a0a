import asyncio
import logging
from typing import Any

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

import models  # noqa
from src.core.database.base import Base
from src.main.config import config as app_config

logger = logging.getLogger("alembic.env")


def database_url() -> str:
    """`alembic -x dsn=...` overrides the DSN built from the application env."""
    overrides = context.get_x_argument(as_dictionary=True)
    return overrides.get("dsn") or app_config.postgres.dsn_async


def migrate(**configure_options: Any) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        **configure_options,
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_on_connection(connection: Connection) -> None:
    migrate(connection=connection)


async def migrate_online() -> None:
    engine = create_async_engine(database_url())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(migrate_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    # emits SQL to stdout instead of touching the database
    migrate(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    logger.info("Applying migrations to %s", app_config.postgres.url)
    asyncio.run(migrate_online())
