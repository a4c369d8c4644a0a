import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.database.lifecycle import create_engine
from src.main.config import Config, get_settings
from src.user.auth.dependencies import build_refresh_token_store


async def delete_expired_refresh_tokens(
    session_factory: async_sessionmaker[AsyncSession], settings: Config
) -> int:
    """
    Removes every whitelisted refresh token whose expiry is already in the past.
    """
    async with session_factory() as session:
        store = build_refresh_token_store(session, settings)
        return await store.delete_expired()


async def main() -> None:
    settings = get_settings()
    engine = create_engine(settings.postgres.dsn_async, echo=settings.postgres.DB_ECHO)
    try:
        session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
        deleted = await delete_expired_refresh_tokens(session_factory, settings)
        print(f"Deleted {deleted} expired refresh tokens.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
