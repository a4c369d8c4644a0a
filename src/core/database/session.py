from collections.abc import AsyncGenerator
from typing import cast

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """
    Provide the session factory stored on app.state by the lifespan.
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError(
            "Database session factory is not initialized. Ensure startup lifecycle ran."
        )
    return cast(async_sessionmaker[AsyncSession], session_factory)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """One session per request; closed when the response is sent."""
    async with get_session_factory(request)() as session:
        yield session
