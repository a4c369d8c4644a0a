from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scripts.delete_expired_refresh_tokens import delete_expired_refresh_tokens
from src.core.utils.datetime_utils import get_unix_timestamp
from src.main.config import Config
from src.user.auth.dependencies import build_refresh_token_store


@pytest.mark.asyncio
async def test_script_sweeps_expired_tokens(
    session_factory: async_sessionmaker[AsyncSession], settings: Config
) -> None:
    now = get_unix_timestamp()
    async with session_factory() as session:
        store = build_refresh_token_store(session, settings)
        for offset in (-7200, -1, 3600):
            await store.create(f"token{offset}", now + offset)

    assert await delete_expired_refresh_tokens(session_factory, settings) == 2
    assert await delete_expired_refresh_tokens(session_factory, settings) == 0
