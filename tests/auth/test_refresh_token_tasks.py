from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.utils.datetime_utils import get_unix_timestamp
from src.main.config import Config
from src.user.auth import tasks as tasks_module
from src.user.auth.dependencies import build_refresh_token_store


@pytest.mark.asyncio
async def test_sweep_deletes_expired_tokens(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Config,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async with session_factory() as session:
        store = build_refresh_token_store(session, settings)
        await store.create("expired-token", get_unix_timestamp() - 10)
        await store.create("live-token", get_unix_timestamp() + 3600)
    monkeypatch.setattr(tasks_module, "local_async_session", session_factory)

    deleted = await tasks_module._delete_expired_refresh_tokens()

    assert deleted == 1
    async with session_factory() as session:
        store = build_refresh_token_store(session, settings)
        assert await store.get_by_token("live-token") is not None
        assert await store.get_by_token("expired-token") is None


@pytest.mark.asyncio
async def test_sweep_reports_database_errors(
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    error = SQLAlchemyError("db down")
    store = Mock()
    store.delete_expired = AsyncMock(side_effect=error)
    sentry_mock = Mock()
    monkeypatch.setattr(tasks_module, "local_async_session", session_factory)
    monkeypatch.setattr(
        tasks_module, "build_refresh_token_store", lambda session, settings: store
    )
    monkeypatch.setattr(tasks_module.sentry_sdk, "capture_exception", sentry_mock)

    assert await tasks_module._delete_expired_refresh_tokens() == 0
    sentry_mock.assert_called_once_with(error)


def test_task_returns_summary(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_sweep() -> int:
        return 3

    monkeypatch.setattr(tasks_module, "_delete_expired_refresh_tokens", fake_sweep)

    assert tasks_module.delete_expired_refresh_tokens() == (
        "Deleted 3 expired refresh tokens."
    )


def test_task_is_scheduled_hourly() -> None:
    from celery_tasks.main import celery_app

    entry = celery_app.conf.beat_schedule["delete_expired_refresh_tokens_hourly"]

    assert entry["task"] == "delete_expired_refresh_tokens"
    assert entry["schedule"].minute == {0}


def test_task_is_registered_under_schedule_name() -> None:
    assert tasks_module.delete_expired_refresh_tokens.name == "delete_expired_refresh_tokens"
