from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.task.models import Task
from src.task.repositories import TaskRepository
from src.user.repositories import UserRepository
from tests.factories.user_factory import build_user_data


@pytest.fixture
def users() -> UserRepository:
    return UserRepository()


@pytest.fixture
def tasks() -> TaskRepository:
    return TaskRepository()


async def _owner_id(session: AsyncSession, users: UserRepository) -> int:
    user = await users.create(session, data=build_user_data(), commit=True)
    return user.id


def test_repository_requires_model() -> None:
    class Incomplete(BaseRepository):  # type: ignore[type-arg]
        pass

    with pytest.raises(NotImplementedError):
        Incomplete()


@pytest.mark.asyncio
async def test_create_get_exists_and_list(
    db_session: AsyncSession, users: UserRepository
) -> None:
    created = await users.create(
        db_session, data=build_user_data(username="alice"), commit=True
    )

    assert created.id is not None
    assert await users.exists(db_session, username="alice") is True
    assert await users.exists(db_session, username="bob") is False
    assert (await users.get_single(db_session, id=created.id)) is created
    assert await users.get_list(db_session) == [created]


@pytest.mark.asyncio
async def test_create_without_commit_is_flushed(
    db_session: AsyncSession, users: UserRepository
) -> None:
    created = await users.create(db_session, data=build_user_data(username="carol"))

    assert created.id is not None
    await db_session.rollback()
    assert await users.exists(db_session, username="carol") is False


@pytest.mark.asyncio
async def test_get_list_orders_newest_first_by_default(
    db_session: AsyncSession, users: UserRepository, tasks: TaskRepository
) -> None:
    owner_id = await _owner_id(db_session, users)
    for name in ("first", "second", "third"):
        await tasks.create(
            db_session, data={"name": name, "user_id": owner_id}, commit=True
        )

    newest_first = await tasks.get_list(db_session, user_id=owner_id)
    by_name = await tasks.get_list(db_session, order_by=Task.name, user_id=owner_id)

    assert [task.name for task in newest_first] == ["third", "second", "first"]
    assert [task.name for task in by_name] == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_update_and_delete(
    db_session: AsyncSession, users: UserRepository, tasks: TaskRepository
) -> None:
    owner_id = await _owner_id(db_session, users)
    task = await tasks.create(
        db_session, data={"name": "draft", "user_id": owner_id}, commit=True
    )

    updated = await tasks.update(
        db_session, data={"is_completed": True}, commit=True, id=task.id
    )
    missing = await tasks.update(db_session, data={"name": "x"}, id=task.id + 100)
    deleted = await tasks.delete(db_session, commit=True, id=task.id)

    assert updated is not None and updated.is_completed is True
    assert missing is None
    assert deleted is not None
    assert await tasks.get_single(db_session, id=task.id) is None


@pytest.mark.asyncio
async def test_update_and_delete_require_filters(
    db_session: AsyncSession, tasks: TaskRepository
) -> None:
    with pytest.raises(ValueError):
        await tasks.update(db_session, data={"name": "x"})
    with pytest.raises(ValueError):
        await tasks.delete(db_session)
    with pytest.raises(ValueError):
        await tasks.delete_where(db_session)


@pytest.mark.asyncio
async def test_delete_where_returns_row_count(
    db_session: AsyncSession, users: UserRepository, tasks: TaskRepository
) -> None:
    owner_id = await _owner_id(db_session, users)
    for name in ("a", "b", "c"):
        await tasks.create(
            db_session, data={"name": name, "user_id": owner_id}, commit=True
        )

    removed = await tasks.delete_where(db_session, Task.name != "b", commit=True)

    assert removed == 2
    assert [t.name for t in await tasks.get_list(db_session)] == ["b"]
