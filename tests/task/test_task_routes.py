from __future__ import annotations

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.utils.datetime_utils import get_unix_timestamp
from src.user.auth.codec import JWTCodec
from src.user.repositories import UserRepository
from tests.factories.user_factory import build_user_data

TASKS_URL = "/v1/tasks"


async def _create_user(
    session_factory: async_sessionmaker[AsyncSession], username: str
) -> int:
    async with session_factory() as session:
        user = await UserRepository().create(
            session, data=build_user_data(username=username), commit=True
        )
        return user.id


def _auth(codec: JWTCodec, user_id: int) -> dict[str, str]:
    token = codec.encode({"sub": user_id, "exp": get_unix_timestamp() + 60})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def owner_headers(
    session_factory: async_sessionmaker[AsyncSession], codec: JWTCodec
) -> dict[str, str]:
    return _auth(codec, await _create_user(session_factory, "owner"))


@pytest_asyncio.fixture
async def stranger_headers(
    session_factory: async_sessionmaker[AsyncSession], codec: JWTCodec
) -> dict[str, str]:
    return _auth(codec, await _create_user(session_factory, "stranger"))


async def _create_task(
    client: httpx.AsyncClient, headers: dict[str, str], **fields: object
) -> int:
    response = await client.post(TASKS_URL, json=fields, headers=headers)
    assert response.status_code == 201
    return int(response.json()["id"])


@pytest.mark.asyncio
async def test_create_and_get_task(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    response = await db_client.post(
        TASKS_URL, json={"name": "Write tests", "priority": 2}, headers=owner_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Task created"

    task = await db_client.get(f"{TASKS_URL}/{body['id']}", headers=owner_headers)
    assert task.status_code == 200
    assert task.json() == {
        "id": body["id"],
        "name": "Write tests",
        "priority": 2,
        "is_completed": False,
    }


@pytest.mark.asyncio
async def test_list_tasks_is_ordered_by_name_and_scoped_to_user(
    db_client: httpx.AsyncClient,
    owner_headers: dict[str, str],
    stranger_headers: dict[str, str],
) -> None:
    await _create_task(db_client, owner_headers, name="b-task")
    await _create_task(db_client, owner_headers, name="a-task", is_completed=True)
    await _create_task(db_client, stranger_headers, name="c-task")

    response = await db_client.get(TASKS_URL, headers=owner_headers)

    assert response.status_code == 200
    assert [task["name"] for task in response.json()] == ["a-task", "b-task"]


@pytest.mark.asyncio
async def test_update_task(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    task_id = await _create_task(db_client, owner_headers, name="draft", priority=1)

    response = await db_client.patch(
        f"{TASKS_URL}/{task_id}",
        json={"is_completed": True, "priority": None},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Task updated", "rows": 1}
    task = (await db_client.get(f"{TASKS_URL}/{task_id}", headers=owner_headers)).json()
    assert task["name"] == "draft"
    assert task["priority"] is None
    assert task["is_completed"] is True


@pytest.mark.asyncio
async def test_empty_patch_updates_nothing(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    task_id = await _create_task(db_client, owner_headers, name="draft")

    response = await db_client.patch(
        f"{TASKS_URL}/{task_id}", json={}, headers=owner_headers
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Task updated", "rows": 0}


@pytest.mark.asyncio
async def test_delete_task(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    task_id = await _create_task(db_client, owner_headers, name="obsolete")

    response = await db_client.delete(f"{TASKS_URL}/{task_id}", headers=owner_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted", "rows": 1}
    missing = await db_client.get(f"{TASKS_URL}/{task_id}", headers=owner_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PATCH", "DELETE"])
async def test_tasks_of_other_users_look_missing(
    db_client: httpx.AsyncClient,
    owner_headers: dict[str, str],
    stranger_headers: dict[str, str],
    method: str,
) -> None:
    task_id = await _create_task(db_client, owner_headers, name="private")

    response = await db_client.request(
        method,
        f"{TASKS_URL}/{task_id}",
        headers=stranger_headers,
        json={"name": "hijacked"} if method == "PATCH" else None,
    )

    assert response.status_code == 404
    assert response.json() == {
        "message": f"The task with the id {task_id} was not found"
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({}, "missing name"),
        ({"name": ""}, "invalid name"),
        ({"name": "x", "priority": "high"}, "invalid priority"),
        ({"name": "x", "owner": 3}, "invalid owner"),
    ],
)
async def test_create_task_validation(
    db_client: httpx.AsyncClient,
    owner_headers: dict[str, str],
    body: dict[str, object],
    message: str,
) -> None:
    response = await db_client.post(TASKS_URL, json=body, headers=owner_headers)

    assert response.status_code == 400
    assert response.json() == {"message": message}


@pytest.mark.asyncio
async def test_patch_rejects_null_name(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    task_id = await _create_task(db_client, owner_headers, name="draft")

    response = await db_client.patch(
        f"{TASKS_URL}/{task_id}", json={"name": None}, headers=owner_headers
    )

    assert response.status_code == 400
    assert response.json() == {"message": "invalid name"}


@pytest.mark.asyncio
async def test_tasks_require_authentication(db_client: httpx.AsyncClient) -> None:
    response = await db_client.get(TASKS_URL)

    assert response.status_code == 400
    assert response.json() == {"message": "incomplete authorization header"}


@pytest.mark.asyncio
async def test_unsupported_method(
    db_client: httpx.AsyncClient, owner_headers: dict[str, str]
) -> None:
    response = await db_client.put(f"{TASKS_URL}/1", json={}, headers=owner_headers)

    assert response.status_code == 405
