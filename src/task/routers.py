from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_session
from src.task.dependencies import get_task_service
from src.task.schemas import (
    TaskChangedResponse,
    TaskCreatedResponse,
    TaskCreateModel,
    TaskUpdateModel,
    TaskViewModel,
)
from src.task.services import TaskService
from src.user.auth.dependencies import get_current_user_id

router = APIRouter()

CurrentUserId = Annotated[int, Depends(get_current_user_id)]
Service = Annotated[TaskService, Depends(get_task_service)]
Session = Annotated[AsyncSession, Depends(get_session)]


@router.get("", response_model=list[TaskViewModel])
async def list_tasks(
    user_id: CurrentUserId, service: Service, session: Session
) -> list[TaskViewModel]:
    tasks = await service.list_for_user(session, user_id)
    return [TaskViewModel.model_validate(task) for task in tasks]


@router.post("", status_code=201, response_model=TaskCreatedResponse)
async def create_task(
    data: TaskCreateModel,
    user_id: CurrentUserId,
    service: Service,
    session: Session,
) -> TaskCreatedResponse:
    task = await service.create_for_user(session, data, user_id)
    return TaskCreatedResponse(id=task.id)


@router.get("/{task_id}", response_model=TaskViewModel)
async def get_task(
    task_id: int, user_id: CurrentUserId, service: Service, session: Session
) -> TaskViewModel:
    task = await service.get_for_user(session, task_id, user_id)
    return TaskViewModel.model_validate(task)


@router.patch("/{task_id}", response_model=TaskChangedResponse)
async def update_task(
    task_id: int,
    data: TaskUpdateModel,
    user_id: CurrentUserId,
    service: Service,
    session: Session,
) -> TaskChangedResponse:
    rows = await service.update_for_user(session, task_id, user_id, data)
    return TaskChangedResponse(message="Task updated", rows=rows)


@router.delete("/{task_id}", response_model=TaskChangedResponse)
async def delete_task(
    task_id: int, user_id: CurrentUserId, service: Service, session: Session
) -> TaskChangedResponse:
    rows = await service.delete_for_user(session, task_id, user_id)
    return TaskChangedResponse(message="Task deleted", rows=rows)
