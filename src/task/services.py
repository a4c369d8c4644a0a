from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.services import BaseService
from src.task.models import Task
from src.task.repositories import TaskRepository
from src.task.schemas import TaskCreateModel, TaskUpdateModel

logger = get_logger(__name__)


class TaskService(BaseService[Task, TaskCreateModel, TaskUpdateModel, TaskRepository]):
    """Tasks are always addressed through their owner; other users' ids look missing."""

    not_found_message = "The task with the id {id} was not found"

    async def list_for_user(self, session: AsyncSession, user_id: int) -> list[Task]:
        return await self.get_list(
            session, order_by=self.repository.model.name, user_id=user_id
        )

    async def get_for_user(
        self, session: AsyncSession, task_id: int, user_id: int
    ) -> Task:
        return await self.get_single_or_404(session, id=task_id, user_id=user_id)

    async def create_for_user(
        self, session: AsyncSession, data: TaskCreateModel, user_id: int
    ) -> Task:
        task = await self.create(session, data, user_id=user_id)
        logger.info("[Tasks] User id=%s created task id=%s.", user_id, task.id)
        return task

    async def update_for_user(
        self,
        session: AsyncSession,
        task_id: int,
        user_id: int,
        data: TaskUpdateModel,
    ) -> int:
        """Return the number of updated rows; an empty patch touches nothing."""
        await self.get_for_user(session, task_id, user_id)
        if not data.model_fields_set:
            return 0
        updated = await self.update(session, data, id=task_id, user_id=user_id)
        return 0 if updated is None else 1

    async def delete_for_user(
        self, session: AsyncSession, task_id: int, user_id: int
    ) -> int:
        await self.get_for_user(session, task_id, user_id)
        deleted = await self.delete(session, id=task_id, user_id=user_id)
        return 0 if deleted is None else 1
