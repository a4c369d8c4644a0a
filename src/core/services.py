from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.core.database.base import Base as SQLAlchemyBase
from src.core.database.repositories import BaseRepository
from src.core.errors.exceptions import InstanceNotFoundException
from src.core.schemas import Base as PydanticBase

ModelType = TypeVar("ModelType", bound=SQLAlchemyBase)
CreateSchema = TypeVar("CreateSchema", bound=PydanticBase)
UpdateSchema = TypeVar("UpdateSchema", bound=PydanticBase)
RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)  # type: ignore


class BaseService(Generic[ModelType, CreateSchema, UpdateSchema, RepositoryType]):
    """
    CRUD over a single repository, taking and returning pydantic schemas.

    Every write commits on its own. Flows that span several collaborators
    (login, token rotation) live in use cases instead.
    """

    not_found_message = "{model} not found"

    def __init__(self, repository: RepositoryType):
        self.repository = repository

    def _not_found(
        self, message: str | None, filters: dict[str, Any]
    ) -> InstanceNotFoundException:
        text = message or self.not_found_message.format(
            model=self.repository.model.__name__, **filters
        )
        return InstanceNotFoundException(text, additional_info=filters)

    async def create(
        self, session: AsyncSession, data: CreateSchema, **extra: Any
    ) -> ModelType:
        """`extra` carries server-side columns such as the owner id."""
        values = data.model_dump() | extra
        return await self.repository.create(session=session, data=values, commit=True)

    async def get_single(self, session: AsyncSession, **filters: Any) -> ModelType | None:
        return await self.repository.get_single(session=session, **filters)

    async def get_single_or_404(
        self, session: AsyncSession, message: str | None = None, **filters: Any
    ) -> ModelType:
        found = await self.get_single(session, **filters)
        if found is None:
            raise self._not_found(message, filters)
        return found

    async def get_list(
        self,
        session: AsyncSession,
        order_by: ColumnElement[Any] | None = None,
        **filters: Any,
    ) -> list[ModelType]:
        return await self.repository.get_list(
            session=session, order_by=order_by, **filters
        )

    async def update(
        self, session: AsyncSession, data: UpdateSchema, **filters: Any
    ) -> ModelType | None:
        """Partial update: only the fields the client actually sent are written."""
        changes = data.model_dump(exclude_unset=True)
        return await self.repository.update(
            session=session, data=changes, commit=True, **filters
        )

    async def delete(self, session: AsyncSession, **filters: Any) -> ModelType | None:
        return await self.repository.delete(session=session, commit=True, **filters)
