from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from loggers import get_logger
from src.core.database.base import Base as SQLAlchemyBase

logger = get_logger(__name__)

T = TypeVar("T", bound=SQLAlchemyBase)


class BaseRepository(Generic[T]):
    """
    Generic data access for one mapped model.

    The session always comes from the caller. Write methods take `commit`:
    with it the change is committed (and rolled back on a database error),
    without it the change is only flushed so the caller can batch it.
    """

    model: type[T]

    def __init__(self) -> None:
        if not hasattr(self, "model"):
            raise NotImplementedError("Subclasses must define class variable 'model'")

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def _select(self, **filters: Any) -> Select[tuple[T]]:
        return select(self.model).filter_by(**filters)

    @asynccontextmanager
    async def _writing(self, session: AsyncSession, commit: bool) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError:
            if commit:
                await session.rollback()
            raise

    async def _finish(
        self,
        session: AsyncSession,
        commit: bool,
        action: str,
        instance: T | None = None,
    ) -> None:
        if not commit:
            await session.flush()
            logger.debug("%s %s [Staged, pending commit].", self.model_name, action)
            return
        await session.commit()
        if instance is not None:
            await session.refresh(instance)
        logger.info("%s %s [Committed].", self.model_name, action)

    async def create(
        self, session: AsyncSession, data: dict[str, Any], commit: bool = False
    ) -> T:
        async with self._writing(session, commit):
            instance = self.model(**data)
            session.add(instance)
            await self._finish(session, commit, "created", instance)
            return instance

    async def exists(self, session: AsyncSession, **filters: Any) -> bool:
        query = select(1).select_from(self.model).filter_by(**filters).limit(1)
        return bool(await session.scalar(select(query.exists())))

    async def get_single(self, session: AsyncSession, **filters: Any) -> T | None:
        result = await session.execute(self._select(**filters).limit(1))
        return result.scalars().first()

    async def get_list(
        self,
        session: AsyncSession,
        order_by: ColumnElement[Any] | None = None,
        **filters: Any,
    ) -> list[T]:
        """All matching records; newest first (by `id`) unless `order_by` is given."""
        query = self._select(**filters)
        if order_by is None and hasattr(self.model, "id"):
            order_by = getattr(self.model, "id").desc()
        if order_by is not None:
            query = query.order_by(order_by)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def update(
        self,
        session: AsyncSession,
        data: dict[str, Any],
        commit: bool = False,
        **filters: Any,
    ) -> T | None:
        """Apply `data` to the first record matching `filters`; None when nothing matches."""
        self._ensure_filters_present(filters)
        async with self._writing(session, commit):
            instance = await self.get_single(session, **filters)
            if instance is None:
                logger.debug(
                    "%s update skipped [NotFound]. filters=%s", self.model_name, filters
                )
                return None
            for field, value in data.items():
                setattr(instance, field, value)
            await self._finish(session, commit, "updated", instance)
            return instance

    async def delete(
        self, session: AsyncSession, commit: bool = False, **filters: Any
    ) -> T | None:
        self._ensure_filters_present(filters)
        async with self._writing(session, commit):
            instance = await self.get_single(session, **filters)
            if instance is None:
                return None
            await session.delete(instance)
            await self._finish(session, commit, "deleted")
            return instance

    async def delete_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        commit: bool = False,
    ) -> int:
        """Bulk delete every record matching `conditions`; returns the number removed."""
        if not conditions:
            raise ValueError("At least one condition must be provided for bulk delete")
        async with self._writing(session, commit):
            result = await session.execute(delete(self.model).where(*conditions))
            removed = int(getattr(result, "rowcount", 0) or 0)
            await self._finish(session, commit, f"bulk delete removed {removed} rows")
            return removed

    @staticmethod
    def _ensure_filters_present(filters: dict[str, Any]) -> None:
        if not filters:
            raise ValueError("At least one filter must be provided for update/delete")
