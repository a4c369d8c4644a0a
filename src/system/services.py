import sentry_sdk
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.errors.exceptions import InfrastructureException
from src.system.schemas import HealthCheckResponse

logger = get_logger(__name__)

PING_QUERY = text("SELECT 1")


class HealthService:
    """Reports `ok` only while the database answers a trivial query."""

    async def database_reachable(self, session: AsyncSession) -> bool:
        try:
            await session.execute(PING_QUERY)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Postgres health check failed", exc_info=exc)
            sentry_sdk.capture_exception(exc)
            return False
        return True

    async def get_status(self, session: AsyncSession) -> HealthCheckResponse:
        if await self.database_reachable(session):
            return HealthCheckResponse()
        raise InfrastructureException(
            "System health check failed", additional_info={"postgres": False}
        )
