from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_session
from src.system.dependencies import get_health_service
from src.system.schemas import HealthCheckResponse
from src.system.services import HealthService

router = APIRouter()


@router.api_route(
    "/health/",
    methods=["GET", "HEAD"],
    response_model=HealthCheckResponse,
)
async def check_health(
    health_service: Annotated[HealthService, Depends(get_health_service)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthCheckResponse:
    """Liveness check; answers 500 when the database does not respond to `SELECT 1`."""
    return await health_service.get_status(session=session)
