from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.core.errors import handlers
from src.core.errors.exceptions import (
    CoreException,
    InfrastructureException,
    InstanceAlreadyExistsException,
    InstanceNotFoundException,
    MalformedRequestException,
    UnauthorizedException,
)
from src.system import routers as system_routers
from src.task import routers as task_routers
from src.user import routers as user_routers

# Starlette resolves handlers along the exception MRO, so TokenExpiredException
# and friends land on the UnauthorizedException entry.
EXCEPTION_HANDLERS: dict[type[Exception], object] = {
    RequestValidationError: handlers.RequestValidationExceptionHandler(),
    ValidationError: handlers.ValidationErrorExceptionHandler(),
    CoreException: handlers.CoreExceptionHandler(),
    MalformedRequestException: handlers.MalformedRequestExceptionHandler(),
    UnauthorizedException: handlers.UnauthorizedExceptionHandler(),
    InstanceNotFoundException: handlers.InstanceNotFoundExceptionHandler(),
    InstanceAlreadyExistsException: handlers.InstanceAlreadyExistsExceptionHandler(),
    InfrastructureException: handlers.InfrastructureExceptionHandler(),
}


def build_v1_router() -> APIRouter:
    router = APIRouter(prefix="/v1")
    router.include_router(user_routers.router, prefix="/users", tags=["Users"])
    router.include_router(task_routers.router, prefix="/tasks", tags=["Tasks"])
    return router


def include_routers(app: FastAPI) -> None:
    """Mount the versioned API under `/v1`; the health check stays unversioned."""
    app.include_router(build_v1_router())
    app.include_router(system_routers.router, tags=["System"])


def include_exceptions_handlers(app: FastAPI) -> None:
    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handlers.as_exception_handler(handler))
