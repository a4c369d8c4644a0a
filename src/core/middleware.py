from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import re
import time
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import sentry_sdk
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from starlette.responses import Response

from loggers import get_logger
from src.main.config import config

logger = get_logger(__name__)
timing_logger = get_logger("src.request.timing", plain_format=True)

CallNext = Callable[[Request], Awaitable[Response]]

UNEXPECTED_ERROR_MESSAGE = "Unexpected error"
DATABASE_UNAVAILABLE_MESSAGE = "Database connection error. Please try again later."
DATABASE_QUERY_MESSAGE = "Database query error."

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Content-Security-Policy": "frame-ancestors 'none'",
}
# (upper bound in seconds, label); login and register hash passwords,
# so a few hundred milliseconds still counts as fast
TIMING_BANDS = ((0.5, "[FAST]"), (2.0, "[MODERATE]"))

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"


@dataclass(slots=True)
class PostgresqlErrorHandlingResult:
    response: JSONResponse
    send_to_sentry: bool
    is_server_error: bool


def error_content(message: str, exc: BaseException) -> dict[str, Any]:
    """
    Body for a 500 response. Diagnostic detail is only attached in DEBUG mode.
    """
    content: dict[str, Any] = {"message": message}
    if config.app.DEBUG:
        frames = traceback.extract_tb(exc.__traceback__)
        origin = frames[-1] if frames else None
        content["debug"] = {
            "type": type(exc).__name__,
            "detail": str(exc),
            "file": origin.filename if origin else None,
            "line": origin.lineno if origin else None,
        }
    return content


def _client_error(status_code: int, message: str) -> PostgresqlErrorHandlingResult:
    return PostgresqlErrorHandlingResult(
        response=JSONResponse(status_code=status_code, content={"message": message}),
        send_to_sentry=False,
        is_server_error=False,
    )


def _constraint_detail(orig: Any) -> str:
    detail = getattr(orig, "detail", None)
    if detail:
        return str(detail)
    _, marker, tail = str(orig).partition("DETAIL:")
    return tail.strip() if marker else "No additional details provided."


def handle_postgresql_error(error: IntegrityError) -> PostgresqlErrorHandlingResult:
    """
    Map a constraint violation to a response.

    Unique violations become 409 naming the offending column, foreign key
    violations become 400. Anything else is a server bug: 500 and reported.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None)
    detail = _constraint_detail(orig)

    if sqlstate == UNIQUE_VIOLATION:
        # DETAIL looks like: Key (username)=(jane) already exists.
        key = re.search(r"\(([^)]+)\)", detail)
        return _client_error(409, f"{key.group(1)} already exists" if key else detail)
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return _client_error(400, detail)
    if sqlstate == NOT_NULL_VIOLATION:
        column = getattr(orig, "column_name", None)
        if not column:
            quoted = re.search(r'column "([^"]+)"', str(orig))
            column = quoted.group(1) if quoted else None
        logger.error("NotNullViolation on column=%s | detail=%s", column, detail)

    return PostgresqlErrorHandlingResult(
        response=JSONResponse(
            status_code=500, content=error_content(UNEXPECTED_ERROR_MESSAGE, error)
        ),
        send_to_sentry=True,
        is_server_error=True,
    )


async def security_headers_middleware(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


async def request_timing_middleware(request: Request, call_next: CallNext) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started

    label = next((name for limit, name in TIMING_BANDS if elapsed < limit), "[SLOW]")
    log = timing_logger.info if label == "[FAST]" else timing_logger.warning
    log(
        "%s %s %s |%.3fs|%s",
        label,
        request.method,
        request.url.path,
        elapsed,
        response.status_code,
    )
    return response


async def database_error_middleware(request: Request, call_next: CallNext) -> Response:
    path = request.url.path
    try:
        return await call_next(request)
    except IntegrityError as exc:
        result = handle_postgresql_error(exc)
        if result.is_server_error:
            logger.error("Integrity error at %s: %s", path, exc.orig, exc_info=True)
        else:
            logger.info("Integrity error at %s: %s", path, exc.orig)
        if result.send_to_sentry:
            sentry_sdk.capture_exception(exc)
        return result.response
    except OperationalError as exc:
        logger.error("Database connection error at %s: %s", path, exc.orig)
        sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=500, content=error_content(DATABASE_UNAVAILABLE_MESSAGE, exc)
        )
    except ProgrammingError as exc:
        logger.error("SQL syntax error at %s: %s", path, exc.orig)
        sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=500, content=error_content(DATABASE_QUERY_MESSAGE, exc)
        )


async def unexpected_error_middleware(request: Request, call_next: CallNext) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unexpected error at %s: %s", request.url.path, exc)
        sentry_sdk.capture_exception(exc)
        return JSONResponse(
            status_code=500, content=error_content(UNEXPECTED_ERROR_MESSAGE, exc)
        )


def register_middlewares(app: FastAPI) -> None:
    """Register the HTTP middlewares; the last one registered runs outermost."""
    for middleware in (
        security_headers_middleware,
        request_timing_middleware,
        database_error_middleware,
        unexpected_error_middleware,
    ):
        app.middleware("http")(middleware)
