from collections.abc import Awaitable, Callable, Mapping, Sequence
import logging
from typing import Any, cast

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import sentry_sdk
from starlette.responses import Response

from loggers import get_logger
from src.core.errors.exceptions import CoreException

response_logger = get_logger("app.request.error_response", plain_format=True)

HandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

FALLBACK_MESSAGE = "No additional details available"
MAX_LOGGED_MESSAGE_LENGTH = 500
SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "token",
        "refresh_token",
        "access_token",
        "password",
        "secret",
        "api_key",
        "api-key",
        "x-api-key",
    }
)
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def as_exception_handler(handler: Any) -> HandlerCallable:
    """Narrow a handler instance to the callable type `add_exception_handler` expects."""
    return cast(HandlerCallable, handler.__call__)


def format_error_response(message: str | None) -> dict[str, Any]:
    """Every error body has the same shape: {"message": <string>}."""
    return {"message": message or FALLBACK_MESSAGE}


def error_response(status_code: int, message: str | None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=format_error_response(message))


def _single_line(text: str | None) -> str:
    flat = " ".join((text or FALLBACK_MESSAGE).split())
    if len(flat) <= MAX_LOGGED_MESSAGE_LENGTH:
        return flat
    return flat[: MAX_LOGGED_MESSAGE_LENGTH - 3] + "..."


def _request_id(request: Request) -> str | None:
    header_value = request.headers.get("x-request-id")
    if header_value:
        return header_value
    return getattr(request.state, "request_id", None)


def _masked(info: Mapping[str, Any]) -> str:
    return ", ".join(
        f"{key}={'***' if key.lower() in SENSITIVE_KEYS else repr(info[key])}"
        for key in sorted(info)
    )


def format_log_message(
    request: Request,
    error_type: str,
    message: str | None,
    additional_info: dict[str, Any] | None = None,
    include_request_path: bool = False,
) -> str:
    """
    Build the single log line written for an error response.

    Layout: `[request-id] [Error type] METHOD /path | message | Additional info: ...`.
    The request id and the method/path are optional; values of sensitive
    keys in `additional_info` are replaced by `***`.
    """
    label = error_type.strip()
    label = label[:1].upper() + label[1:] if label else "Error"

    parts = []
    request_id = _request_id(request)
    if request_id:
        parts.append(f"[{request_id}]")
    parts.append(f"[{label}]")
    if include_request_path:
        parts.append(f"{request.method} {request.url.path} |")
    parts.append(_single_line(message))

    line = " ".join(parts)
    if additional_info:
        line += f" | Additional info: {_masked(additional_info)}"
    return line


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "request body"


def describe_validation_errors(errors: Sequence[dict[str, Any]]) -> str:
    """
    Collapse pydantic errors into one client-facing sentence.

    Unparseable JSON wins over missing fields, which win over invalid ones.
    """
    if any(error.get("type") == "json_invalid" for error in errors):
        return "malformed JSON body"

    missing = [
        _field_name(error.get("loc", ()))
        for error in errors
        if error.get("type") == "missing"
    ]
    if missing:
        return f"missing {', '.join(dict.fromkeys(missing))}"

    invalid = [_field_name(error.get("loc", ())) for error in errors]
    return f"invalid {', '.join(dict.fromkeys(invalid))}"


class CoreErrorResponder:
    """
    Turns a `CoreException` into a logged `{"message"}` response.

    Subclasses pick the status code, the log level and the label written to
    the log; without a fixed label the exception class name is used.
    """

    status_code: int = 400
    error_type: str | None = None
    log_level: int = logging.INFO
    include_request_path: bool = False
    report_to_sentry: bool = False

    async def __call__(self, request: Request, exc: CoreException) -> JSONResponse:
        label = self.error_type or type(exc).__name__.removesuffix("Exception")
        response_logger.log(
            self.log_level,
            format_log_message(
                request,
                label,
                exc.message,
                exc.additional_info,
                include_request_path=self.include_request_path,
            ),
        )
        if self.report_to_sentry:
            sentry_sdk.capture_exception(exc)
        return error_response(self.status_code, exc.message)


class CoreExceptionHandler(CoreErrorResponder):
    error_type = "Bad request"


class MalformedRequestExceptionHandler(CoreErrorResponder):
    include_request_path = True


class InstanceNotFoundExceptionHandler(CoreErrorResponder):
    status_code = 404
    error_type = "Instance not found"


class InstanceAlreadyExistsExceptionHandler(CoreErrorResponder):
    status_code = 409
    error_type = "Instance already exists"


class UnauthorizedExceptionHandler(CoreErrorResponder):
    status_code = 401
    log_level = logging.WARNING
    include_request_path = True


class InfrastructureExceptionHandler(CoreErrorResponder):
    status_code = 500
    error_type = "Infrastructure error"
    log_level = logging.ERROR
    report_to_sentry = True


class RequestValidationExceptionHandler:
    """Malformed client input; answered with 400 and a one-line summary."""

    async def __call__(
        self, request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = jsonable_encoder(exc.errors())
        message = describe_validation_errors(details)
        response_logger.info(
            format_log_message(
                request,
                "Request validation error",
                f"{message} {details}",
                include_request_path=True,
            )
        )
        return error_response(400, message)


class ValidationErrorExceptionHandler:
    """A response or internal model failed validation: a server bug, not a client one."""

    async def __call__(self, request: Request, exc: ValidationError) -> JSONResponse:
        details = jsonable_encoder(exc.errors())
        response_logger.error(
            format_log_message(
                request,
                "Backend validation error",
                str(details),
                include_request_path=True,
            )
        )
        sentry_sdk.capture_exception(exc)
        return error_response(500, "Unexpected error")
