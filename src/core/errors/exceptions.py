from typing import Any


class CoreException(Exception):
    """
    Base for errors turned into JSON responses at the HTTP boundary (400 by default).

    `message` is shown to the client, `additional_info` only goes to the logs.
    """

    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.additional_info = additional_info


class InfrastructureException(CoreException):
    """A dependency such as the database is unusable; answered with 500."""


class MalformedRequestException(CoreException):
    """Syntactically broken input that request validation could not catch."""


class InstanceNotFoundException(CoreException):
    pass


class InstanceAlreadyExistsException(CoreException):
    pass


class UnauthorizedException(CoreException):
    """Missing or rejected credentials; subclasses name the exact reason."""
