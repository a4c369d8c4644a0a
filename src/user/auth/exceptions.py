from src.core.errors.exceptions import MalformedRequestException, UnauthorizedException

INVALID_AUTHENTICATION_MESSAGE = "invalid authentication"


# ----- 400 ----- #
class MissingOrMalformedHeaderException(MalformedRequestException):
    pass


class MalformedTokenException(MalformedRequestException):
    pass


class InvalidTokenException(MalformedRequestException):
    """A refresh or logout token that could not be decoded."""


class TokenNotWhitelistedException(MalformedRequestException):
    pass


class MissingApiKeyException(MalformedRequestException):
    pass


# ----- 401 ----- #
class InvalidCredentialsException(UnauthorizedException):
    pass


class InvalidSignatureException(UnauthorizedException):
    pass


class TokenExpiredException(UnauthorizedException):
    pass


class UnknownSubjectException(UnauthorizedException):
    pass


class InvalidApiKeyException(UnauthorizedException):
    pass
