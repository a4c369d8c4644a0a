from collections.abc import Mapping
import re
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.user.auth.codec import Err, JWTCodec, Ok, TokenFailure
from src.user.auth.exceptions import (
    InvalidApiKeyException,
    InvalidSignatureException,
    MalformedTokenException,
    MissingApiKeyException,
    MissingOrMalformedHeaderException,
    TokenExpiredException,
)
from src.user.repositories import UserRepository

BEARER_PATTERN = re.compile(r"^Bearer\s+(\S+)\s*$")
API_KEY_HEADER = "X-API-Key"

logger = get_logger(__name__)


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    authorization = headers.get("Authorization") or headers.get("authorization")
    match = BEARER_PATTERN.match(authorization or "")
    if match is None:
        raise MissingOrMalformedHeaderException("incomplete authorization header")
    return match.group(1)


def subject_from_claims(claims: Mapping[str, Any]) -> int | None:
    sub = claims.get("sub")
    if isinstance(sub, bool) or not isinstance(sub, int):
        return None
    return sub


class Authenticator:
    """
    Resolves the calling user id from request headers.

    The bearer path is purely signature based and never reads the refresh-token
    whitelist. The API key path is the legacy alternative backed by the user table.
    """

    def __init__(
        self,
        codec: JWTCodec,
        session: AsyncSession,
        users: UserRepository,
    ) -> None:
        self.codec = codec
        self.session = session
        self.users = users

    def authenticate_access_token(self, headers: Mapping[str, str]) -> int:
        token = extract_bearer_token(headers)

        match self.codec.decode(token):
            case Ok(claims):
                user_id = subject_from_claims(claims)
                if user_id is None:
                    raise MalformedTokenException(
                        "invalid token format", additional_info={"reason": "sub"}
                    )
                return user_id
            case Err(TokenFailure.EXPIRED):
                raise TokenExpiredException("token has expired")
            case Err(TokenFailure.INVALID_SIGNATURE, detail):
                raise InvalidSignatureException(
                    "invalid signature", additional_info={"reason": detail}
                )
            case Err(_, detail):
                raise MalformedTokenException(
                    "invalid token format", additional_info={"reason": detail}
                )

    async def authenticate_api_key(self, headers: Mapping[str, str]) -> int:
        api_key = headers.get(API_KEY_HEADER) or headers.get(API_KEY_HEADER.lower())
        if not api_key:
            raise MissingApiKeyException("missing API key")

        user = await self.users.get_single(self.session, api_key=api_key)
        if user is None:
            logger.info("[Authenticator] Unknown API key presented")
            raise InvalidApiKeyException("invalid API key")
        return user.id
