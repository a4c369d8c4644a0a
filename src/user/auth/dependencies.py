from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.session import get_session
from src.main.config import Config, get_settings
from src.user.auth.authenticator import API_KEY_HEADER, Authenticator
from src.user.auth.codec import JWTCodec
from src.user.auth.exceptions import (
    INVALID_AUTHENTICATION_MESSAGE,
    MissingOrMalformedHeaderException,
    UnknownSubjectException,
)
from src.user.auth.issuer import TokenIssuer
from src.user.auth.repositories import RefreshTokenRepository
from src.user.auth.token_store import RefreshTokenStore
from src.user.dependencies import get_user_repository
from src.user.models import User
from src.user.repositories import UserRepository


def get_jwt_codec(settings: Config = Depends(get_settings)) -> JWTCodec:
    return JWTCodec(settings.jwt.JWT_SECRET_KEY)


def build_refresh_token_store(
    session: AsyncSession, settings: Config
) -> RefreshTokenStore:
    return RefreshTokenStore(
        session=session,
        repository=RefreshTokenRepository(),
        hash_key=settings.jwt.refresh_token_hash_key,
    )


def get_refresh_token_store(
    session: AsyncSession = Depends(get_session),
    settings: Config = Depends(get_settings),
) -> RefreshTokenStore:
    return build_refresh_token_store(session, settings)


def get_token_issuer(
    codec: JWTCodec = Depends(get_jwt_codec),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
    settings: Config = Depends(get_settings),
) -> TokenIssuer:
    return TokenIssuer(codec=codec, store=store, settings=settings.jwt)


def get_authenticator(
    codec: JWTCodec = Depends(get_jwt_codec),
    session: AsyncSession = Depends(get_session),
    users: UserRepository = Depends(get_user_repository),
) -> Authenticator:
    return Authenticator(codec=codec, session=session, users=users)


async def get_current_user_id(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
) -> int:
    """
    Authenticate the caller.

    A bearer token in `Authorization` takes precedence; the legacy `X-API-Key`
    header is only consulted when no `Authorization` header is sent.
    """
    headers = request.headers
    if "authorization" in headers:
        return authenticator.authenticate_access_token(headers)
    if API_KEY_HEADER.lower() in headers:
        return await authenticator.authenticate_api_key(headers)
    raise MissingOrMalformedHeaderException("incomplete authorization header")


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    user = await users.get_single(session, id=user_id)
    if user is None:
        raise UnknownSubjectException(
            INVALID_AUTHENTICATION_MESSAGE, additional_info={"user_id": user_id}
        )
    return user
