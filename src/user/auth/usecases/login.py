from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.session import get_session
from src.core.schemas import TokenModel
from src.core.utils.security import hash_password, verify_password
from src.user.auth.dependencies import get_token_issuer
from src.user.auth.exceptions import (
    INVALID_AUTHENTICATION_MESSAGE,
    InvalidCredentialsException,
)
from src.user.auth.issuer import TokenIssuer
from src.user.auth.schemas import LoginUserModel
from src.user.dependencies import get_user_repository
from src.user.repositories import UserRepository

# Verified against when the username is unknown, so both failures cost one Argon2 check.
INVALID_CREDENTIALS_PASSWORD_HASH = hash_password("dummy-password")
logger = get_logger(__name__)


class LoginUserUseCase:
    """Use case for logging in user."""

    def __init__(
        self,
        session: AsyncSession,
        users: UserRepository,
        issuer: TokenIssuer,
    ) -> None:
        self.session = session
        self.users = users
        self.issuer = issuer

    async def execute(self, data: LoginUserModel) -> TokenModel:
        user = await self.users.get_single(self.session, username=data.username)
        if user is None:
            logger.debug("[LoginUser] User '%s' not found.", data.username)
            await verify_password(data.password, INVALID_CREDENTIALS_PASSWORD_HASH)
            raise InvalidCredentialsException(INVALID_AUTHENTICATION_MESSAGE)

        if not await verify_password(data.password, user.password_hash):
            logger.debug("[LoginUser] Incorrect password for user '%s'.", data.username)
            raise InvalidCredentialsException(INVALID_AUTHENTICATION_MESSAGE)

        tokens = await self.issuer.issue(user)
        logger.info("[LoginUser] User id=%s logged in.", user.id)
        return tokens


def get_login_user_use_case(
    session: AsyncSession = Depends(get_session),
    users: UserRepository = Depends(get_user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginUserUseCase:
    return LoginUserUseCase(session=session, users=users, issuer=issuer)
