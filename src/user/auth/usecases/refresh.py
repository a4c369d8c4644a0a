from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.session import get_session
from src.core.schemas import TokenModel
from src.user.auth.authenticator import subject_from_claims
from src.user.auth.codec import Err, JWTCodec, Ok
from src.user.auth.dependencies import (
    get_jwt_codec,
    get_refresh_token_store,
    get_token_issuer,
)
from src.user.auth.exceptions import (
    INVALID_AUTHENTICATION_MESSAGE,
    InvalidTokenException,
    TokenNotWhitelistedException,
    UnknownSubjectException,
)
from src.user.auth.issuer import TokenIssuer
from src.user.auth.schemas import TokenRequestModel
from src.user.auth.token_store import RefreshTokenStore
from src.user.dependencies import get_user_repository
from src.user.repositories import UserRepository

logger = get_logger(__name__)


class RefreshTokensUseCase:
    """
    Exchange a whitelisted refresh token for a new pair (rotation).

    The old record is deleted and committed before the new pair is stored, so a
    failure in between forces a re-login instead of leaving a replayable token.
    Only the request whose delete removes the record is issued a new pair.
    """

    def __init__(
        self,
        session: AsyncSession,
        users: UserRepository,
        codec: JWTCodec,
        store: RefreshTokenStore,
        issuer: TokenIssuer,
    ) -> None:
        self.session = session
        self.users = users
        self.codec = codec
        self.store = store
        self.issuer = issuer

    async def execute(self, data: TokenRequestModel) -> TokenModel:
        match self.codec.decode(data.token):
            case Ok(claims):
                user_id = subject_from_claims(claims)
            case Err(failure, detail):
                raise InvalidTokenException(
                    "invalid token",
                    additional_info={"failure": str(failure), "reason": detail},
                )

        if user_id is None:
            raise InvalidTokenException(
                "invalid token", additional_info={"reason": "sub"}
            )

        if await self.store.get_by_token(data.token) is None:
            logger.info("[RefreshTokens] Token for user id=%s not whitelisted.", user_id)
            raise TokenNotWhitelistedException("invalid token (not in whitelist)")

        user = await self.users.get_single(self.session, id=user_id)
        if user is None:
            logger.info("[RefreshTokens] User id=%s no longer exists.", user_id)
            raise UnknownSubjectException(
                INVALID_AUTHENTICATION_MESSAGE, additional_info={"user_id": user_id}
            )

        if await self.store.delete(data.token) == 0:
            logger.info(
                "[RefreshTokens] Token for user id=%s consumed concurrently.", user_id
            )
            raise TokenNotWhitelistedException("invalid token (not in whitelist)")

        tokens = await self.issuer.issue(user)
        logger.info("[RefreshTokens] Rotated refresh token for user id=%s.", user_id)
        return tokens


def get_refresh_tokens_use_case(
    session: AsyncSession = Depends(get_session),
    users: UserRepository = Depends(get_user_repository),
    codec: JWTCodec = Depends(get_jwt_codec),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> RefreshTokensUseCase:
    return RefreshTokensUseCase(
        session=session, users=users, codec=codec, store=store, issuer=issuer
    )
