from fastapi import Depends

from loggers import get_logger
from src.user.auth.codec import Err, JWTCodec, Ok, TokenFailure
from src.user.auth.dependencies import get_jwt_codec, get_refresh_token_store
from src.user.auth.exceptions import InvalidTokenException
from src.user.auth.schemas import TokenRequestModel
from src.user.auth.token_store import RefreshTokenStore

logger = get_logger(__name__)


class LogoutUseCase:
    """
    Revoke a refresh token.

    Expired tokens are still removed from the whitelist; malformed or badly
    signed ones are rejected without touching it.
    """

    def __init__(self, codec: JWTCodec, store: RefreshTokenStore) -> None:
        self.codec = codec
        self.store = store

    async def execute(self, data: TokenRequestModel) -> None:
        match self.codec.decode(data.token):
            case Ok(_) | Err(TokenFailure.EXPIRED):
                pass
            case Err(failure, detail):
                raise InvalidTokenException(
                    "invalid token",
                    additional_info={"failure": str(failure), "reason": detail},
                )

        deleted = await self.store.delete(data.token)
        logger.info("[Logout] Revoked %s refresh token record(s).", deleted)


def get_logout_use_case(
    codec: JWTCodec = Depends(get_jwt_codec),
    store: RefreshTokenStore = Depends(get_refresh_token_store),
) -> LogoutUseCase:
    return LogoutUseCase(codec=codec, store=store)
