import secrets

from src.core.schemas import TokenModel
from src.core.utils.datetime_utils import get_unix_timestamp
from src.main.config import JWTConfig
from src.user.auth.codec import JWTCodec
from src.user.auth.token_store import RefreshTokenStore
from src.user.models import User

JTI_BYTES = 16


class TokenIssuer:
    """
    Mints an access/refresh pair for a user and whitelists the refresh token.

    Access claims: sub, username, exp. Refresh claims: sub, exp, jti; the random
    `jti` keeps refresh tokens minted for one user in the same second distinct.
    """

    def __init__(
        self, codec: JWTCodec, store: RefreshTokenStore, settings: JWTConfig
    ) -> None:
        self.codec = codec
        self.store = store
        self.settings = settings

    async def issue(self, user: User) -> TokenModel:
        now = get_unix_timestamp()
        access_token = self.codec.encode(
            {
                "sub": user.id,
                "username": user.username,
                "exp": now + self.settings.ACCESS_TOKEN_EXPIRE_SECONDS,
            }
        )
        refresh_expires_at = now + self.settings.REFRESH_TOKEN_EXPIRE_SECONDS
        refresh_token = self.codec.encode(
            {
                "sub": user.id,
                "exp": refresh_expires_at,
                "jti": secrets.token_urlsafe(JTI_BYTES),
            }
        )

        await self.store.create(refresh_token, refresh_expires_at)
        return TokenModel(access_token=access_token, refresh_token=refresh_token)
