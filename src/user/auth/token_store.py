from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.utils.datetime_utils import get_unix_timestamp
from src.core.utils.security import hmac_sha256_hex
from src.user.auth.models import RefreshToken
from src.user.auth.repositories import RefreshTokenRepository

logger = get_logger(__name__)


class RefreshTokenStore:
    """
    Server-side whitelist of issued refresh tokens.

    Raw tokens never reach the database: every operation works on the keyed
    hash. Each mutation commits on its own.
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: RefreshTokenRepository,
        hash_key: str,
    ) -> None:
        if not hash_key:
            raise ValueError("Refresh token hash key must not be empty")
        self.session = session
        self.repository = repository
        self._hash_key = hash_key

    def hash_token(self, raw_token: str) -> str:
        return hmac_sha256_hex(self._hash_key, raw_token)

    async def create(self, raw_token: str, expires_at: int) -> RefreshToken:
        """Storing the same token twice raises `IntegrityError` (unique hash)."""
        record = await self.repository.create(
            self.session,
            data={"token_hash": self.hash_token(raw_token), "expires_at": expires_at},
            commit=True,
        )
        logger.debug("[RefreshTokenStore] Token whitelisted until %s", expires_at)
        return record

    async def get_by_token(self, raw_token: str) -> RefreshToken | None:
        return await self.repository.get_single(
            self.session, token_hash=self.hash_token(raw_token)
        )

    async def delete(self, raw_token: str) -> int:
        deleted = await self.repository.delete_by_hash(
            self.session, self.hash_token(raw_token), commit=True
        )
        logger.debug("[RefreshTokenStore] Removed %s whitelist record(s)", deleted)
        return deleted

    async def delete_expired(self) -> int:
        """Sweep records with `expires_at` before now. Not called from request handlers."""
        deleted = await self.repository.delete_expired(
            self.session, get_unix_timestamp(), commit=True
        )
        logger.info("[RefreshTokenStore] Swept %s expired refresh token(s)", deleted)
        return deleted
