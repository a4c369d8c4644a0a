from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.user.auth.models import RefreshToken


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def delete_by_hash(
        self, session: AsyncSession, token_hash: str, commit: bool = False
    ) -> int:
        return await self.delete_where(
            session, RefreshToken.token_hash == token_hash, commit=commit
        )

    async def delete_expired(
        self, session: AsyncSession, now: int, commit: bool = False
    ) -> int:
        return await self.delete_where(
            session, RefreshToken.expires_at < now, commit=commit
        )
