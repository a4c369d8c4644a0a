from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base
from src.core.database.mixins import IntegerIDMixin


class RefreshToken(Base, IntegerIDMixin):
    """
    Whitelist entry for an issued refresh token.

    Only the HMAC-SHA256 hex digest of the raw token is stored. `token_hash` is
    unique; every refresh token carries a random `jti`, so a duplicate insert
    means the same token was stored twice.
    """

    __tablename__ = "refresh_token"

    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    expires_at: Mapped[int] = mapped_column(BigInteger, index=True)

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, expires_at={self.expires_at})>"
