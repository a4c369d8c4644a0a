"""unique refresh_token.token_hash

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Tokens minted before `jti` existed may share a hash; keep one record each.
    op.execute(
        sa.text(
            "DELETE FROM refresh_token WHERE id NOT IN "
            "(SELECT MIN(id) FROM refresh_token GROUP BY token_hash)"
        )
    )
    op.drop_index(op.f("ix_refresh_token_token_hash"), table_name="refresh_token")
    op.create_index(
        op.f("ix_refresh_token_token_hash"),
        "refresh_token",
        ["token_hash"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_refresh_token_token_hash"), table_name="refresh_token")
    op.create_index(
        op.f("ix_refresh_token_token_hash"), "refresh_token", ["token_hash"]
    )
