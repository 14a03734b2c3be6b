"""Create users and memories tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: `users` (one row per GitHub account) and `memories`
       (owned by a user, cascade-deleted with it).

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "github_id",
            sa.BigInteger(),
            nullable=False,
            comment="Numeric GitHub account id",
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("login", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(2048), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("github_id"),
    )

    op.create_table(
        "memories",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier"),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Memory text, stored untruncated",
        ),
        sa.Column(
            "cover_url",
            sa.String(2048),
            nullable=False,
            comment="URL of the uploaded cover image or video",
        ),
        sa.Column(
            "is_public",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Readable by other users through the single-item endpoint",
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Owning user"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
            comment="When this memory was created (UTC)",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Owner listing: WHERE user_id = :uid ORDER BY created_at
    op.create_index(
        "idx_memories_user_created",
        "memories",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_memories_user_created", table_name="memories")
    op.drop_table("memories")
    op.drop_table("users")
