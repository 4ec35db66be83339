"""create members table

Revision ID: 001
Revises:
Create Date: 2026-09-14 18:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("membership_tier", sa.String(20), nullable=False),
        sa.Column("current_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_token_reset", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "current_tokens >= 0", name="ck_members_current_tokens_non_negative"
        ),
        sa.CheckConstraint(
            "membership_tier IN ('bronze', 'silver', 'gold', 'platinum')",
            name="ck_members_membership_tier",
        ),
    )
    op.create_index("ix_members_id", "members", ["id"], unique=False)
    op.create_index("ix_members_email", "members", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_members_email", table_name="members")
    op.drop_index("ix_members_id", table_name="members")
    op.drop_table("members")
