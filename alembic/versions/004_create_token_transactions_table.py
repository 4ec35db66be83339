"""create token_transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "token_transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("booking_id", sa.Integer(), nullable=True),
        sa.Column("transaction_type", sa.String(20), nullable=False),
        sa.Column("tokens", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.ForeignKeyConstraint(["booking_id"], ["yacht_bookings.id"]),
        sa.CheckConstraint("tokens >= 0", name="ck_token_transactions_tokens_non_negative"),
        sa.CheckConstraint(
            "transaction_type IN ('booking', 'refund', 'monthly_reset')",
            name="ck_token_transactions_type",
        ),
    )
    op.create_index("ix_token_transactions_id", "token_transactions", ["id"], unique=False)
    op.create_index(
        "ix_token_transactions_member_id", "token_transactions", ["member_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_token_transactions_member_id", table_name="token_transactions")
    op.drop_index("ix_token_transactions_id", table_name="token_transactions")
    op.drop_table("token_transactions")
