"""create yacht_bookings table

Revision ID: 003
Revises: 002
Create Date: 2026-09-15 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "yacht_bookings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("yacht_id", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("tokens_used", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.ForeignKeyConstraint(["yacht_id"], ["yachts.id"]),
        sa.CheckConstraint("end_time > start_time", name="ck_yacht_bookings_time_order"),
        sa.CheckConstraint("tokens_used >= 0", name="ck_yacht_bookings_tokens_non_negative"),
    )
    op.create_index("ix_yacht_bookings_id", "yacht_bookings", ["id"], unique=False)
    op.create_index("ix_yacht_bookings_member_id", "yacht_bookings", ["member_id"], unique=False)
    op.create_index("ix_yacht_bookings_yacht_id", "yacht_bookings", ["yacht_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_yacht_bookings_yacht_id", table_name="yacht_bookings")
    op.drop_index("ix_yacht_bookings_member_id", table_name="yacht_bookings")
    op.drop_index("ix_yacht_bookings_id", table_name="yacht_bookings")
    op.drop_table("yacht_bookings")
