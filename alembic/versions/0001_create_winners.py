"""create winners table

Revision ID: 0001_create_winners
Revises:
Create Date: 2026-10-18 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_create_winners"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "winners",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("supervisor", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=255), nullable=True),
        sa.Column("nps", sa.Float(), nullable=True),
        sa.Column("nrpc", sa.Float(), nullable=True),
        sa.Column("refund_percent", sa.Float(), nullable=True),
        sa.Column("total_tickets", sa.Integer(), nullable=False),
        sa.Column("prize_category", sa.String(length=100), nullable=False),
        sa.Column("prize_name", sa.String(length=255), nullable=False),
        sa.Column("ticket_numbers", sa.JSON(), nullable=False),
        sa.Column("drawn_ticket", sa.Integer(), nullable=True),
        sa.Column("won_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_winners")),
        sa.UniqueConstraint("participant_id", name="uq_winners_participant_id"),
    )
    op.create_index("ix_winners_prize_category", "winners", ["prize_category"])
    op.create_index("ix_winners_won_at", "winners", ["won_at"])


def downgrade() -> None:
    op.drop_index("ix_winners_won_at", table_name="winners")
    op.drop_index("ix_winners_prize_category", table_name="winners")
    op.drop_table("winners")
