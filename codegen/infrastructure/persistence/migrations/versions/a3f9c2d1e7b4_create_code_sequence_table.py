"""create code_sequence table

Revision ID: a3f9c2d1e7b4
Revises:
Create Date: 2026-10-17

One counter row per (date_key, type, location): confirmed is the last used
value, pending the outstanding reservation.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a3f9c2d1e7b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "code_sequence",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("date_key", sa.String(length=20), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("location", sa.String(length=20), nullable=False),
        sa.Column(
            "confirmed", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column("pending", sa.BigInteger(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "date_key",
            "type",
            "location",
            name="uq_code_sequence_date_type_location",
        ),
        sa.CheckConstraint(
            "confirmed >= 0", name="ck_code_sequence_confirmed_non_negative"
        ),
    )


def downgrade() -> None:
    op.drop_table("code_sequence")
