"""Create pharmacies and pharmacy_staff tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-01 00:10:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create pharmacy tables."""
    op.create_table(
        "pharmacies",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("registration_number", sa.String(50), nullable=False, unique=True),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "owner_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )
    op.create_index("ix_pharmacies_is_active", "pharmacies", ["is_active"])

    op.create_table(
        "pharmacy_staff",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "pharmacy_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("pharmacies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False, server_default="STAFF"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("pharmacy_id", "user_id", name="uq_pharmacy_staff_member"),
        sa.CheckConstraint("role IN ('ADMIN', 'STAFF')", name="pharmacy_staff_role_check"),
    )
    op.create_index("ix_pharmacy_staff_user_id", "pharmacy_staff", ["user_id"])
    op.create_index("ix_pharmacy_staff_pharmacy_id", "pharmacy_staff", ["pharmacy_id"])


def downgrade() -> None:
    """Drop pharmacy tables."""
    op.drop_index("ix_pharmacy_staff_pharmacy_id", table_name="pharmacy_staff")
    op.drop_index("ix_pharmacy_staff_user_id", table_name="pharmacy_staff")
    op.drop_table("pharmacy_staff")

    op.drop_index("ix_pharmacies_is_active", table_name="pharmacies")
    op.drop_table("pharmacies")
