"""Create medications, reminders, family_members, donations and medical_documents.

Revision ID: 004
Revises: 003
Create Date: 2026-10-01 00:30:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    """Create per-user tables."""
    op.create_table(
        "medications",
        _id(),
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("dosage", sa.String(100), nullable=False),
        sa.Column("frequency", sa.String(100), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_medications_user_id", "medications", ["user_id"])

    op.create_table(
        "reminders",
        _id(),
        sa.Column(
            "medication_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("medications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reminder_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_reminders_medication_id", "reminders", ["medication_id"])
    op.create_index("ix_reminders_reminder_time", "reminders", ["reminder_time"])

    op.create_table(
        "family_members",
        _id(),
        _owner(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("relationship", sa.String(50), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column(
            "can_view_medications", sa.Boolean(), nullable=False, server_default=sa.text("true")
        ),
        sa.Column(
            "can_edit_medications", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "can_manage_reminders", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        *_timestamps(),
        sa.CheckConstraint("age BETWEEN 1 AND 120", name="family_members_age_range"),
    )
    op.create_index("ix_family_members_user_id", "family_members", ["user_id"])

    op.create_table(
        "donations",
        _id(),
        _owner(),
        sa.Column("medicine_name", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("organization", sa.String(200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("donation_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("completed_date", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("quantity > 0", name="donations_quantity_positive"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'COMPLETED', 'REJECTED')",
            name="donations_status_check",
        ),
    )
    op.create_index("ix_donations_user_id", "donations", ["user_id"])

    op.create_table(
        "medical_documents",
        _id(),
        _owner(),
        sa.Column("document_type", sa.String(50), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_type", sa.String(100), nullable=False),
        sa.Column("file_data", sa.LargeBinary(), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column(
            "upload_date",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "last_modified_date",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )
    op.create_index("ix_medical_documents_user_id", "medical_documents", ["user_id"])


def downgrade() -> None:
    """Drop per-user tables."""
    op.drop_index("ix_medical_documents_user_id", table_name="medical_documents")
    op.drop_table("medical_documents")

    op.drop_index("ix_donations_user_id", table_name="donations")
    op.drop_table("donations")

    op.drop_index("ix_family_members_user_id", table_name="family_members")
    op.drop_table("family_members")

    op.drop_index("ix_reminders_reminder_time", table_name="reminders")
    op.drop_index("ix_reminders_medication_id", table_name="reminders")
    op.drop_table("reminders")

    op.drop_index("ix_medications_user_id", table_name="medications")
    op.drop_table("medications")
