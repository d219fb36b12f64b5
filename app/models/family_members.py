"""Family member model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Uuid,
    text,
)

from app.models.base import metadata

family_members = Table(
    "family_members",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(100), nullable=False),
    Column("relationship", String(50), nullable=False),
    Column("age", Integer, nullable=False),
    # Delegated permissions
    Column("can_view_medications", Boolean, nullable=False, server_default=text("true")),
    Column("can_edit_medications", Boolean, nullable=False, server_default=text("false")),
    Column("can_manage_reminders", Boolean, nullable=False, server_default=text("false")),
    Column("status", String(20), nullable=False, server_default=text("'Active'")),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    CheckConstraint("age BETWEEN 1 AND 120", name="family_members_age_range"),
)
