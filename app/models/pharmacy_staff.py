"""Pharmacy staff model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    text,
)

from app.models.base import metadata

pharmacy_staff = Table(
    "pharmacy_staff",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "pharmacy_id",
        Uuid,
        ForeignKey("pharmacies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Role within this pharmacy, independent of the global user roles
    Column("role", String(20), nullable=False, server_default=text("'STAFF'")),
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
    # Metadata
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
    UniqueConstraint("pharmacy_id", "user_id", name="uq_pharmacy_staff_member"),
    CheckConstraint("role IN ('ADMIN', 'STAFF')", name="pharmacy_staff_role_check"),
)
