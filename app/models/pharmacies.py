"""Pharmacy model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    Uuid,
    text,
)

from app.models.base import metadata

pharmacies = Table(
    "pharmacies",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", String(100), nullable=False),
    Column("registration_number", String(50), nullable=False, unique=True),
    Column("address", String(255), nullable=False),
    Column("phone", String(20), nullable=True),
    Column("email", String(100), nullable=True),
    Column("website", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, server_default=text("true"), index=True),
    Column(
        "owner_id",
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
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
)
