"""User and role model definitions using SQLAlchemy Core."""

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

users = Table(
    "users",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Credentials
    Column("email", String(100), nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    # Profile info (mutable)
    Column("first_name", String(50), nullable=False),
    Column("last_name", String(50), nullable=False),
    Column("image_url", Text),
    # Account state
    Column("enabled", Boolean, nullable=False, server_default=text("true")),
    # Audit
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

roles = Table(
    "roles",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", String(20), nullable=False, unique=True),  # ROLE_USER, ROLE_PHARMACY, ROLE_ADMIN
)

user_roles = Table(
    "user_roles",
    metadata,
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Uuid,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
