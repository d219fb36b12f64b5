"""Donation model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    text,
)

from app.models.base import metadata

donations = Table(
    "donations",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("medicine_name", String(200), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("expiry_date", Date, nullable=False),
    Column("location", String(255), nullable=False),
    Column("status", String(20), nullable=False, server_default=text("'PENDING'")),
    Column("organization", String(200)),
    Column("notes", Text),
    Column("donation_date", DateTime(timezone=True)),
    Column("completed_date", DateTime(timezone=True)),
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
    CheckConstraint("quantity > 0", name="donations_quantity_positive"),
    CheckConstraint(
        "status IN ('PENDING', 'ACCEPTED', 'COMPLETED', 'REJECTED')",
        name="donations_status_check",
    ),
)
