"""Medication and reminder models using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
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

medications = Table(
    "medications",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(200), nullable=False),
    Column("description", Text),
    Column("dosage", String(100), nullable=False),
    Column("frequency", String(100)),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date),
    Column("active", Boolean, nullable=False, server_default=text("true")),
    Column("stock", Integer, nullable=False, server_default=text("0")),
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

# Reminders are owned through their medication's user
reminders = Table(
    "reminders",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "medication_id",
        Uuid,
        ForeignKey("medications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("reminder_time", DateTime(timezone=True), nullable=False, index=True),
    Column("notes", Text),
    Column("completed", Boolean, nullable=False, server_default=text("false")),
    Column("completed_at", DateTime(timezone=True)),
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
