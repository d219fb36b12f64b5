"""Inventory model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    text,
)

from app.models.base import metadata

inventory = Table(
    "inventory",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "pharmacy_id",
        Uuid,
        ForeignKey("pharmacies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Product
    Column("medication_name", String(200), nullable=False, index=True),
    Column("manufacturer", String(200), nullable=False),
    Column("batch_number", String(100), nullable=False),
    Column("medication_type", String(30), nullable=False),
    Column("description", Text),
    Column("dosage_form", String(100)),
    Column("strength", String(100)),
    Column("storage_conditions", Text),
    # Stock
    Column("expiry_date", Date, nullable=False),
    Column("quantity", Integer, nullable=False, server_default=text("0")),
    Column("minimum_stock_level", Integer, nullable=False, server_default=text("0")),
    # Pricing
    Column("cost_price", Numeric(10, 2), nullable=False),
    Column("selling_price", Numeric(10, 2), nullable=False),
    # Soft delete
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
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
    CheckConstraint("quantity >= 0", name="inventory_quantity_non_negative"),
    CheckConstraint(
        "medication_type IN ('PRESCRIPTION', 'OVER_THE_COUNTER', 'CONTROLLED_SUBSTANCE', 'DONATED')",
        name="inventory_medication_type_check",
    ),
)
