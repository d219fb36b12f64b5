"""Bill and bill item models using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Column,
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

bills = Table(
    "bills",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("bill_number", String(20), nullable=False, unique=True),
    Column(
        "pharmacy_id",
        Uuid,
        ForeignKey("pharmacies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Customer (registered user or walk-in)
    Column("customer_id", Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    Column("customer_name", String(100), nullable=False),
    Column("customer_phone", String(20)),
    Column("customer_email", String(100)),
    # Totals
    Column("bill_date", DateTime(timezone=True), nullable=False),
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("tax_amount", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("discount_amount", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("total_amount", Numeric(12, 2), nullable=False),
    # Payment
    Column("payment_status", String(20), nullable=False),
    Column("payment_method", String(20), nullable=False),
    Column("created_by", Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    Column("prescription_reference", String(100)),
    Column("notes", Text),
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

# Line items snapshot name and price at the time of sale
bill_items = Table(
    "bill_items",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "bill_id",
        Uuid,
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("line_number", Integer, nullable=False),
    Column("inventory_id", Uuid, ForeignKey("inventory.id", ondelete="SET NULL"), nullable=True),
    Column("item_name", String(200), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("discount_amount", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("tax_amount", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("total_amount", Numeric(12, 2), nullable=False),
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
