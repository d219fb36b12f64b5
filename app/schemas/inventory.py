"""Inventory schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer


class MedicationType(str, Enum):
    """Regulatory category of a stocked medication."""

    PRESCRIPTION = "PRESCRIPTION"
    OVER_THE_COUNTER = "OVER_THE_COUNTER"
    CONTROLLED_SUBSTANCE = "CONTROLLED_SUBSTANCE"
    DONATED = "DONATED"


class InventoryBase(BaseModel):
    """Base schema for an inventory item."""

    medication_name: str = Field(..., min_length=1, max_length=200)
    manufacturer: str = Field(..., min_length=1, max_length=200)
    batch_number: str = Field(..., min_length=1, max_length=100)
    expiry_date: date
    quantity: int = Field(..., ge=0)
    minimum_stock_level: int = Field(..., ge=0)
    cost_price: Decimal = Field(..., ge=0, decimal_places=2)
    selling_price: Decimal = Field(..., ge=0, decimal_places=2)
    medication_type: MedicationType
    description: str | None = None
    dosage_form: str | None = Field(None, max_length=100)
    strength: str | None = Field(None, max_length=100)
    storage_conditions: str | None = None


class InventoryCreate(InventoryBase):
    """Schema for adding an item to a pharmacy's stock."""


class InventoryUpdate(InventoryBase):
    """Full replacement of the editable fields of an item."""

    is_active: bool = True


class InventoryInDB(InventoryBase):
    """Inventory item as stored in database."""

    id: UUID
    pharmacy_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("cost_price", "selling_price", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None


class InventoryResponse(InventoryInDB):
    """Inventory item with derived stock flags."""

    pharmacy_name: str | None = None
    low_stock: bool
    expired: bool
    expiring_within_30_days: bool


class InventoryStats(BaseModel):
    """Aggregate counters for a pharmacy's stock."""

    total_items: int
    low_stock_count: int
    expiring_soon_count: int


class OverviewDataPoint(BaseModel):
    """One slice of the inventory overview chart."""

    name: str
    value: int
