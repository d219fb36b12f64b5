"""Billing schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_serializer


class PaymentStatus(str, Enum):
    """Settlement state of a bill."""

    PENDING = "PENDING"
    PAID = "PAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentMethod(str, Enum):
    """How a bill was paid."""

    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    MOBILE_PAYMENT = "MOBILE_PAYMENT"
    INSURANCE = "INSURANCE"
    OTHER = "OTHER"


# ============================================================================
# Request Schemas
# ============================================================================


class CreateBillItem(BaseModel):
    """A requested line: which stock row and how many units."""

    inventory_id: UUID
    quantity: int = Field(..., ge=1)


class CreateBillRequest(BaseModel):
    """Schema for creating a bill.

    Either ``customer_id`` (a registered user) or ``customer_name`` (walk-in)
    identifies the customer.
    """

    pharmacy_id: UUID
    customer_id: UUID | None = None
    customer_name: str | None = Field(None, max_length=100)
    customer_phone: str | None = Field(None, max_length=20)
    customer_email: EmailStr | None = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PAID
    items: list[CreateBillItem] = Field(..., min_length=1)
    discount_amount: Decimal = Field(Decimal("0"), ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    notes: str | None = Field(None, max_length=500)
    prescription_reference: str | None = Field(None, max_length=100)


# ============================================================================
# Response Schemas
# ============================================================================


class BillItemResponse(BaseModel):
    """Line item as sold."""

    id: UUID
    line_number: int
    inventory_id: UUID | None = None
    item_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    model_config = {"from_attributes": True}

    @field_serializer(
        "unit_price", "subtotal", "discount_amount", "tax_amount", "total_amount", when_used="json"
    )
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None


class BillResponse(BaseModel):
    """Bill with its ordered line items."""

    id: UUID
    bill_number: str
    pharmacy_id: UUID
    pharmacy_name: str | None = None
    customer_id: UUID | None = None
    customer_name: str
    customer_phone: str | None = None
    customer_email: str | None = None
    bill_date: datetime
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    created_by: UUID | None = None
    created_by_name: str | None = None
    prescription_reference: str | None = None
    notes: str | None = None
    items: list[BillItemResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("subtotal", "tax_amount", "discount_amount", "total_amount", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None
