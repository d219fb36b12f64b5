"""Donation schemas."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class DonationStatus(str, Enum):
    """Lifecycle of a donation offer."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class DonationBase(BaseModel):
    """Base schema for a medicine donation."""

    medicine_name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(..., gt=0)
    expiry_date: date
    location: str = Field(..., min_length=1, max_length=255)
    organization: str | None = Field(None, max_length=200)
    notes: str | None = None


class DonationCreate(DonationBase):
    """Schema for offering a donation."""


class DonationUpdate(BaseModel):
    """Schema for updating a donation; status changes are validated."""

    medicine_name: str | None = Field(None, min_length=1, max_length=200)
    quantity: int | None = Field(None, gt=0)
    expiry_date: date | None = None
    location: str | None = Field(None, min_length=1, max_length=255)
    organization: str | None = Field(None, max_length=200)
    notes: str | None = None
    status: DonationStatus | None = None


class DonationResponse(DonationBase):
    """Donation schema for API responses."""

    id: UUID
    status: DonationStatus
    donation_date: datetime | None = None
    completed_date: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
