"""Medication and reminder schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

# ============================================================================
# Medication Schemas
# ============================================================================


class MedicationBase(BaseModel):
    """Base schema for a personal medication."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str | None = Field(None, max_length=100)
    start_date: date
    end_date: date | None = None
    active: bool = True
    stock: int = Field(0, ge=0)

    @model_validator(mode="after")
    def validate_dates(self):
        """Ensure the course does not end before it starts."""
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class MedicationCreate(MedicationBase):
    """Schema for creating a medication."""


class MedicationUpdate(BaseModel):
    """Schema for updating a medication."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    dosage: str | None = Field(None, min_length=1, max_length=100)
    frequency: str | None = Field(None, max_length=100)
    start_date: date | None = None
    end_date: date | None = None
    active: bool | None = None
    stock: int | None = Field(None, ge=0)


class MedicationResponse(MedicationBase):
    """Medication schema for API responses."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============================================================================
# Reminder Schemas
# ============================================================================


class ReminderCreate(BaseModel):
    """Schema for scheduling a reminder."""

    medication_id: UUID
    reminder_time: datetime
    notes: str | None = None


class ReminderUpdate(BaseModel):
    """Schema for updating a reminder."""

    medication_id: UUID | None = None
    reminder_time: datetime | None = None
    notes: str | None = None
    completed: bool | None = None


class ReminderResponse(BaseModel):
    """Reminder with the medication it belongs to."""

    id: UUID
    medication_id: UUID
    medication_name: str
    medication_dosage: str
    reminder_time: datetime
    notes: str | None = None
    completed: bool
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}
