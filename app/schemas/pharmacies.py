"""Pharmacy and staff schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

# ============================================================================
# Pharmacy Schemas
# ============================================================================


class PharmacyBase(BaseModel):
    """Base schema for pharmacy."""

    name: str
    registration_number: str
    address: str
    phone: str | None = None
    email: EmailStr | None = None
    website: str | None = None


class PharmacyInDB(PharmacyBase):
    """Pharmacy schema as stored in database."""

    id: UUID
    is_active: bool
    owner_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PharmacyResponse(PharmacyInDB):
    """Pharmacy schema for API responses."""

    owner_name: str | None = None


# ============================================================================
# Staff Schemas
# ============================================================================


class StaffRole(str, Enum):
    """Role of a user within a single pharmacy."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


class StaffCreate(BaseModel):
    """Schema for adding a staff member with a new pharmacy account."""

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=40)
    role: StaffRole = StaffRole.STAFF


class StaffUpdate(BaseModel):
    """Schema for changing a staff assignment."""

    role: StaffRole | None = None
    is_active: bool | None = None


class PharmacyStaffResponse(BaseModel):
    """Staff assignment with pharmacy and user context."""

    id: UUID
    pharmacy_id: UUID
    pharmacy_name: str
    user_id: UUID
    first_name: str
    last_name: str
    email: EmailStr
    role: StaffRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
