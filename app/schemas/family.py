"""Family member schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class FamilyMemberBase(BaseModel):
    """Base schema for a family member with delegated access."""

    name: str = Field(..., min_length=1, max_length=100)
    relationship: str = Field(..., min_length=1, max_length=50)
    age: int = Field(..., ge=1, le=120)
    can_view_medications: bool = True
    can_edit_medications: bool = False
    can_manage_reminders: bool = False


class FamilyMemberCreate(FamilyMemberBase):
    """Schema for adding a family member."""


class FamilyMemberUpdate(BaseModel):
    """Schema for updating a family member."""

    name: str | None = Field(None, min_length=1, max_length=100)
    relationship: str | None = Field(None, min_length=1, max_length=50)
    age: int | None = Field(None, ge=1, le=120)
    can_view_medications: bool | None = None
    can_edit_medications: bool | None = None
    can_manage_reminders: bool | None = None


class FamilyMemberResponse(FamilyMemberBase):
    """Family member schema for API responses."""

    id: UUID
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
