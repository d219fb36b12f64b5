"""Family member endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.family import FamilyMemberCreate, FamilyMemberResponse, FamilyMemberUpdate
from app.services.family_service import FamilyService

router = APIRouter(prefix="/api/family", tags=["Family"])


@router.get("", response_model=list[FamilyMemberResponse])
async def list_family_members(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[FamilyMemberResponse]:
    return await FamilyService(db).list_members(current_user.id)


@router.get("/{member_id}", response_model=FamilyMemberResponse)
async def get_family_member(
    member_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> FamilyMemberResponse:
    return await FamilyService(db).get_member(member_id, current_user.id)


@router.post("", response_model=FamilyMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_family_member(
    data: FamilyMemberCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> FamilyMemberResponse:
    """Add a family member; new members start with status ``Active``."""
    return await FamilyService(db).create_member(current_user.id, data)


@router.put("/{member_id}", response_model=FamilyMemberResponse)
async def update_family_member(
    member_id: UUID,
    data: FamilyMemberUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> FamilyMemberResponse:
    """Update name, relationship, age or permission flags."""
    return await FamilyService(db).update_member(member_id, current_user.id, data)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_family_member(
    member_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    await FamilyService(db).delete_member(member_id, current_user.id)
