"""Pharmacy and staff management endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from app.dependencies import CacheManagerDep, CurrentUser, DatabaseSession
from app.schemas.pharmacies import (
    PharmacyResponse,
    PharmacyStaffResponse,
    StaffCreate,
    StaffUpdate,
)
from app.services.pharmacy_service import PharmacyService
from app.services.user_service import UserService

router = APIRouter(prefix="/api/pharmacies", tags=["Pharmacies"])


@router.get(
    "/{pharmacy_id}",
    response_model=PharmacyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get pharmacy by ID",
)
async def get_pharmacy(
    pharmacy_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> PharmacyResponse:
    """Get pharmacy details; members and admins only."""
    pharmacy = await PharmacyService.get_pharmacy_or_404(db, pharmacy_id)
    await PharmacyService.require_member(db, pharmacy_id, current_user)
    return PharmacyResponse.model_validate(pharmacy)


@router.get(
    "/{pharmacy_id}/staff",
    response_model=list[PharmacyStaffResponse],
    status_code=status.HTTP_200_OK,
    summary="List pharmacy staff",
)
async def list_staff(
    pharmacy_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[PharmacyStaffResponse]:
    """List every staff assignment of the pharmacy."""
    await PharmacyService.get_pharmacy_or_404(db, pharmacy_id)
    await PharmacyService.require_member(db, pharmacy_id, current_user)
    staff = await PharmacyService.list_staff(db, pharmacy_id)
    return [PharmacyStaffResponse.model_validate(row) for row in staff]


@router.post(
    "/{pharmacy_id}/staff",
    response_model=PharmacyStaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a staff member",
)
async def add_staff(
    pharmacy_id: UUID,
    staff_data: StaffCreate,
    current_user: CurrentUser,
    cache_manager: CacheManagerDep,
    db: DatabaseSession,
) -> PharmacyStaffResponse:
    """
    Create a pharmacy account and attach it to the pharmacy.

    Only pharmacy administrators may add staff.
    """
    await PharmacyService.get_pharmacy_or_404(db, pharmacy_id)
    await PharmacyService.require_admin(db, pharmacy_id, current_user)
    staff = await PharmacyService.add_staff(db, pharmacy_id, staff_data, UserService(cache_manager))
    return PharmacyStaffResponse.model_validate(staff)


@router.patch(
    "/{pharmacy_id}/staff/{staff_id}",
    response_model=PharmacyStaffResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a staff member",
)
async def update_staff(
    pharmacy_id: UUID,
    staff_id: UUID,
    staff_data: StaffUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> PharmacyStaffResponse:
    """Change a staff member's role or deactivate them."""
    await PharmacyService.get_pharmacy_or_404(db, pharmacy_id)
    await PharmacyService.require_admin(db, pharmacy_id, current_user)
    staff = await PharmacyService.update_staff(db, pharmacy_id, staff_id, staff_data)
    return PharmacyStaffResponse.model_validate(staff)
