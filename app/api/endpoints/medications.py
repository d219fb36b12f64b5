"""Medication endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.medications import MedicationCreate, MedicationResponse, MedicationUpdate
from app.services.medication_service import MedicationService

router = APIRouter(prefix="/medications", tags=["Medications"])


@router.get("", response_model=list[MedicationResponse])
async def list_medications(
    current_user: CurrentUser,
    db: DatabaseSession,
    active_only: bool = Query(False),
) -> list[MedicationResponse]:
    """List the caller's medications."""
    return await MedicationService(db).list_medications(current_user.id, active_only)


@router.post("", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    data: MedicationCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> MedicationResponse:
    return await MedicationService(db).create_medication(current_user.id, data)


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> MedicationResponse:
    return await MedicationService(db).get_medication(medication_id, current_user.id)


@router.put("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: UUID,
    data: MedicationUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> MedicationResponse:
    return await MedicationService(db).update_medication(medication_id, current_user.id, data)


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    """Delete a medication and its reminders."""
    await MedicationService(db).delete_medication(medication_id, current_user.id)
