"""Reminder endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.medications import ReminderCreate, ReminderResponse, ReminderUpdate
from app.services.reminder_service import ReminderService

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("", response_model=list[ReminderResponse])
async def list_reminders(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[ReminderResponse]:
    """List reminders across all of the caller's medications."""
    return await ReminderService(db).list_reminders(current_user.id)


@router.get("/pending", response_model=list[ReminderResponse])
async def list_pending_reminders(
    current_user: CurrentUser,
    db: DatabaseSession,
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
) -> list[ReminderResponse]:
    """
    List reminders not yet completed.

    Args:
        current_user: Authenticated user
        db: Database session
        start: Only reminders at or after this time
        end: Only reminders at or before this time
    """
    return await ReminderService(db).list_pending(current_user.id, start, end)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    data: ReminderCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> ReminderResponse:
    """Schedule a reminder for one of the caller's medications."""
    return await ReminderService(db).create_reminder(current_user.id, data)


@router.get("/{reminder_id}", response_model=ReminderResponse)
async def get_reminder(
    reminder_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> ReminderResponse:
    return await ReminderService(db).get_reminder(reminder_id, current_user.id)


@router.put("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
    reminder_id: UUID,
    data: ReminderUpdate,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> ReminderResponse:
    return await ReminderService(db).update_reminder(reminder_id, current_user.id, data)


@router.post("/{reminder_id}/complete", response_model=ReminderResponse)
async def complete_reminder(
    reminder_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> ReminderResponse:
    """Mark a reminder as done now."""
    return await ReminderService(db).complete_reminder(reminder_id, current_user.id)


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(
    reminder_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    await ReminderService(db).delete_reminder(reminder_id, current_user.id)
