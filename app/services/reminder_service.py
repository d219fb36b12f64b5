"""Reminder service; ownership is checked through the reminder's medication."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.medications import medications, reminders
from app.schemas.medications import ReminderCreate, ReminderResponse, ReminderUpdate
from app.services.medication_service import MedicationService

logger = structlog.get_logger()


class ReminderService:
    """Service for medication reminders."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.medications = MedicationService(db)

    def _query(self, user_id: UUID):
        """Reminders joined with their medication, scoped to the owning user."""
        return (
            select(
                reminders,
                medications.c.name.label("medication_name"),
                medications.c.dosage.label("medication_dosage"),
            )
            .select_from(reminders.join(medications, reminders.c.medication_id == medications.c.id))
            .where(medications.c.user_id == user_id)
        )

    async def _get_owned(self, reminder_id: UUID, user_id: UUID) -> ReminderResponse:
        result = await self.db.execute(self._query(user_id).where(reminders.c.id == reminder_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException(f"Reminder not found with id: {reminder_id}")
        return ReminderResponse.model_validate(dict(row))

    async def list_reminders(self, user_id: UUID) -> list[ReminderResponse]:
        result = await self.db.execute(self._query(user_id).order_by(reminders.c.reminder_time))
        return [ReminderResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def list_pending(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ReminderResponse]:
        """Incomplete reminders, optionally limited to ``[start, end]``."""
        query = self._query(user_id).where(reminders.c.completed.is_(False))
        if start is not None:
            query = query.where(reminders.c.reminder_time >= start)
        if end is not None:
            query = query.where(reminders.c.reminder_time <= end)

        result = await self.db.execute(query.order_by(reminders.c.reminder_time))
        return [ReminderResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def create_reminder(self, user_id: UUID, data: ReminderCreate) -> ReminderResponse:
        """Schedule a reminder for one of the user's medications."""
        await self.medications.get_owned(data.medication_id, user_id)

        stmt = (
            insert(reminders)
            .values(
                medication_id=data.medication_id,
                reminder_time=data.reminder_time,
                notes=data.notes,
                completed=False,
            )
            .returning(reminders.c.id)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return await self._get_owned(result.scalar_one(), user_id)

    async def get_reminder(self, reminder_id: UUID, user_id: UUID) -> ReminderResponse:
        return await self._get_owned(reminder_id, user_id)

    async def update_reminder(
        self, reminder_id: UUID, user_id: UUID, data: ReminderUpdate
    ) -> ReminderResponse:
        """
        Update a reminder.

        Moving it to another medication requires owning that medication.
        Marking it completed stamps ``completed_at`` once; clearing the flag
        clears the stamp.
        """
        current = await self._get_owned(reminder_id, user_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("medication_id") is not None:
            await self.medications.get_owned(update_data["medication_id"], user_id)
        else:
            update_data.pop("medication_id", None)

        if update_data.get("reminder_time") is None:
            update_data.pop("reminder_time", None)

        if "completed" in update_data:
            if update_data["completed"]:
                if current.completed_at is None:
                    update_data["completed_at"] = datetime.now(UTC)
            elif update_data["completed"] is False:
                update_data["completed_at"] = None
            else:
                update_data.pop("completed")

        if not update_data:
            return current

        update_data["updated_at"] = datetime.now(UTC)
        await self.db.execute(
            update(reminders).where(reminders.c.id == reminder_id).values(**update_data)
        )
        await self.db.commit()
        return await self._get_owned(reminder_id, user_id)

    async def complete_reminder(self, reminder_id: UUID, user_id: UUID) -> ReminderResponse:
        """Mark a reminder done now."""
        await self._get_owned(reminder_id, user_id)

        now = datetime.now(UTC)
        await self.db.execute(
            update(reminders)
            .where(reminders.c.id == reminder_id)
            .values(completed=True, completed_at=now, updated_at=now)
        )
        await self.db.commit()

        logger.info("reminder_completed", reminder_id=str(reminder_id))
        return await self._get_owned(reminder_id, user_id)

    async def delete_reminder(self, reminder_id: UUID, user_id: UUID) -> None:
        await self._get_owned(reminder_id, user_id)
        await self.db.execute(delete(reminders).where(reminders.c.id == reminder_id))
        await self.db.commit()
