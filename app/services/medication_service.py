"""Medication service for per-user medication records."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException
from app.models.medications import medications, reminders
from app.schemas.medications import MedicationCreate, MedicationResponse, MedicationUpdate


class MedicationService:
    """Service for managing a user's medications."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_owned(self, medication_id: UUID, user_id: UUID) -> dict:
        """
        Load a medication owned by the user.

        Raises:
            NotFoundException: If missing or owned by someone else
        """
        result = await self.db.execute(
            select(medications).where(
                and_(medications.c.id == medication_id, medications.c.user_id == user_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException(f"Medication not found with id: {medication_id}")
        return dict(row)

    async def list_medications(
        self, user_id: UUID, active_only: bool = False
    ) -> list[MedicationResponse]:
        """List the user's medications, optionally only active ones."""
        query = select(medications).where(medications.c.user_id == user_id)
        if active_only:
            query = query.where(medications.c.active.is_(True))
        query = query.order_by(medications.c.start_date.desc(), medications.c.name)

        result = await self.db.execute(query)
        return [MedicationResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def create_medication(self, user_id: UUID, data: MedicationCreate) -> MedicationResponse:
        stmt = insert(medications).values(user_id=user_id, **data.model_dump()).returning(medications)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return MedicationResponse.model_validate(dict(result.mappings().one()))

    async def get_medication(self, medication_id: UUID, user_id: UUID) -> MedicationResponse:
        return MedicationResponse.model_validate(await self.get_owned(medication_id, user_id))

    async def update_medication(
        self, medication_id: UUID, user_id: UUID, data: MedicationUpdate
    ) -> MedicationResponse:
        """Apply a partial update to an owned medication."""
        current = await self.get_owned(medication_id, user_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return MedicationResponse.model_validate(current)

        start = update_data.get("start_date") or current["start_date"]
        end = update_data.get("end_date", current["end_date"])
        if end is not None and end < start:
            raise BadRequestException("end_date must not be before start_date")

        update_data["updated_at"] = datetime.now(UTC)
        stmt = (
            update(medications)
            .where(medications.c.id == medication_id)
            .values(**update_data)
            .returning(medications)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return MedicationResponse.model_validate(dict(result.mappings().one()))

    async def delete_medication(self, medication_id: UUID, user_id: UUID) -> None:
        """Delete an owned medication together with its reminders."""
        await self.get_owned(medication_id, user_id)
        await self.db.execute(delete(reminders).where(reminders.c.medication_id == medication_id))
        await self.db.execute(delete(medications).where(medications.c.id == medication_id))
        await self.db.commit()
