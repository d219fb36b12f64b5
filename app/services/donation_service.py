"""Donation service with an explicit status state machine."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException
from app.models.donations import donations
from app.schemas.donations import (
    DonationCreate,
    DonationResponse,
    DonationStatus,
    DonationUpdate,
)

logger = structlog.get_logger()

# PENDING is the only state with outgoing transitions
ALLOWED_TRANSITIONS: dict[DonationStatus, frozenset[DonationStatus]] = {
    DonationStatus.PENDING: frozenset(
        {DonationStatus.ACCEPTED, DonationStatus.COMPLETED, DonationStatus.REJECTED}
    ),
    DonationStatus.ACCEPTED: frozenset(),
    DonationStatus.COMPLETED: frozenset(),
    DonationStatus.REJECTED: frozenset(),
}


def transition_status(current: DonationStatus, target: DonationStatus) -> DonationStatus:
    """
    Validate a status change.

    Returns the target status. Requesting the current status is a no-op.

    Raises:
        BadRequestException: If the transition is not allowed
    """
    if current == target:
        return current
    if target not in ALLOWED_TRANSITIONS[current]:
        raise BadRequestException(
            f"Cannot change donation status from {current.value} to {target.value}"
        )
    return target


class DonationService:
    """Service for a user's medicine donations."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_owned(self, donation_id: UUID, user_id: UUID) -> dict:
        result = await self.db.execute(
            select(donations).where(
                and_(donations.c.id == donation_id, donations.c.user_id == user_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException(f"Donation not found with id: {donation_id}")
        return dict(row)

    async def list_donations(self, user_id: UUID) -> list[DonationResponse]:
        result = await self.db.execute(
            select(donations)
            .where(donations.c.user_id == user_id)
            .order_by(donations.c.donation_date.desc())
        )
        return [DonationResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def list_pending(self, user_id: UUID) -> list[DonationResponse]:
        result = await self.db.execute(
            select(donations)
            .where(
                and_(
                    donations.c.user_id == user_id,
                    donations.c.status == DonationStatus.PENDING.value,
                )
            )
            .order_by(donations.c.donation_date.desc())
        )
        return [DonationResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def get_donation(self, donation_id: UUID, user_id: UUID) -> DonationResponse:
        return DonationResponse.model_validate(await self._get_owned(donation_id, user_id))

    async def create_donation(self, user_id: UUID, data: DonationCreate) -> DonationResponse:
        """Offer a donation; it starts PENDING."""
        stmt = (
            insert(donations)
            .values(
                user_id=user_id,
                status=DonationStatus.PENDING.value,
                donation_date=datetime.now(UTC),
                **data.model_dump(),
            )
            .returning(donations)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        donation = dict(result.mappings().one())

        logger.info("donation_created", donation_id=str(donation["id"]))
        return DonationResponse.model_validate(donation)

    async def update_donation(
        self, donation_id: UUID, user_id: UUID, data: DonationUpdate
    ) -> DonationResponse:
        """
        Update editable fields and, if requested, move the status.

        A move to COMPLETED stamps ``completed_date``.
        """
        current = await self._get_owned(donation_id, user_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        target = update_data.pop("status", None)
        if target is not None:
            current_status = DonationStatus(current["status"])
            new_status = transition_status(current_status, target)
            if new_status != current_status:
                update_data["status"] = new_status.value
                if new_status == DonationStatus.COMPLETED:
                    update_data["completed_date"] = datetime.now(UTC)
                logger.info(
                    "donation_status_changed",
                    donation_id=str(donation_id),
                    from_status=current_status.value,
                    to_status=new_status.value,
                )

        if not update_data:
            return DonationResponse.model_validate(current)

        update_data["updated_at"] = datetime.now(UTC)
        stmt = (
            update(donations)
            .where(donations.c.id == donation_id)
            .values(**update_data)
            .returning(donations)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return DonationResponse.model_validate(dict(result.mappings().one()))

    async def delete_donation(self, donation_id: UUID, user_id: UUID) -> None:
        """Remove a donation; only PENDING donations can be deleted."""
        donation = await self._get_owned(donation_id, user_id)

        if donation["status"] != DonationStatus.PENDING.value:
            raise BadRequestException("Only pending donations can be deleted")

        await self.db.execute(delete(donations).where(donations.c.id == donation_id))
        await self.db.commit()
