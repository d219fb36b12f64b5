"""Family member service."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.family_members import family_members
from app.schemas.family import FamilyMemberCreate, FamilyMemberResponse, FamilyMemberUpdate

ACTIVE_STATUS = "Active"


class FamilyService:
    """Service for family members with delegated access."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _get_owned(self, member_id: UUID, user_id: UUID) -> dict:
        result = await self.db.execute(
            select(family_members).where(
                and_(family_members.c.id == member_id, family_members.c.user_id == user_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException(f"Family member not found with id: {member_id}")
        return dict(row)

    async def list_members(self, user_id: UUID) -> list[FamilyMemberResponse]:
        result = await self.db.execute(
            select(family_members)
            .where(family_members.c.user_id == user_id)
            .order_by(family_members.c.name)
        )
        return [FamilyMemberResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def get_member(self, member_id: UUID, user_id: UUID) -> FamilyMemberResponse:
        return FamilyMemberResponse.model_validate(await self._get_owned(member_id, user_id))

    async def create_member(self, user_id: UUID, data: FamilyMemberCreate) -> FamilyMemberResponse:
        stmt = (
            insert(family_members)
            .values(user_id=user_id, status=ACTIVE_STATUS, **data.model_dump())
            .returning(family_members)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return FamilyMemberResponse.model_validate(dict(result.mappings().one()))

    async def update_member(
        self, member_id: UUID, user_id: UUID, data: FamilyMemberUpdate
    ) -> FamilyMemberResponse:
        """Update name, relationship, age or permission flags."""
        current = await self._get_owned(member_id, user_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return FamilyMemberResponse.model_validate(current)

        update_data["updated_at"] = datetime.now(UTC)
        stmt = (
            update(family_members)
            .where(family_members.c.id == member_id)
            .values(**update_data)
            .returning(family_members)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return FamilyMemberResponse.model_validate(dict(result.mappings().one()))

    async def delete_member(self, member_id: UUID, user_id: UUID) -> None:
        await self._get_owned(member_id, user_id)
        await self.db.execute(delete(family_members).where(family_members.c.id == member_id))
        await self.db.commit()
