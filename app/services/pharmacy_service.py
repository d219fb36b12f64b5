"""Pharmacy and staff service for business logic."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.models.pharmacies import pharmacies
from app.models.pharmacy_staff import pharmacy_staff
from app.models.users import users
from app.schemas.auth import RoleName, UserPrincipal
from app.schemas.pharmacies import StaffCreate, StaffRole, StaffUpdate
from app.schemas.users import UserCreate
from app.services.user_service import UserService

logger = structlog.get_logger()


def _staff_profile_query():
    """Staff rows joined with their pharmacy name and user identity."""
    return select(
        pharmacy_staff,
        pharmacies.c.name.label("pharmacy_name"),
        users.c.first_name,
        users.c.last_name,
        users.c.email,
    ).select_from(
        pharmacy_staff.join(pharmacies, pharmacy_staff.c.pharmacy_id == pharmacies.c.id).join(
            users, pharmacy_staff.c.user_id == users.c.id
        )
    )


class PharmacyService:
    """Service for pharmacy and staff operations."""

    # ------------------------------------------------------------------
    # Pharmacies
    # ------------------------------------------------------------------

    @staticmethod
    async def create_pharmacy(
        db: AsyncSession,
        name: str,
        registration_number: str,
        address: str,
        owner_id: UUID,
        phone: str | None = None,
        email: str | None = None,
        website: str | None = None,
    ) -> dict:
        """Insert an active pharmacy. Does not commit."""
        query = (
            pharmacies.insert()
            .values(
                name=name,
                registration_number=registration_number,
                address=address,
                phone=phone,
                email=email,
                website=website,
                is_active=True,
                owner_id=owner_id,
            )
            .returning(pharmacies)
        )

        result = await db.execute(query)
        pharmacy = result.mappings().first()

        if not pharmacy:
            raise ValueError("Failed to create pharmacy")

        return dict(pharmacy)

    @staticmethod
    async def get_pharmacy_by_id(db: AsyncSession, pharmacy_id: UUID) -> dict | None:
        """Get pharmacy by ID with its owner's name."""
        query = (
            select(
                pharmacies,
                users.c.first_name.label("owner_first_name"),
                users.c.last_name.label("owner_last_name"),
            )
            .select_from(pharmacies.outerjoin(users, pharmacies.c.owner_id == users.c.id))
            .where(pharmacies.c.id == pharmacy_id)
        )
        result = await db.execute(query)
        pharmacy = result.mappings().first()

        if not pharmacy:
            return None

        pharmacy_dict = dict(pharmacy)
        first = pharmacy_dict.pop("owner_first_name")
        last = pharmacy_dict.pop("owner_last_name")
        pharmacy_dict["owner_name"] = f"{first} {last}" if first else None
        return pharmacy_dict

    @staticmethod
    async def get_pharmacy_or_404(db: AsyncSession, pharmacy_id: UUID) -> dict:
        """Get pharmacy by ID or raise NotFoundException."""
        pharmacy = await PharmacyService.get_pharmacy_by_id(db, pharmacy_id)
        if not pharmacy:
            raise NotFoundException(f"Pharmacy not found with id: {pharmacy_id}")
        return pharmacy

    @staticmethod
    async def registration_number_exists(db: AsyncSession, registration_number: str) -> bool:
        """Check whether a pharmacy already uses this registration number."""
        result = await db.execute(
            select(pharmacies.c.id).where(pharmacies.c.registration_number == registration_number)
        )
        return result.first() is not None

    # ------------------------------------------------------------------
    # Authorization helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def get_active_assignment(
        db: AsyncSession, pharmacy_id: UUID, user_id: UUID
    ) -> dict | None:
        """Get the caller's active staff row for a pharmacy."""
        query = select(pharmacy_staff).where(
            and_(
                pharmacy_staff.c.pharmacy_id == pharmacy_id,
                pharmacy_staff.c.user_id == user_id,
                pharmacy_staff.c.is_active.is_(True),
            )
        )
        result = await db.execute(query)
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def is_pharmacy_member(
        db: AsyncSession, pharmacy_id: UUID, principal: UserPrincipal
    ) -> bool:
        """True for ROLE_ADMIN or any active staff of the pharmacy."""
        if principal.is_admin:
            return True
        return await PharmacyService.get_active_assignment(db, pharmacy_id, principal.id) is not None

    @staticmethod
    async def is_pharmacy_admin(
        db: AsyncSession, pharmacy_id: UUID, principal: UserPrincipal
    ) -> bool:
        """True for ROLE_ADMIN or an active ADMIN staff row of the pharmacy."""
        if principal.is_admin:
            return True
        assignment = await PharmacyService.get_active_assignment(db, pharmacy_id, principal.id)
        return assignment is not None and assignment["role"] == StaffRole.ADMIN.value

    @staticmethod
    async def require_member(db: AsyncSession, pharmacy_id: UUID, principal: UserPrincipal) -> None:
        """Raise ForbiddenException unless the caller may read pharmacy data."""
        if not await PharmacyService.is_pharmacy_member(db, pharmacy_id, principal):
            raise ForbiddenException("You are not a member of this pharmacy")

    @staticmethod
    async def require_admin(db: AsyncSession, pharmacy_id: UUID, principal: UserPrincipal) -> None:
        """Raise ForbiddenException unless the caller administers the pharmacy."""
        if not await PharmacyService.is_pharmacy_admin(db, pharmacy_id, principal):
            raise ForbiddenException("Only pharmacy administrators can perform this action")

    # ------------------------------------------------------------------
    # Staff
    # ------------------------------------------------------------------

    @staticmethod
    async def create_staff_assignment(
        db: AsyncSession, pharmacy_id: UUID, user_id: UUID, role: StaffRole
    ) -> UUID:
        """Insert an active staff row. Does not commit."""
        result = await db.execute(
            pharmacy_staff.insert()
            .values(pharmacy_id=pharmacy_id, user_id=user_id, role=role.value, is_active=True)
            .returning(pharmacy_staff.c.id)
        )
        return result.scalar_one()

    @staticmethod
    async def get_staff_profile(db: AsyncSession, staff_id: UUID) -> dict | None:
        """Get a staff row with pharmacy and user context."""
        result = await db.execute(_staff_profile_query().where(pharmacy_staff.c.id == staff_id))
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def get_staff_for_user(
        db: AsyncSession, user_id: UUID, active_only: bool = False
    ) -> dict | None:
        """Get the user's first staff assignment, preferring active ones."""
        query = _staff_profile_query().where(pharmacy_staff.c.user_id == user_id)
        if active_only:
            query = query.where(pharmacy_staff.c.is_active.is_(True))
        query = query.order_by(pharmacy_staff.c.is_active.desc(), pharmacy_staff.c.created_at)

        result = await db.execute(query)
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def list_staff(db: AsyncSession, pharmacy_id: UUID) -> list[dict]:
        """List every staff row of a pharmacy."""
        query = (
            _staff_profile_query()
            .where(pharmacy_staff.c.pharmacy_id == pharmacy_id)
            .order_by(pharmacy_staff.c.created_at, users.c.last_name)
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def add_staff(
        db: AsyncSession,
        pharmacy_id: UUID,
        staff_data: StaffCreate,
        user_service: UserService,
    ) -> dict:
        """
        Create a pharmacy account and its staff row in one transaction.

        Raises:
            BadRequestException: If the email is already registered
        """
        if await user_service.email_exists(db, staff_data.email):
            raise BadRequestException("Email is already in use!")

        try:
            user = await user_service.create_user(
                db,
                UserCreate(
                    email=staff_data.email,
                    first_name=staff_data.first_name,
                    last_name=staff_data.last_name,
                    password=staff_data.password,
                ),
                role_names=[RoleName.PHARMACY],
                commit=False,
            )
            staff_id = await PharmacyService.create_staff_assignment(
                db, pharmacy_id, user["id"], staff_data.role
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BadRequestException("Email is already in use!")

        logger.info(
            "pharmacy_staff_added",
            pharmacy_id=str(pharmacy_id),
            staff_id=str(staff_id),
            role=staff_data.role.value,
        )

        staff = await PharmacyService.get_staff_profile(db, staff_id)
        if not staff:
            raise ValueError("Failed to retrieve created staff member")
        return staff

    @staticmethod
    async def update_staff(
        db: AsyncSession, pharmacy_id: UUID, staff_id: UUID, staff_data: StaffUpdate
    ) -> dict:
        """Change the role or active flag of a staff row."""
        update_data = staff_data.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in update_data:
            update_data["role"] = update_data["role"].value

        if update_data:
            update_data["updated_at"] = datetime.now(UTC)
            result = await db.execute(
                update(pharmacy_staff)
                .where(
                    and_(
                        pharmacy_staff.c.id == staff_id,
                        pharmacy_staff.c.pharmacy_id == pharmacy_id,
                    )
                )
                .values(**update_data)
            )
            await db.commit()
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise NotFoundException("Staff member not found")

        staff = await PharmacyService.get_staff_profile(db, staff_id)
        if not staff or staff["pharmacy_id"] != pharmacy_id:
            raise NotFoundException("Staff member not found")

        logger.info("pharmacy_staff_updated", staff_id=str(staff_id), changes=list(update_data))
        return staff
