"""User service for business logic."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.redis_client import CacheManager
from app.core.security import get_password_hash
from app.models.users import roles, user_roles, users
from app.schemas.auth import RoleName
from app.schemas.users import UserCreate, UserUpdate

logger = structlog.get_logger()


async def seed_roles(db: AsyncSession) -> None:
    """Insert any missing role rows."""
    result = await db.execute(select(roles.c.name))
    existing = set(result.scalars().all())
    missing = [{"name": role.value} for role in RoleName if role.value not in existing]

    if missing:
        await db.execute(insert(roles), missing)
        await db.commit()
        logger.info("roles_seeded", roles=[row["name"] for row in missing])


class UserService:
    """Service for user operations."""

    # Cache TTL in seconds (30 minutes for user profiles)
    USER_CACHE_TTL = 1800

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_user_cache_key(user_id: UUID) -> str:
        """Generate cache key for user."""
        return f"user:{user_id}"

    def _invalidate(self, user_id: UUID) -> None:
        if self.cache:
            self.cache.delete(self._get_user_cache_key(user_id))

    @staticmethod
    async def get_user_roles(db: AsyncSession, user_id: UUID) -> list[str]:
        """Get the role names assigned to a user."""
        query = (
            select(roles.c.name)
            .select_from(user_roles.join(roles, user_roles.c.role_id == roles.c.id))
            .where(user_roles.c.user_id == user_id)
            .order_by(roles.c.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def assign_roles(db: AsyncSession, user_id: UUID, role_names: list[RoleName]) -> None:
        """Attach roles to a user. Does not commit."""
        result = await db.execute(
            select(roles.c.id, roles.c.name).where(
                roles.c.name.in_([role.value for role in role_names])
            )
        )
        found = result.mappings().all()
        if len(found) != len(role_names):
            raise ValueError("Error: Role is not found.")

        await db.execute(
            insert(user_roles),
            [{"user_id": user_id, "role_id": row["id"]} for row in found],
        )

    async def create_user(
        self,
        db: AsyncSession,
        user_data: UserCreate,
        role_names: list[RoleName],
        commit: bool = True,
    ) -> dict:
        """
        Create a new user with hashed password and roles.

        Args:
            db: Database session
            user_data: Profile and plain password
            role_names: Global roles to assign
            commit: Commit immediately; pass False to join a larger transaction

        Returns:
            User dict including its role names
        """
        query = (
            users.insert()
            .values(
                email=user_data.email,
                password_hash=get_password_hash(user_data.password),
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                image_url=user_data.image_url,
                enabled=True,
            )
            .returning(users)
        )

        result = await db.execute(query)
        user = result.mappings().first()

        if not user:
            raise ValueError("Failed to create user")

        user_dict = dict(user)
        await self.assign_roles(db, user_dict["id"], role_names)

        if commit:
            await db.commit()

        user_dict["roles"] = sorted(role.value for role in role_names)
        return user_dict

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> dict | None:
        """Get user profile by ID with caching. Never includes the password hash."""
        # Try cache first
        if self.cache:
            cache_key = self._get_user_cache_key(user_id)
            cached_user = self.cache.get_json(cache_key)
            if cached_user:
                return cached_user

        # Query database
        query = select(users).where(users.c.id == user_id)
        result = await db.execute(query)
        user = result.mappings().first()

        if not user:
            return None

        user_dict = dict(user)
        user_dict.pop("password_hash", None)
        user_dict["roles"] = await self.get_user_roles(db, user_id)

        # Cache the result
        if self.cache:
            cache_key = self._get_user_cache_key(user_id)
            self.cache.set_json(cache_key, user_dict, ttl=self.USER_CACHE_TTL)

        return user_dict

    async def get_user_by_email(self, db: AsyncSession, email: str) -> dict | None:
        """Get user by email, including password hash and roles."""
        query = select(users).where(users.c.email == email)
        result = await db.execute(query)
        user = result.mappings().first()

        if not user:
            return None

        user_dict = dict(user)
        user_dict["roles"] = await self.get_user_roles(db, user_dict["id"])
        return user_dict

    async def email_exists(self, db: AsyncSession, email: str) -> bool:
        """Check whether an account already uses this email."""
        result = await db.execute(select(users.c.id).where(users.c.email == email))
        return result.first() is not None

    async def update_user(
        self, db: AsyncSession, user_id: UUID, user_data: UserUpdate
    ) -> dict | None:
        """Update user profile."""
        # Prepare update data
        update_data = user_data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.get_user_by_id(db, user_id)

        update_data["updated_at"] = datetime.now(UTC)

        query = update(users).where(users.c.id == user_id).values(**update_data)
        result = await db.execute(query)
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            return None

        # Invalidate cache
        self._invalidate(user_id)

        return await self.get_user_by_id(db, user_id)

    async def set_enabled(self, db: AsyncSession, user_id: UUID, enabled: bool) -> None:
        """Enable or disable a user account."""
        query = (
            update(users)
            .where(users.c.id == user_id)
            .values(enabled=enabled, updated_at=datetime.now(UTC))
        )
        await db.execute(query)
        await db.commit()

        self._invalidate(user_id)
