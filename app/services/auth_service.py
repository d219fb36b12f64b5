"""Authentication service for credentials, roles and JWT."""

from datetime import timedelta
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AppException,
    BadRequestException,
    ConflictException,
    UnauthorizedException,
)
from app.core.redis_client import CacheManager
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from app.schemas.auth import (
    LoginRequest,
    PharmacySignupRequest,
    RoleName,
    SignupRequest,
    Token,
    UserPrincipal,
)
from app.schemas.pharmacies import StaffRole
from app.schemas.users import UserCreate
from app.services.pharmacy_service import PharmacyService
from app.services.user_service import UserService

logger = structlog.get_logger()


class AuthService:
    """Authentication service for customer and pharmacy accounts."""

    def __init__(self, cache_manager: CacheManager):
        """Initialize auth service with cache manager."""
        self.cache = cache_manager
        self.user_service = UserService(cache_manager)

    def create_tokens(self, user: dict) -> Token:
        """
        Create access and refresh tokens for a user.

        Args:
            user: User dict with ``id``, ``email`` and ``roles``

        Returns:
            Token pair (access and refresh)
        """
        claims = {"sub": str(user["id"]), "email": user["email"], "roles": user["roles"]}

        access_token = create_access_token(
            data=claims,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

        refresh_token = create_refresh_token(
            data={"sub": str(user["id"])},
            expires_delta=timedelta(days=settings.refresh_token_expire_days),
        )

        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
        )

    async def _authenticate(self, db: AsyncSession, email: str, password: str) -> dict:
        """Check credentials and return the user with roles, password hash removed."""
        user = await self.user_service.get_user_by_email(db, email)

        if not user or not verify_password(password, user["password_hash"]):
            logger.info("login_rejected_bad_credentials", email=email)
            raise UnauthorizedException("Invalid email or password")

        if not user["enabled"]:
            logger.info("login_rejected_disabled", user_id=str(user["id"]))
            raise UnauthorizedException("User account is disabled")

        user.pop("password_hash", None)
        return user

    async def signup(self, db: AsyncSession, signup_data: SignupRequest) -> tuple[dict, Token]:
        """
        Register a customer account.

        Raises:
            BadRequestException: If the email is already registered
        """
        if await self.user_service.email_exists(db, signup_data.email):
            raise BadRequestException("Email is already in use!")

        try:
            user = await self.user_service.create_user(
                db,
                UserCreate(
                    email=signup_data.email,
                    first_name=signup_data.first_name,
                    last_name=signup_data.last_name,
                    password=signup_data.password,
                ),
                role_names=[RoleName.USER],
            )
        except IntegrityError:
            await db.rollback()
            raise BadRequestException("Email is already in use!")

        user.pop("password_hash", None)
        logger.info("user_registered", user_id=str(user["id"]))
        return user, self.create_tokens(user)

    async def login(self, db: AsyncSession, login_data: LoginRequest) -> tuple[dict, Token]:
        """
        Customer login.

        Pharmacy accounts are rejected here and must use the pharmacy login.
        """
        user = await self._authenticate(db, login_data.email, login_data.password)
        user_roles = set(user["roles"])

        if RoleName.USER.value not in user_roles or RoleName.PHARMACY.value in user_roles:
            logger.info("login_rejected_wrong_role", user_id=str(user["id"]), roles=user["roles"])
            raise UnauthorizedException("Please use the pharmacy login for pharmacy accounts")

        return user, self.create_tokens(user)

    async def pharmacy_signup(
        self, db: AsyncSession, signup_data: PharmacySignupRequest
    ) -> tuple[dict, Token]:
        """
        Register a pharmacy with its first admin in a single transaction.

        Creates the admin user (ROLE_PHARMACY), the pharmacy owned by that user
        and an active ADMIN staff row. Nothing is persisted if any step fails.

        Raises:
            BadRequestException: Duplicate admin email, registration number or
                pharmacy email
            ConflictException: A concurrent registration won the unique check
        """
        if await self.user_service.email_exists(db, signup_data.admin_email):
            raise BadRequestException("Email is already in use!")

        if await PharmacyService.registration_number_exists(db, signup_data.registration_number):
            raise BadRequestException("Registration number is already in use!")

        if signup_data.pharmacy_email and await self.user_service.email_exists(
            db, signup_data.pharmacy_email
        ):
            raise BadRequestException("Pharmacy email is already in use by another account!")

        try:
            user = await self.user_service.create_user(
                db,
                UserCreate(
                    email=signup_data.admin_email,
                    first_name=signup_data.admin_first_name,
                    last_name=signup_data.admin_last_name,
                    password=signup_data.admin_password,
                ),
                role_names=[RoleName.PHARMACY],
                commit=False,
            )
            pharmacy = await PharmacyService.create_pharmacy(
                db,
                name=signup_data.pharmacy_name,
                registration_number=signup_data.registration_number,
                address=signup_data.address,
                owner_id=user["id"],
                phone=signup_data.phone,
                email=signup_data.pharmacy_email,
                website=signup_data.website,
            )
            staff_id = await PharmacyService.create_staff_assignment(
                db, pharmacy["id"], user["id"], StaffRole.ADMIN
            )
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("pharmacy_signup_conflict", error=str(e.orig))
            raise ConflictException("Pharmacy or admin account already exists")
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "pharmacy_registered",
            pharmacy_id=str(pharmacy["id"]),
            admin_user_id=str(user["id"]),
        )

        staff = await PharmacyService.get_staff_profile(db, staff_id)
        if not staff:
            raise AppException("Failed to retrieve created staff member")
        return staff, self.create_tokens(user)

    async def pharmacy_login(
        self, db: AsyncSession, login_data: LoginRequest
    ) -> tuple[dict, Token]:
        """Pharmacy staff login; requires ROLE_PHARMACY and an active staff row."""
        user = await self._authenticate(db, login_data.email, login_data.password)

        if RoleName.PHARMACY.value not in user["roles"]:
            logger.info("pharmacy_login_rejected_wrong_role", user_id=str(user["id"]))
            raise UnauthorizedException("Access denied. Not a pharmacy account.")

        staff = await PharmacyService.get_staff_for_user(db, user["id"], active_only=True)
        if not staff:
            logger.info("pharmacy_login_rejected_inactive", user_id=str(user["id"]))
            raise UnauthorizedException("Pharmacy staff account is inactive or not assigned")

        return staff, self.create_tokens(user)

    async def validate(self, db: AsyncSession, principal: UserPrincipal) -> dict:
        """
        Describe the authenticated caller.

        Returns:
            ``{"type": "pharmacy", "data": staff}`` or ``{"type": "user", "data": user}``
        """
        if principal.has_role(RoleName.PHARMACY):
            staff = await PharmacyService.get_staff_for_user(db, principal.id)
            if not staff:
                logger.error("pharmacy_user_without_staff", user_id=str(principal.id))
                raise AppException("User role inconsistency detected")
            return {"type": "pharmacy", "data": staff}

        if principal.has_role(RoleName.USER):
            user = await self.user_service.get_user_by_id(db, principal.id)
            if not user:
                raise UnauthorizedException("User not found")
            return {"type": "user", "data": user}

        raise UnauthorizedException("Unsupported account type")

    async def refresh_access_token(self, db: AsyncSession, refresh_token: str) -> Token:
        """
        Create a new token pair from a refresh token.

        Raises:
            UnauthorizedException: If refresh token is invalid or revoked
        """
        payload = decode_refresh_token(refresh_token)

        if payload is None:
            raise UnauthorizedException("Invalid refresh token")

        user_id = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Invalid refresh token")

        # Check if token is blacklisted
        if self.cache.exists(f"blacklist:{refresh_token}"):
            raise UnauthorizedException("Token has been revoked")

        try:
            user = await self.user_service.get_user_by_id(db, UUID(user_id))
        except ValueError:
            raise UnauthorizedException("Invalid refresh token")

        if not user or not user["enabled"]:
            raise UnauthorizedException("Invalid refresh token")

        return self.create_tokens(user)

    def revoke_token(self, token: str, ttl: int | None = None) -> None:
        """
        Revoke a refresh token by adding it to blacklist.

        Args:
            token: Token to revoke
            ttl: Time to live for blacklist entry (default: refresh token lifetime)
        """
        if ttl is None:
            ttl = settings.refresh_token_expire_days * 86400
        self.cache.set(f"blacklist:{token}", "1", ttl=ttl)
        logger.info("refresh_token_revoked")
