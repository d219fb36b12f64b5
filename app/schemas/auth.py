"""Authentication schemas."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schemas.pharmacies import PharmacyStaffResponse
from app.schemas.users import UserResponse


class RoleName(str, Enum):
    """Global user roles."""

    USER = "ROLE_USER"
    PHARMACY = "ROLE_PHARMACY"
    ADMIN = "ROLE_ADMIN"


class Token(BaseModel):
    """JWT token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class LoginRequest(BaseModel):
    """Email and password credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Customer account registration."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=40)


class PharmacySignupRequest(BaseModel):
    """Pharmacy registration together with its first admin account."""

    # Pharmacy details
    pharmacy_name: str = Field(..., min_length=2, max_length=100)
    registration_number: str = Field(..., min_length=2, max_length=50)
    address: str = Field(..., min_length=5, max_length=255)
    phone: str | None = Field(None, pattern=r"^\+?[\d\s()-]{7,15}$")
    pharmacy_email: EmailStr | None = None
    website: str | None = None

    # Initial admin staff details
    admin_first_name: str = Field(..., min_length=2, max_length=50)
    admin_last_name: str = Field(..., min_length=2, max_length=50)
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=6, max_length=40)


class AuthResponse(Token):
    """Tokens plus the customer profile."""

    user: UserResponse


class PharmacyAuthResponse(Token):
    """Tokens plus the staff assignment of the pharmacy user."""

    pharmacy_staff: PharmacyStaffResponse


class ValidatedUserResponse(BaseModel):
    """Result of token validation, tagged by caller kind."""

    type: str = Field(..., description="'pharmacy' or 'user'")
    data: PharmacyStaffResponse | UserResponse


class UserPrincipal(BaseModel):
    """Authenticated caller passed explicitly to every protected handler."""

    id: UUID
    email: EmailStr
    first_name: str
    last_name: str
    roles: list[str] = []

    def has_role(self, role: RoleName) -> bool:
        return role.value in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(RoleName.ADMIN)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
