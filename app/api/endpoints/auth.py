"""Authentication endpoints."""

from fastapi import APIRouter, status

from app.dependencies import CacheManagerDep, CurrentUser, DatabaseSession
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PharmacyAuthResponse,
    PharmacySignupRequest,
    SignupRequest,
    Token,
    TokenRefresh,
    ValidatedUserResponse,
)
from app.schemas.pharmacies import PharmacyStaffResponse
from app.schemas.users import UserResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a customer account",
)
async def signup(
    request: SignupRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> AuthResponse:
    """
    Register a customer account with ROLE_USER.

    Args:
        request: Name, email and password
        db: Database session
        cache_manager: Cache manager

    Returns:
        Access token, refresh token, and user information
    """
    user, tokens = await AuthService(cache_manager).signup(db, request)
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Customer login",
)
async def login(
    request: LoginRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> AuthResponse:
    """
    Log in with email and password.

    Pharmacy accounts are rejected with 401 and must use ``/auth/pharmacy/login``.
    """
    user, tokens = await AuthService(cache_manager).login(db, request)
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post(
    "/pharmacy/signup",
    response_model=PharmacyAuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a pharmacy and its admin",
)
async def pharmacy_signup(
    request: PharmacySignupRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> PharmacyAuthResponse:
    """
    Register a pharmacy together with its first administrator.

    The admin user, the pharmacy and the ADMIN staff row are created in a
    single transaction.
    """
    staff, tokens = await AuthService(cache_manager).pharmacy_signup(db, request)
    return PharmacyAuthResponse(
        **tokens.model_dump(),
        pharmacy_staff=PharmacyStaffResponse.model_validate(staff),
    )


@router.post(
    "/pharmacy/login",
    response_model=PharmacyAuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Pharmacy staff login",
)
async def pharmacy_login(
    request: LoginRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> PharmacyAuthResponse:
    """Log in as pharmacy staff; requires ROLE_PHARMACY and an active staff row."""
    staff, tokens = await AuthService(cache_manager).pharmacy_login(db, request)
    return PharmacyAuthResponse(
        **tokens.model_dump(),
        pharmacy_staff=PharmacyStaffResponse.model_validate(staff),
    )


@router.get(
    "/validate",
    response_model=ValidatedUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate token and describe the caller",
)
async def validate(
    current_user: CurrentUser,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> ValidatedUserResponse:
    """Return the caller's staff assignment (pharmacy) or profile (user)."""
    result = await AuthService(cache_manager).validate(db, current_user)

    if result["type"] == "pharmacy":
        data = PharmacyStaffResponse.model_validate(result["data"])
    else:
        data = UserResponse.model_validate(result["data"])
    return ValidatedUserResponse(type=result["type"], data=data)


@router.post(
    "/refresh",
    response_model=Token,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
)
async def refresh_token(
    request: TokenRefresh,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> Token:
    """
    Refresh access token using refresh token.

    Args:
        request: Refresh token
        db: Database session
        cache_manager: Cache manager holding revoked tokens

    Returns:
        New access token and refresh token
    """
    return await AuthService(cache_manager).refresh_access_token(db, request.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout and revoke tokens",
)
async def logout(
    request: TokenRefresh,
    cache_manager: CacheManagerDep,
) -> None:
    """
    Logout user by revoking refresh token.

    Args:
        request: Refresh token to revoke
        cache_manager: Cache manager holding revoked tokens
    """
    AuthService(cache_manager).revoke_token(request.refresh_token)
