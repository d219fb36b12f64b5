"""FastAPI dependencies."""

from typing import Annotated
from uuid import UUID

import redis
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.redis_client import CacheManager, get_redis_client
from app.core.security import decode_access_token
from app.database import get_db
from app.schemas.auth import UserPrincipal
from app.services.user_service import UserService

# Security; missing credentials are reported as 401 below rather than 403
security = HTTPBearer(auto_error=False)


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_cache_manager(
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> CacheManager:
    """Cache manager bound to the shared Redis client."""
    return CacheManager(redis_client)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate user ID from JWT token.

    Args:
        credentials: Bearer token credentials

    Returns:
        User ID from token

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    if credentials is None:
        raise _credentials_error("Not authenticated")

    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise _credentials_error()

    user_id_str = payload.get("sub")
    if user_id_str is None or not isinstance(user_id_str, str):
        raise _credentials_error()

    try:
        return UUID(user_id_str)
    except ValueError:
        raise _credentials_error("Invalid user ID format")


async def get_current_user(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheManager, Depends(get_cache_manager)],
) -> UserPrincipal:
    """
    Load the authenticated principal.

    Args:
        user_id: User ID from JWT token
        db: Database session
        cache: Cache for user profiles

    Returns:
        Principal with identity and role names

    Raises:
        HTTPException: If user not found or disabled
    """
    user = await UserService(cache).get_user_by_id(db, user_id)

    if not user:
        raise _credentials_error("User not found")

    if not user["enabled"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return UserPrincipal(
        id=user["id"],
        email=user["email"],
        first_name=user["first_name"],
        last_name=user["last_name"],
        roles=user.get("roles", []),
    )


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
CurrentUser = Annotated[UserPrincipal, Depends(get_current_user)]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
