"""User endpoints."""

from fastapi import APIRouter

from app.core.exceptions import NotFoundException
from app.dependencies import CacheManagerDep, CurrentUser, DatabaseSession
from app.schemas.users import UserResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    current_user: CurrentUser,
    cache_manager: CacheManagerDep,
    db: DatabaseSession,
):
    """Get current user's profile."""
    user = await UserService(cache_manager).get_user_by_id(db, current_user.id)

    if not user:
        raise NotFoundException("User not found")

    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user_profile(
    user_data: UserUpdate,
    current_user: CurrentUser,
    cache_manager: CacheManagerDep,
    db: DatabaseSession,
):
    """Update current user's profile."""
    user = await UserService(cache_manager).update_user(db, current_user.id, user_data)

    if not user:
        raise NotFoundException("User not found")

    return UserResponse.model_validate(user)
