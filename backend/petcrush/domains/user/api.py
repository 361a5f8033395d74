"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.user.models import User
from petcrush.domains.user.schemas import UserResponse, UserUpdate
from petcrush.domains.user.service import user_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Update current user profile."""
    user = await user_service.update_profile(session, current_user, data)
    await session.commit()
    return user
