"""User service with business logic."""

from datetime import datetime, timezone
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.content_filter import ensure_clean
from petcrush.domains.user.models import User
from petcrush.domains.user.schemas import UserUpdate
from petcrush.domains.user.repository import user_repository


class UserService:
    """Service for user accounts and profiles."""

    def __init__(self):
        self.repository = user_repository

    async def get_user(self, session: AsyncSession, user_id: str) -> Optional[User]:
        """Get user by ID."""
        return await self.repository.get_by_id(session, user_id)

    async def email_exists(self, session: AsyncSession, email: str) -> bool:
        return await self.repository.email_exists(session, email)

    async def get_or_create_by_email(self, session: AsyncSession, email: str) -> Tuple[User, bool]:
        """Return ``(user, created)``; first login creates a verified account."""
        user = await self.repository.get_by_email(session, email)
        created = user is None
        if created:
            user = await self.repository.create(session, User(
                email=email,
                username=email,
                display_name=email.split("@")[0],
                verified=True,
            ))

        user.last_login_at = datetime.now(timezone.utc)
        return await self.repository.update(session, user), created

    async def update_profile(self, session: AsyncSession, user: User, data: UserUpdate) -> User:
        """Apply a profile edit; absent and null fields are left untouched."""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        ensure_clean(changes.get("display_name"), "displayName")
        ensure_clean(changes.get("region"), "region")

        if "profile_image_url" in changes:
            changes["profile_image_url"] = str(changes["profile_image_url"])

        for field, value in changes.items():
            setattr(user, field, value)

        return await self.repository.update(session, user)


# Singleton instance
user_service = UserService()
