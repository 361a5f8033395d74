"""Pet service: profiles, ownership checks and active-pet selection."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.content_filter import ensure_clean
from petcrush.common.exceptions import Forbidden, NotFound, ValidationFailed
from petcrush.domains.pet.models import MIN_PHOTOS, MIN_VIDEO_SECONDS, Pet
from petcrush.domains.pet.repository import pet_repository
from petcrush.domains.pet.schemas import PetCreate, PetUpdate
from petcrush.domains.user.models import User

logger = logging.getLogger(__name__)

FILTERED_TEXT_FIELDS = (
    ("display_name", "displayName"),
    ("about", "about"),
    ("health_notes", "healthNotes"),
)


def check_text(values: Dict[str, Any]) -> None:
    for attr, field in FILTERED_TEXT_FIELDS:
        ensure_clean(values.get(attr), field)


def check_photos(photos: List[str]) -> None:
    if len([p for p in photos if p]) < MIN_PHOTOS:
        raise ValidationFailed(f"At least {MIN_PHOTOS} photos are required", field="photos")


def check_video_duration(duration: Optional[float]) -> None:
    if duration is None or duration < MIN_VIDEO_SECONDS:
        raise ValidationFailed(
            f"Video must be at least {MIN_VIDEO_SECONDS} seconds long", field="videoDuration"
        )


class PetService:
    """Service for pet profiles."""

    def __init__(self):
        self.repository = pet_repository

    async def get_pet(self, session: AsyncSession, pet_id: int) -> Optional[Pet]:
        return await self.repository.get_by_id(session, pet_id)

    async def require_pet(self, session: AsyncSession, pet_id: int) -> Pet:
        pet = await self.repository.get_by_id(session, pet_id)
        if pet is None:
            raise NotFound("Pet not found")
        return pet

    async def require_owned_pet(self, session: AsyncSession, user_id: str, pet_id: int) -> Pet:
        """404 when unknown, 403 when someone else's."""
        pet = await self.require_pet(session, pet_id)
        if pet.owner_id != user_id:
            raise Forbidden("You do not own this pet")
        return pet

    async def list_pets(
        self,
        session: AsyncSession,
        filters: Dict[str, Any],
        page: int = 1,
        limit: int = 50,
    ) -> List[Pet]:
        return await self.repository.list_pets(session, filters, offset=(page - 1) * limit, limit=limit)

    async def list_mine(self, session: AsyncSession, user_id: str) -> List[Pet]:
        return await self.repository.list_by_owner(session, user_id)

    async def create_pet(self, session: AsyncSession, owner_id: str, data: PetCreate) -> Pet:
        """
        Register a pet after the content and media checks.

        The owner's first pet starts out active. If a concurrent create wins
        the active slot first, this one is stored inactive instead.
        """
        values = data.model_dump(mode="json")
        check_text(values)
        check_photos(values["photos"])
        if not values.get("video_url"):
            raise ValidationFailed("A video is required", field="videoUrl")
        check_video_duration(values.get("video_duration"))

        make_active = await self.repository.get_active(session, owner_id) is None
        try:
            pet = await self.repository.create(
                session, Pet(owner_id=owner_id, is_active=make_active, **values)
            )
        except IntegrityError:
            if not make_active:
                raise
            await session.rollback()
            pet = await self.repository.create(
                session, Pet(owner_id=owner_id, is_active=False, **values)
            )

        logger.info(f"Pet {pet.id} created for owner {owner_id} (active={pet.is_active})")
        return pet

    async def update_pet(self, session: AsyncSession, user_id: str, pet_id: int, data: PetUpdate) -> Pet:
        pet = await self.require_owned_pet(session, user_id, pet_id)

        changes = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        check_text(changes)
        if "photos" in changes:
            check_photos(changes["photos"])
        if "video_duration" in changes:
            check_video_duration(changes["video_duration"])
        elif changes.get("video_url", pet.video_url) != pet.video_url:
            # A new video is only accepted together with its duration
            check_video_duration(None)

        for field, value in changes.items():
            setattr(pet, field, value)
        return await self.repository.update(session, pet)

    async def delete_pet(self, session: AsyncSession, user_id: str, pet_id: int) -> None:
        pet = await self.require_owned_pet(session, user_id, pet_id)
        await self.repository.delete_with_relations(session, pet)
        logger.info(f"Pet {pet_id} deleted by owner {user_id}")

    async def get_active_pet(self, session: AsyncSession, owner_id: str) -> Optional[Pet]:
        """
        Return the owner's active pet, promoting the earliest one if none is
        flagged. ``None`` when the owner has no pets.
        """
        active = await self.repository.get_active(session, owner_id)
        if active is not None:
            return active

        earliest = await self.repository.get_earliest(session, owner_id)
        if earliest is None:
            return None

        try:
            await self.repository.mark_active(session, earliest.id)
            await session.flush()
        except IntegrityError:
            # Another request promoted or switched first
            await session.rollback()
            return await self.repository.get_active(session, owner_id)

        await session.refresh(earliest)
        return earliest

    async def set_active_pet(self, session: AsyncSession, owner_id: str, pet_id: int) -> Pet:
        """Make *pet_id* the owner's only active pet; clear and set share one transaction."""
        pet = await self.repository.get_by_id(session, pet_id)
        if pet is None or pet.owner_id != owner_id:
            raise NotFound("Pet not found")

        await self.repository.clear_active(session, owner_id)
        await self.repository.mark_active(session, pet.id)
        await session.flush()
        await session.refresh(pet)
        return pet

    async def get_pet_with_owner(self, session: AsyncSession, pet_id: int) -> Tuple[Pet, Optional[User]]:
        pet = await self.require_pet(session, pet_id)
        owner = await session.get(User, pet.owner_id)
        return pet, owner


# Singleton instance
pet_service = PetService()
