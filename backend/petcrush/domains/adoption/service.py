"""Adoption listing service."""

from typing import List, Tuple
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.content_filter import ensure_clean
from petcrush.common.exceptions import Forbidden, NotFound
from petcrush.domains.adoption.models import AdoptionPost
from petcrush.domains.adoption.repository import adoption_repository
from petcrush.domains.adoption.schemas import AdoptionCreate, AdoptionUpdate

logger = logging.getLogger(__name__)


def _check_text(values: dict) -> None:
    ensure_clean(values.get("name"), "name")
    ensure_clean(values.get("description"), "description")
    ensure_clean(values.get("contact"), "contact")


class AdoptionService:
    def __init__(self):
        self.repository = adoption_repository

    async def list_posts(self, session: AsyncSession, page: int = 1, limit: int = 20) -> Tuple[List[AdoptionPost], bool]:
        """Return ``(items, has_more)``; one extra row is fetched to decide ``has_more``."""
        rows = await self.repository.list_recent(session, offset=(page - 1) * limit, limit=limit + 1)
        return rows[:limit], len(rows) > limit

    async def create_post(self, session: AsyncSession, owner_id: str, data: AdoptionCreate) -> AdoptionPost:
        values = data.model_dump(mode="json")
        _check_text(values)
        post = await self.repository.create(session, AdoptionPost(owner_id=owner_id, **values))
        logger.info(f"Adoption post {post.id} created by {owner_id}")
        return post

    async def update_post(self, session: AsyncSession, user_id: str, post_id: int, data: AdoptionUpdate) -> AdoptionPost:
        post = await self.repository.get_by_id(session, post_id)
        if post is None:
            raise NotFound("Adoption post not found")
        if post.owner_id != user_id:
            raise Forbidden("You do not own this adoption post")

        changes = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        _check_text(changes)
        for field, value in changes.items():
            setattr(post, field, value)
        return await self.repository.update(session, post)


# Singleton instance
adoption_service = AdoptionService()
