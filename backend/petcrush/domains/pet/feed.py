"""
Discovery feed.

Fetches twice the page size of candidates newest first, ranks them for the
requested mode and truncates to the page. ``has_more`` only reports that the
page came back full; it is not an exact count.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.domains.pet.models import Objective, Pet
from petcrush.domains.pet.repository import pet_repository
from petcrush.domains.pet.schemas import FeedMode

logger = logging.getLogger(__name__)

OVERFETCH_FACTOR = 2


def friends_rank(pet: Pet) -> int:
    """0 for neutered or socialization pets, which lead the friends feed."""
    if pet.neutered or pet.objective == Objective.SOCIALIZATION.value:
        return 0
    return 1


def rank_candidates(candidates: List[Pet], mode: FeedMode) -> List[Pet]:
    if mode == FeedMode.CRUSHES:
        return [pet for pet in candidates if not pet.neutered]
    # sorted() is stable, so recency order survives within each rank
    return sorted(candidates, key=friends_rank)


class FeedService:
    def __init__(self):
        self.repository = pet_repository

    async def get_feed(
        self,
        session: AsyncSession,
        user_id: str,
        filters: Dict[str, Any],
        mode: FeedMode = FeedMode.CRUSHES,
        page: int = 1,
        limit: int = 10,
    ) -> List[Pet]:
        candidates = await self.repository.list_feed_candidates(
            session,
            exclude_owner_id=user_id,
            filters=filters,
            offset=(page - 1) * limit,
            limit=limit * OVERFETCH_FACTOR,
            neutered=False if mode == FeedMode.CRUSHES else None,
        )
        items = rank_candidates(candidates, mode)[:limit]
        logger.debug(f"Feed for {user_id}: mode={mode.value} page={page} -> {len(items)} items")
        return items


# Singleton instance
feed_service = FeedService()
