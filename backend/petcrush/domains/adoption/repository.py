"""Adoption listing repository."""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.repository import BaseRepository
from petcrush.domains.adoption.models import AdoptionPost


class AdoptionRepository(BaseRepository[AdoptionPost]):
    def __init__(self):
        super().__init__(AdoptionPost)

    async def list_recent(self, session: AsyncSession, offset: int, limit: int) -> List[AdoptionPost]:
        stmt = (
            select(AdoptionPost)
            .order_by(AdoptionPost.created_at.desc(), AdoptionPost.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


# Singleton instance
adoption_repository = AdoptionRepository()
