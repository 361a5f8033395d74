"""Pet repository for database operations."""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.repository import BaseRepository
from petcrush.domains.match.models import Like, Match, Message
from petcrush.domains.pet.models import Pet
from petcrush.domains.report.models import Report


def _apply_filters(stmt, filters: Dict[str, Any]):
    for field, value in filters.items():
        if value is not None:
            stmt = stmt.where(getattr(Pet, field) == value)
    return stmt


def lock_rows(*criteria):
    """SELECT ... FOR UPDATE over matching pets in id order. SQLite renders no lock clause."""
    return select(Pet.id).where(*criteria).order_by(Pet.id).with_for_update()


class PetRepository(BaseRepository[Pet]):
    """Repository for pet queries and the active-flag writes."""

    def __init__(self):
        super().__init__(Pet)

    async def list_pets(
        self,
        session: AsyncSession,
        filters: Dict[str, Any],
        offset: int = 0,
        limit: int = 50,
    ) -> List[Pet]:
        """Public listing, newest first."""
        stmt = _apply_filters(select(Pet), filters)
        stmt = stmt.order_by(Pet.created_at.desc(), Pet.id.desc()).offset(offset).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def list_feed_candidates(
        self,
        session: AsyncSession,
        exclude_owner_id: str,
        filters: Dict[str, Any],
        offset: int,
        limit: int,
        neutered: Optional[bool] = None,
    ) -> List[Pet]:
        stmt = _apply_filters(select(Pet).where(Pet.owner_id != exclude_owner_id), filters)
        if neutered is not None:
            stmt = stmt.where(Pet.neutered.is_(neutered))
        stmt = stmt.order_by(Pet.created_at.desc(), Pet.id.desc()).offset(offset).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_owner(self, session: AsyncSession, owner_id: str) -> List[Pet]:
        """Owner's pets, oldest first."""
        stmt = select(Pet).where(Pet.owner_id == owner_id).order_by(Pet.created_at, Pet.id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def list_ids_by_owner(self, session: AsyncSession, owner_id: str) -> List[int]:
        result = await session.execute(select(Pet.id).where(Pet.owner_id == owner_id))
        return list(result.scalars().all())

    async def get_active(self, session: AsyncSession, owner_id: str) -> Optional[Pet]:
        stmt = select(Pet).where(Pet.owner_id == owner_id, Pet.is_active.is_(True))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_earliest(self, session: AsyncSession, owner_id: str) -> Optional[Pet]:
        stmt = (
            select(Pet)
            .where(Pet.owner_id == owner_id)
            .order_by(Pet.created_at, Pet.id)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_pets(self, session: AsyncSession, pet_ids) -> None:
        await session.execute(lock_rows(Pet.id.in_(list(pet_ids))))

    async def clear_active(self, session: AsyncSession, owner_id: str) -> None:
        # Lock every pet of the owner so concurrent switches run one after the other
        await session.execute(lock_rows(Pet.owner_id == owner_id))
        await session.execute(
            update(Pet)
            .where(Pet.owner_id == owner_id, Pet.is_active.is_(True))
            .values(is_active=False)
        )

    async def mark_active(self, session: AsyncSession, pet_id: int) -> None:
        await session.execute(update(Pet).where(Pet.id == pet_id).values(is_active=True))

    async def delete_with_relations(self, session: AsyncSession, pet: Pet) -> None:
        """Remove a pet and every row that references it."""
        match_ids = select(Match.id).where(
            or_(Match.pet_low_id == pet.id, Match.pet_high_id == pet.id)
        )
        await session.execute(delete(Message).where(Message.match_id.in_(match_ids)))
        await session.execute(
            delete(Match).where(or_(Match.pet_low_id == pet.id, Match.pet_high_id == pet.id))
        )
        await session.execute(
            delete(Like).where(or_(Like.liker_pet_id == pet.id, Like.target_pet_id == pet.id))
        )
        await session.execute(delete(Report).where(Report.target_pet_id == pet.id))
        await self.delete(session, pet)


# Singleton instance
pet_repository = PetRepository()
