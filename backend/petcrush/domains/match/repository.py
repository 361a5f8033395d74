"""Like, match and message repositories."""

from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.repository import BaseRepository, insert_ignore
from petcrush.domains.match.models import Like, Match, Message


class LikeRepository(BaseRepository[Like]):
    def __init__(self):
        super().__init__(Like)

    async def get_like(self, session: AsyncSession, liker_pet_id: int, target_pet_id: int) -> Optional[Like]:
        stmt = select(Like).where(
            Like.liker_pet_id == liker_pet_id,
            Like.target_pet_id == target_pet_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, session: AsyncSession, liker_pet_id: int, target_pet_id: int) -> None:
        await insert_ignore(
            session,
            Like,
            ["liker_pet_id", "target_pet_id"],
            liker_pet_id=liker_pet_id,
            target_pet_id=target_pet_id,
        )

    async def list_received(self, session: AsyncSession, target_pet_ids: List[int]) -> List[Like]:
        """Likes aimed at any of *target_pet_ids* from pets outside that set, newest first."""
        if not target_pet_ids:
            return []
        stmt = (
            select(Like)
            .where(Like.target_pet_id.in_(target_pet_ids), Like.liker_pet_id.not_in(target_pet_ids))
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def directed_pairs(
        self, session: AsyncSession, liker_pet_ids: Iterable[int], target_pet_ids: Iterable[int]
    ) -> Set[Tuple[int, int]]:
        liker_pet_ids, target_pet_ids = list(liker_pet_ids), list(target_pet_ids)
        if not liker_pet_ids or not target_pet_ids:
            return set()
        stmt = select(Like.liker_pet_id, Like.target_pet_id).where(
            Like.liker_pet_id.in_(liker_pet_ids),
            Like.target_pet_id.in_(target_pet_ids),
        )
        result = await session.execute(stmt)
        return {(row.liker_pet_id, row.target_pet_id) for row in result}


class MatchRepository(BaseRepository[Match]):
    def __init__(self):
        super().__init__(Match)

    async def get_by_pair(self, session: AsyncSession, pet_low_id: int, pet_high_id: int) -> Optional[Match]:
        stmt = select(Match).where(Match.pet_low_id == pet_low_id, Match.pet_high_id == pet_high_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, session: AsyncSession, pet_low_id: int, pet_high_id: int) -> None:
        await insert_ignore(
            session,
            Match,
            ["pet_low_id", "pet_high_id"],
            pet_low_id=pet_low_id,
            pet_high_id=pet_high_id,
        )

    async def list_for_pets(self, session: AsyncSession, pet_ids: List[int]) -> List[Match]:
        if not pet_ids:
            return []
        stmt = (
            select(Match)
            .where(or_(Match.pet_low_id.in_(pet_ids), Match.pet_high_id.in_(pet_ids)))
            .order_by(Match.created_at.desc(), Match.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


class MessageRepository(BaseRepository[Message]):
    def __init__(self):
        super().__init__(Message)

    async def list_for_match(self, session: AsyncSession, match_id: int) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.match_id == match_id)
            .order_by(Message.created_at, Message.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def latest_by_match(self, session: AsyncSession, match_ids: List[int]) -> dict:
        """``{match_id: newest message}`` for the given matches."""
        if not match_ids:
            return {}
        latest_ids = (
            select(func.max(Message.id))
            .where(Message.match_id.in_(match_ids))
            .group_by(Message.match_id)
        )
        result = await session.execute(select(Message).where(Message.id.in_(latest_ids)))
        return {message.match_id: message for message in result.scalars()}


# Singleton instances
like_repository = LikeRepository()
match_repository = MatchRepository()
message_repository = MessageRepository()
