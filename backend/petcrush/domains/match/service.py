"""
Matching engine and chat.

A like is a directed edge between two pets. When the reverse edge already
exists the pair becomes a match, stored once under its canonical
``(low, high)`` key. Both the like and the match are written with
insert-if-absent after both pet rows are locked in id order, so retries and
opposite-order races converge on the same rows; the match is always re-read
by key after the write.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.content_filter import ensure_clean
from petcrush.common.exceptions import Forbidden, NotFound, ValidationFailed
from petcrush.domains.match.models import Like, Match, Message
from petcrush.domains.match.repository import like_repository, match_repository, message_repository
from petcrush.domains.pet.models import Pet
from petcrush.domains.pet.repository import pet_repository

logger = logging.getLogger(__name__)


def canonical_pair(pet_a_id: int, pet_b_id: int) -> Tuple[int, int]:
    return (pet_a_id, pet_b_id) if pet_a_id < pet_b_id else (pet_b_id, pet_a_id)


@dataclass
class LikeResult:
    matched: bool
    match_id: Optional[int] = None


@dataclass
class ReceivedLikeItem:
    like: Like
    pet: Pet
    is_mutual: bool


@dataclass
class MatchView:
    match: Match
    pet_a: Pet
    pet_b: Pet
    last_message: Optional[Message] = None
    messages: Optional[List[Message]] = None


class MatchService:
    def __init__(self):
        self.likes = like_repository
        self.matches = match_repository
        self.messages = message_repository
        self.pets = pet_repository

    async def like(self, session: AsyncSession, user_id: str, liker_pet_id: int, target_pet_id: int) -> LikeResult:
        """
        Record ``liker -> target`` on behalf of *user_id*.

        Liking twice reports the current match state, creating the match if
        both likes exist but the match row does not. An
        unknown liker and a liker owned by someone else both raise the same
        404 so pet ids of other users are not confirmed.
        """
        if liker_pet_id == target_pet_id:
            raise ValidationFailed("A pet cannot like itself", field="targetPetId")

        liker = await self.pets.get_by_id(session, liker_pet_id)
        if liker is None or liker.owner_id != user_id:
            raise NotFound("Pet not found")

        target = await self.pets.get_by_id(session, target_pet_id)
        if target is None:
            raise NotFound("Pet not found")
        if target.owner_id == user_id:
            raise Forbidden("You cannot like your own pet")

        low, high = canonical_pair(liker_pet_id, target_pet_id)
        # Opposite likes on the same pair queue here, so the later one sees the earlier like
        await self.pets.lock_pets(session, (low, high))

        await self.likes.insert_if_absent(session, liker_pet_id, target_pet_id)

        reciprocal = await self.likes.get_like(session, target_pet_id, liker_pet_id)
        if reciprocal is None:
            return LikeResult(matched=False)

        # Also repairs a pair whose likes both exist without a match row
        await self.matches.insert_if_absent(session, low, high)
        match = await self.matches.get_by_pair(session, low, high)
        if match is None:
            # The insert either wrote the row or hit an existing one
            raise RuntimeError(f"Match ({low}, {high}) missing after insert")

        logger.info(f"Match {match.id} between pets {low} and {high}")
        return LikeResult(matched=True, match_id=match.id)

    async def likes_received(self, session: AsyncSession, user_id: str) -> List[ReceivedLikeItem]:
        """Likes from other users' pets aimed at the caller's pets, newest first."""
        my_pet_ids = await self.pets.list_ids_by_owner(session, user_id)
        likes = await self.likes.list_received(session, my_pet_ids)
        if not likes:
            return []

        liker_ids = {like.liker_pet_id for like in likes}
        likers = await self.pets.get_many(session, liker_ids)
        returned = await self.likes.directed_pairs(session, my_pet_ids, liker_ids)

        return [
            ReceivedLikeItem(
                like=like,
                pet=likers[like.liker_pet_id],
                is_mutual=(like.target_pet_id, like.liker_pet_id) in returned,
            )
            for like in likes
            if like.liker_pet_id in likers
        ]

    async def list_matches(self, session: AsyncSession, user_id: str) -> List[MatchView]:
        my_pet_ids = await self.pets.list_ids_by_owner(session, user_id)
        matches = await self.matches.list_for_pets(session, my_pet_ids)
        if not matches:
            return []

        pets = await self.pets.get_many(session, {pid for m in matches for pid in m.pet_ids})
        latest = await self.messages.latest_by_match(session, [m.id for m in matches])
        return [
            MatchView(
                match=m,
                pet_a=pets[m.pet_low_id],
                pet_b=pets[m.pet_high_id],
                last_message=latest.get(m.id),
            )
            for m in matches
        ]

    async def _require_participant(self, session: AsyncSession, user_id: str, match_id: int) -> Tuple[Match, Dict[int, Pet]]:
        match = await self.matches.get_by_id(session, match_id)
        if match is None:
            raise NotFound("Match not found")

        pets = await self.pets.get_many(session, match.pet_ids)
        if not any(pet.owner_id == user_id for pet in pets.values()):
            raise Forbidden("You are not part of this match")
        return match, pets

    async def get_match(self, session: AsyncSession, user_id: str, match_id: int) -> MatchView:
        match, pets = await self._require_participant(session, user_id, match_id)
        messages = await self.messages.list_for_match(session, match.id)
        return MatchView(
            match=match,
            pet_a=pets[match.pet_low_id],
            pet_b=pets[match.pet_high_id],
            messages=messages,
        )

    async def post_message(self, session: AsyncSession, user_id: str, match_id: int, content: str) -> Message:
        match, _ = await self._require_participant(session, user_id, match_id)

        content = content.strip()
        if not content:
            raise ValidationFailed("Message cannot be empty", field="content")
        ensure_clean(content, "content")

        return await self.messages.create(
            session, Message(match_id=match.id, sender_id=user_id, content=content)
        )


# Singleton instance
match_service = MatchService()
