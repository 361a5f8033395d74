"""Like and match/chat endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.match.schemas import (
    LikeCreate,
    LikeResponse,
    MatchDetail,
    MatchSummary,
    MessageCreate,
    MessageResponse,
    ReceivedLike,
    ReceivedLikesResponse,
)
from petcrush.domains.match.service import match_service
from petcrush.domains.user.models import User

likes_router = APIRouter()
router = APIRouter()


@likes_router.post("", response_model=LikeResponse, summary="Like a pet")
async def like_pet(
    data: LikeCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await match_service.like(session, current_user.id, data.liker_pet_id, data.target_pet_id)
    await session.commit()
    return LikeResponse(matched=result.matched, match_id=result.match_id)


@likes_router.get("/received", response_model=ReceivedLikesResponse, summary="Likes received by my pets")
async def likes_received(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    items = await match_service.likes_received(session, current_user.id)
    return ReceivedLikesResponse(items=[
        ReceivedLike(
            like_id=item.like.id,
            pet=item.pet,
            is_mutual=item.is_mutual,
            created_at=item.like.created_at,
        )
        for item in items
    ])


@router.get("", response_model=List[MatchSummary], summary="List my matches")
async def list_matches(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    views = await match_service.list_matches(session, current_user.id)
    return [
        MatchSummary(
            id=view.match.id,
            pet_a=view.pet_a,
            pet_b=view.pet_b,
            last_message=view.last_message,
            created_at=view.match.created_at,
        )
        for view in views
    ]


@router.get("/{match_id}", response_model=MatchDetail, summary="Get match with messages")
async def get_match(
    match_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    view = await match_service.get_match(session, current_user.id, match_id)
    return MatchDetail(
        id=view.match.id,
        pet_a=view.pet_a,
        pet_b=view.pet_b,
        messages=view.messages or [],
        created_at=view.match.created_at,
    )


@router.post(
    "/{match_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def post_message(
    match_id: int,
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    message = await match_service.post_message(session, current_user.id, match_id, data.content)
    await session.commit()
    return message
