"""Adoption listing endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.adoption.schemas import AdoptionCreate, AdoptionPage, AdoptionResponse, AdoptionUpdate
from petcrush.domains.adoption.service import adoption_service
from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.user.models import User

router = APIRouter()


@router.get("", response_model=AdoptionPage, summary="List adoption posts")
async def list_adoptions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
):
    items, has_more = await adoption_service.list_posts(session, page=page, limit=limit)
    return AdoptionPage(
        items=[AdoptionResponse.model_validate(post) for post in items],
        page=page,
        limit=limit,
        has_more=has_more,
    )


@router.post("", response_model=AdoptionResponse, status_code=status.HTTP_201_CREATED, summary="Create adoption post")
async def create_adoption(
    data: AdoptionCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    post = await adoption_service.create_post(session, current_user.id, data)
    await session.commit()
    return post


@router.patch("/{post_id}", response_model=AdoptionResponse, summary="Update adoption post")
async def update_adoption(
    post_id: int,
    data: AdoptionUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    post = await adoption_service.update_post(session, current_user.id, post_id, data)
    await session.commit()
    return post
