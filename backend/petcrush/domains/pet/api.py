"""Pet profile and discovery feed endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.pet.feed import feed_service
from petcrush.domains.pet.models import Gender, Objective, Size
from petcrush.domains.pet.schemas import (
    FeedMode,
    FeedPage,
    PetCreate,
    PetDetailResponse,
    PetResponse,
    PetUpdate,
    SetActivePet,
)
from petcrush.domains.pet.service import pet_service
from petcrush.domains.user.models import User
from petcrush.domains.user.schemas import PublicUser

router = APIRouter()
feed_router = APIRouter()


def _enum_value(value):
    return value.value if value is not None else None


@router.get("", response_model=List[PetResponse], summary="List pets")
async def list_pets(
    species: Optional[str] = None,
    breed: Optional[str] = None,
    gender: Optional[Gender] = None,
    objective: Optional[Objective] = None,
    region: Optional[str] = None,
    size: Optional[Size] = None,
    is_donation: Optional[bool] = Query(None, alias="isDonation"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
):
    filters = {
        "species": species,
        "breed": breed,
        "gender": _enum_value(gender),
        "objective": _enum_value(objective),
        "region": region,
        "size": _enum_value(size),
        "is_donation": is_donation,
    }
    return await pet_service.list_pets(session, filters, page=page, limit=limit)


@router.get("/mine", response_model=List[PetResponse], summary="List my pets")
async def list_my_pets(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await pet_service.list_mine(session, current_user.id)


@router.get("/mine/active", response_model=Optional[PetResponse], summary="Get my active pet")
async def get_my_active_pet(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Returns null for owners without pets; promotes the earliest pet when none is flagged."""
    pet = await pet_service.get_active_pet(session, current_user.id)
    await session.commit()
    return pet


@router.patch("/mine/active", response_model=PetResponse, summary="Switch my active pet")
async def set_my_active_pet(
    data: SetActivePet,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    pet = await pet_service.set_active_pet(session, current_user.id, data.pet_id)
    await session.commit()
    return pet


@router.get("/{pet_id}", response_model=PetDetailResponse, summary="Get pet")
async def get_pet(pet_id: int, session: AsyncSession = Depends(get_session)):
    pet, owner = await pet_service.get_pet_with_owner(session, pet_id)
    response = PetDetailResponse.model_validate(pet)
    if owner is not None:
        response.owner = PublicUser.model_validate(owner)
    return response


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED, summary="Create pet")
async def create_pet(
    data: PetCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    owner_id = current_user.id
    pet = await pet_service.create_pet(session, owner_id, data)
    await session.commit()
    return pet


@router.put("/{pet_id}", response_model=PetResponse, summary="Update pet")
async def update_pet(
    pet_id: int,
    data: PetUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    pet = await pet_service.update_pet(session, current_user.id, pet_id, data)
    await session.commit()
    return pet


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete pet")
async def delete_pet(
    pet_id: int,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await pet_service.delete_pet(session, current_user.id, pet_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@feed_router.get("", response_model=FeedPage, summary="Discovery feed")
async def get_feed(
    species: Optional[str] = None,
    gender: Optional[Gender] = None,
    objective: Optional[Objective] = None,
    region: Optional[str] = None,
    size: Optional[Size] = None,
    mode: FeedMode = FeedMode.CRUSHES,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    filters = {
        "species": species,
        "gender": _enum_value(gender),
        "objective": _enum_value(objective),
        "region": region,
        "size": _enum_value(size),
    }
    items = await feed_service.get_feed(session, current_user.id, filters, mode=mode, page=page, limit=limit)
    return FeedPage(
        items=[PetResponse.model_validate(pet) for pet in items],
        page=page,
        limit=limit,
        has_more=len(items) == limit,
    )
