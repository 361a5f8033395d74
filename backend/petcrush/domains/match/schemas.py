"""Like, match and chat schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from petcrush.common.schemas import CamelModel
from petcrush.domains.pet.schemas import PetResponse


class LikeCreate(CamelModel):
    liker_pet_id: int = Field(..., gt=0)
    target_pet_id: int = Field(..., gt=0)


class LikeResponse(CamelModel):
    matched: bool
    match_id: Optional[int] = None


class ReceivedLike(CamelModel):
    like_id: int
    pet: PetResponse
    is_mutual: bool
    created_at: datetime


class ReceivedLikesResponse(CamelModel):
    items: List[ReceivedLike]


class MessageCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2000)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, value):
        return value.strip() if isinstance(value, str) else value


class MessageResponse(CamelModel):
    id: int
    match_id: int
    sender_id: str
    content: str
    created_at: datetime


class MatchSummary(CamelModel):
    """Match as listed: both pets (low id first) and the latest message."""

    id: int
    pet_a: PetResponse
    pet_b: PetResponse
    last_message: Optional[MessageResponse] = None
    created_at: datetime


class MatchDetail(CamelModel):
    id: int
    pet_a: PetResponse
    pet_b: PetResponse
    messages: List[MessageResponse]
    created_at: datetime
