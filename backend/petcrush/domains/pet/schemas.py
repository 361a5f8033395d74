"""Pet domain Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from petcrush.common.schemas import CamelModel, Page
from petcrush.domains.pet.models import Gender, Objective, Size
from petcrush.domains.user.schemas import PublicUser


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class PetCreate(CamelModel):
    """
    Pet registration payload.

    Media rules (photo count, video presence and duration) are checked by
    the service so they come back as field-level validation errors.
    """

    display_name: str = Field(..., min_length=1, max_length=120)
    species: str = Field(..., min_length=1, max_length=40)
    breed: str = Field(..., min_length=1, max_length=120)
    gender: Gender
    size: Optional[Size] = None
    colors: List[str] = Field(default_factory=list, max_length=10)
    age_months: int = Field(..., ge=0, le=600)
    pedigree: bool = False
    vaccinated: bool = False
    trained: bool = False
    neutered: bool = False
    health_notes: Optional[str] = Field(None, max_length=2000)
    objective: Objective
    is_donation: bool = False
    region: str = Field(..., min_length=2, max_length=160)
    country: Optional[str] = Field(None, max_length=80)
    state: Optional[str] = Field(None, max_length=80)
    city: Optional[str] = Field(None, max_length=120)
    neighborhood: Optional[str] = Field(None, max_length=120)
    about: str = Field(..., min_length=1, max_length=2000)
    photos: List[str] = Field(default_factory=list, max_length=12)
    video_url: Optional[str] = Field(None, max_length=1000)
    video_duration: Optional[float] = Field(None, ge=0)

    _strip_text = field_validator("display_name", "species", "breed", "region", "about", mode="before")(_strip)


class PetUpdate(CamelModel):
    """Partial update; omitted or null fields keep their stored value."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=120)
    species: Optional[str] = Field(None, min_length=1, max_length=40)
    breed: Optional[str] = Field(None, min_length=1, max_length=120)
    gender: Optional[Gender] = None
    size: Optional[Size] = None
    colors: Optional[List[str]] = Field(None, max_length=10)
    age_months: Optional[int] = Field(None, ge=0, le=600)
    pedigree: Optional[bool] = None
    vaccinated: Optional[bool] = None
    trained: Optional[bool] = None
    neutered: Optional[bool] = None
    health_notes: Optional[str] = Field(None, max_length=2000)
    objective: Optional[Objective] = None
    is_donation: Optional[bool] = None
    region: Optional[str] = Field(None, min_length=2, max_length=160)
    country: Optional[str] = Field(None, max_length=80)
    state: Optional[str] = Field(None, max_length=80)
    city: Optional[str] = Field(None, max_length=120)
    neighborhood: Optional[str] = Field(None, max_length=120)
    about: Optional[str] = Field(None, min_length=1, max_length=2000)
    photos: Optional[List[str]] = Field(None, max_length=12)
    video_url: Optional[str] = Field(None, min_length=1, max_length=1000)
    video_duration: Optional[float] = Field(None, ge=0)

    _strip_text = field_validator("display_name", "species", "breed", "region", "about", mode="before")(_strip)


class PetResponse(CamelModel):
    id: int
    owner_id: str
    display_name: str
    species: str
    breed: str
    gender: str
    size: Optional[str] = None
    colors: List[str]
    age_months: int
    pedigree: bool
    vaccinated: bool
    trained: bool
    neutered: bool
    health_notes: Optional[str] = None
    objective: str
    is_donation: bool
    region: str
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    neighborhood: Optional[str] = None
    about: str
    photos: List[str]
    video_url: str
    video_duration: float
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PetDetailResponse(PetResponse):
    owner: Optional[PublicUser] = None


class SetActivePet(CamelModel):
    pet_id: int = Field(..., gt=0)


class FeedMode(str, Enum):
    CRUSHES = "crushes"
    FRIENDS = "friends"


class FeedPage(Page[PetResponse]):
    pass
