"""Adoption listing schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from petcrush.common.schemas import CamelModel, Page
from petcrush.domains.adoption.models import AdoptionStatus

_TEXT_FIELDS = ("name", "species", "breed", "age_label", "country", "state", "city", "description", "contact")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class AdoptionCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    species: str = Field(..., min_length=1, max_length=40)
    breed: str = Field(..., min_length=1, max_length=120)
    age_label: str = Field(..., min_length=1, max_length=60)
    country: str = Field(..., min_length=1, max_length=80)
    state: str = Field(..., min_length=1, max_length=80)
    city: str = Field(..., min_length=1, max_length=120)
    pedigree: bool
    neutered: bool
    description: str = Field(..., min_length=1, max_length=2000)
    contact: str = Field(..., min_length=3, max_length=200)
    photos: List[str] = Field(..., min_length=1, max_length=12)
    status: AdoptionStatus = AdoptionStatus.DISPONIVEL

    _strip_text = field_validator(*_TEXT_FIELDS, mode="before")(_strip)


class AdoptionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    species: Optional[str] = Field(None, min_length=1, max_length=40)
    breed: Optional[str] = Field(None, min_length=1, max_length=120)
    age_label: Optional[str] = Field(None, min_length=1, max_length=60)
    country: Optional[str] = Field(None, min_length=1, max_length=80)
    state: Optional[str] = Field(None, min_length=1, max_length=80)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    pedigree: Optional[bool] = None
    neutered: Optional[bool] = None
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    contact: Optional[str] = Field(None, min_length=3, max_length=200)
    photos: Optional[List[str]] = Field(None, min_length=1, max_length=12)
    status: Optional[AdoptionStatus] = None

    _strip_text = field_validator(*_TEXT_FIELDS, mode="before")(_strip)


class AdoptionResponse(CamelModel):
    id: int
    owner_id: str
    name: str
    species: str
    breed: str
    age_label: str
    country: str
    state: str
    city: str
    pedigree: bool
    neutered: bool
    description: str
    contact: str
    photos: List[str]
    status: str
    created_at: datetime
    updated_at: datetime


class AdoptionPage(Page[AdoptionResponse]):
    pass
