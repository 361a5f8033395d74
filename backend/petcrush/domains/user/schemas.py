"""User domain Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, Field, field_validator

from petcrush.common.schemas import CamelModel


class PublicUser(CamelModel):
    """Owner details shown next to a pet profile."""

    id: str
    display_name: Optional[str] = None
    region: Optional[str] = None
    profile_image_url: Optional[str] = None
    verified: bool


class UserResponse(PublicUser):
    """Schema for the signed-in user."""

    email: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    whatsapp: Optional[str] = None
    onboarding_completed: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """
    Profile edit.

    A field left out of the body, or sent as null, keeps its stored value;
    these columns cannot be cleared through this endpoint.
    """

    display_name: Optional[str] = Field(None, min_length=2, max_length=120)
    whatsapp: Optional[str] = Field(None, min_length=8, max_length=32)
    region: Optional[str] = Field(None, min_length=2, max_length=160)
    profile_image_url: Optional[AnyHttpUrl] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(None, min_length=1, max_length=120)
    onboarding_completed: Optional[bool] = None

    @field_validator("display_name", "whatsapp", "region", "first_name", "last_name", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value
