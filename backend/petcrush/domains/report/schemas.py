"""Report schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from petcrush.common.schemas import CamelModel


class ReportCreate(CamelModel):
    target_pet_id: int = Field(..., gt=0)
    reason: str = Field(..., min_length=3, max_length=500)

    @field_validator("reason", mode="before")
    @classmethod
    def strip_reason(cls, value):
        return value.strip() if isinstance(value, str) else value


class ReportResponse(CamelModel):
    id: int
    reporter_id: str
    target_pet_id: int
    reason: str
    status: str
    created_at: datetime
