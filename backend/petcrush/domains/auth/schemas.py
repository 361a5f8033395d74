"""Auth request/response schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from petcrush.common.schemas import CamelModel
from petcrush.domains.user.schemas import UserResponse


class OtpRequest(CamelModel):
    email: EmailStr


class OtpDelivery(CamelModel):
    delivered: bool
    provider: str


class OtpRequestResponse(CamelModel):
    ok: bool = True
    expires_at: datetime
    delivery: OtpDelivery


class OtpVerify(CamelModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")


class AuthResponse(CamelModel):
    token: str
    user: UserResponse
    is_new_user: bool


class EmailExistsResponse(CamelModel):
    exists: bool
