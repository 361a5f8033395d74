"""
Auth API - 邮箱验证码登录端点
"""
from fastapi import APIRouter, Depends
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.user.models import User
from petcrush.domains.user.schemas import UserResponse
from petcrush.domains.user.service import user_service
from .deps import get_current_user
from .schemas import (
    AuthResponse,
    EmailExistsResponse,
    OtpDelivery,
    OtpRequest,
    OtpRequestResponse,
    OtpVerify,
)
from .service import OtpService, get_otp_service, normalize_email

router = APIRouter()


@router.post("/request-otp", response_model=OtpRequestResponse)
async def request_otp(
    data: OtpRequest,
    session: AsyncSession = Depends(get_session),
    otp_service: OtpService = Depends(get_otp_service),
):
    """发送登录验证码"""
    issued = await otp_service.request_code(session, data.email)
    await session.commit()
    return OtpRequestResponse(
        expires_at=issued.expires_at,
        delivery=OtpDelivery(delivered=issued.delivery.delivered, provider=issued.delivery.provider),
    )


@router.post("/verify-otp", response_model=AuthResponse)
async def verify_otp(
    data: OtpVerify,
    session: AsyncSession = Depends(get_session),
    otp_service: OtpService = Depends(get_otp_service),
):
    """校验验证码并签发 token"""
    result = await otp_service.verify_code(session, data.email, data.code)
    await session.commit()
    return AuthResponse(
        token=result.token,
        user=UserResponse.model_validate(result.user),
        is_new_user=result.is_new_user,
    )


@router.get("/exists", response_model=EmailExistsResponse)
async def email_exists(
    email: EmailStr,
    session: AsyncSession = Depends(get_session),
):
    return EmailExistsResponse(exists=await user_service.email_exists(session, normalize_email(email)))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """获取当前登录用户信息"""
    return current_user
