"""
Auth Dependencies - 依赖注入函数
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from petcrush.common.database import get_session
from petcrush.common.exceptions import Unauthorized
from petcrush.domains.user.models import User
from petcrush.domains.user.repository import user_repository
from .jwt import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> Optional[User]:
    """获取当前用户（可选，未登录或 token 无效返回 None）"""
    if credentials is None:
        return None

    payload = verify_token(credentials.credentials)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return await user_repository.get_by_id(session, user_id)


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """获取当前用户（必须登录，未登录返回401）"""
    if user is None:
        raise Unauthorized()
    return user
