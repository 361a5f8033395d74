"""
JWT Token Utilities - JWT生成和验证
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
import logging

from petcrush.common.config import settings

logger = logging.getLogger(__name__)

# JWT Configuration
ALGORITHM = "HS256"


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """创建JWT access token"""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user_id: str) -> str:
    """为用户创建 JWT token（sub = user id）"""
    return create_access_token({"sub": user_id})


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """验证JWT token并返回payload"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None
