"""
SQLAlchemy基础类定义
"""

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import DateTime, String, func
from datetime import datetime, timezone
from typing import Optional, Tuple, Any
import uuid

SCHEMA = "petcrush"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_table_args(*args, schema: Optional[str] = SCHEMA) -> Tuple[Any, ...]:
    """
    生成table_args，根据数据库类型决定是否使用schema

    SQLite不支持schema，PostgreSQL支持

    Args:
        *args: 索引、约束等配置
        schema: PostgreSQL schema名称（SQLite下会被忽略）

    Returns:
        适配当前数据库的table_args
    """
    from petcrush.common.config import settings

    if settings.database_type == "sqlite":
        return args if args else ()
    return (*args, {"schema": schema}) if schema else args


def get_table_ref(table_name: str, schema: Optional[str] = SCHEMA) -> str:
    """
    生成表引用名（用于ForeignKey），根据数据库类型决定是否包含schema

    Args:
        table_name: 表名
        schema: PostgreSQL schema名称（SQLite下会被忽略）

    Returns:
        适配当前数据库的表引用名
    """
    from petcrush.common.config import settings

    if settings.database_type == "sqlite":
        return table_name
    return f"{schema}.{table_name}" if schema else table_name


class Base(DeclarativeBase):
    """所有SQLAlchemy模型的基类"""
    pass


class CreatedAtMixin:
    """只写一次的行（likes, matches, messages）只需要 created_at"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=_utcnow,
        nullable=False
    )


class TimestampMixin(CreatedAtMixin):
    """时间戳Mixin - 自动管理created_at和updated_at"""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False
    )


class UUIDMixin:
    """UUID主键Mixin"""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        nullable=False
    )
