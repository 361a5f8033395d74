"""Report model - complaints against pet profiles."""

import enum

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from petcrush.common.base import Base, TimestampMixin, get_table_args, get_table_ref


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class Report(Base, TimestampMixin):
    __tablename__ = "reports"
    __table_args__ = get_table_args(
        Index("idx_reports_target", "target_pet_id"),
        Index("idx_reports_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reporter_id: Mapped[str] = mapped_column(
        String(36), ForeignKey(get_table_ref("users") + ".id"), nullable=False
    )
    target_pet_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(get_table_ref("pets") + ".id"), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ReportStatus.PENDING.value)
