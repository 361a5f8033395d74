"""One-time login codes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from petcrush.common.base import Base, CreatedAtMixin, get_table_args


class OtpCode(Base, CreatedAtMixin):
    """Only the HMAC of the code is stored; the plain code leaves by email."""

    __tablename__ = "otp_codes"
    __table_args__ = get_table_args(
        Index("idx_otp_codes_email", "email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    code_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
