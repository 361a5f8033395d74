"""
Auth Service - 邮箱一次性验证码登录

State machine for a code row: issued -> (wrong code: attempts += 1)* ->
used | exhausted | expired. Request and verify calls are additionally
throttled per email through the shared counter store.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import hmac
import logging
import secrets

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.config import settings
from petcrush.common.counters import RateLimiter, get_counter_store
from petcrush.common.exceptions import ValidationFailed
from petcrush.domains.auth.email import DeliveryResult, EmailSender, get_email_sender
from petcrush.domains.auth.jwt import create_user_token
from petcrush.domains.auth.models import OtpCode
from petcrush.domains.user.models import User
from petcrush.domains.user.service import user_service

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_code(code: str) -> str:
    return hmac.new(settings.secret_key.encode(), code.encode(), hashlib.sha256).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass
class OtpIssued:
    expires_at: datetime
    delivery: DeliveryResult


@dataclass
class LoginResult:
    token: str
    user: User
    is_new_user: bool


class OtpService:
    """Issues and verifies emailed login codes."""

    def __init__(
        self,
        email_sender: Optional[EmailSender] = None,
        request_limiter: Optional[RateLimiter] = None,
        verify_limiter: Optional[RateLimiter] = None,
    ):
        self._email_sender = email_sender
        store = get_counter_store()
        self.request_limiter = request_limiter or RateLimiter(
            store, "petcrush:auth:otp-request", settings.otp_request_limit, settings.otp_rate_window_seconds
        )
        self.verify_limiter = verify_limiter or RateLimiter(
            store, "petcrush:auth:otp-verify", settings.otp_verify_limit, settings.otp_rate_window_seconds
        )

    @property
    def email_sender(self) -> EmailSender:
        return self._email_sender or get_email_sender()

    @staticmethod
    def generate_code() -> str:
        return f"{secrets.randbelow(900000) + 100000}"

    async def request_code(self, session: AsyncSession, email: str) -> OtpIssued:
        email = normalize_email(email)
        await self.request_limiter.hit(email)

        # A new code replaces any outstanding one
        await session.execute(
            delete(OtpCode).where(OtpCode.email == email, OtpCode.used_at.is_(None))
        )

        code = self.generate_code()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.otp_ttl_minutes)
        session.add(OtpCode(email=email, code_hash=hash_code(code), expires_at=expires_at))
        await session.flush()

        delivery = await self.email_sender.send_otp(email, code, expires_at)
        logger.info(f"OTP issued for {email} via {delivery.provider}")
        return OtpIssued(expires_at=expires_at, delivery=delivery)

    async def _latest_open_code(self, session: AsyncSession, email: str) -> Optional[OtpCode]:
        stmt = (
            select(OtpCode)
            .where(OtpCode.email == email, OtpCode.used_at.is_(None))
            .order_by(OtpCode.created_at.desc(), OtpCode.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def verify_code(self, session: AsyncSession, email: str, code: str) -> LoginResult:
        """
        Exchange a code for a token, creating the user on first login.

        Failed attempts are committed before the error is raised so the
        attempt counter survives the request rollback.
        """
        email = normalize_email(email)
        await self.verify_limiter.hit(email)
        now = datetime.now(timezone.utc)

        otp = await self._latest_open_code(session, email)
        if otp is None or _as_utc(otp.expires_at) < now:
            if otp is not None:
                await session.delete(otp)
                await session.commit()
            raise ValidationFailed("OTP expired or not found", field="code")

        if otp.attempts >= settings.otp_max_attempts:
            otp.used_at = now
            await session.commit()
            raise ValidationFailed("OTP attempts exceeded", field="code")

        if not hmac.compare_digest(hash_code(code.strip()), otp.code_hash):
            otp.attempts += 1
            await session.commit()
            raise ValidationFailed("Invalid OTP code", field="code")

        otp.used_at = now
        user, created = await user_service.get_or_create_by_email(session, email)
        await self.verify_limiter.reset(email)

        logger.info(f"OTP login for user {user.id} (new={created})")
        return LoginResult(token=create_user_token(user.id), user=user, is_new_user=created)


_otp_service: Optional[OtpService] = None


def get_otp_service() -> OtpService:
    global _otp_service
    if _otp_service is None:
        _otp_service = OtpService()
    return _otp_service


def reset_otp_service() -> None:
    """Drop the singleton so it is rebuilt against the current counter store."""
    global _otp_service
    _otp_service = None
