"""Tests for the email OTP login flow, JWT helpers and profile endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from petcrush.common.config import settings
from petcrush.common.counters import InMemoryCounterStore, RateLimiter
from petcrush.domains.auth.email import DeliveryResult, EmailSender
from petcrush.domains.auth.jwt import create_access_token, verify_token
from petcrush.domains.auth.models import OtpCode
from petcrush.domains.auth.service import OtpService, get_otp_service, hash_code
from tests.conftest import auth_headers


class RecordingSender(EmailSender):
    """Captures codes instead of sending them."""

    def __init__(self):
        super().__init__(api_key="", allow_console_fallback=True)
        self.sent = []

    async def send_otp(self, email, code, expires_at):
        self.sent.append((email, code))
        return DeliveryResult(delivered=False, provider="dev-console")


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def otp_service(sender):
    return OtpService(email_sender=sender)


@pytest.fixture
def use_otp_service(client, otp_service):
    from petcrush.main import app
    app.dependency_overrides[get_otp_service] = lambda: otp_service
    return otp_service


def wrong_code(code):
    return "000000" if code != "000000" else "111111"


# ════════════════════════════════════════════════════════════════
# JWT
# ════════════════════════════════════════════════════════════════

class TestJwt:

    def test_round_trip_subject(self):
        token = create_access_token({"sub": "user-1"})
        assert verify_token(token)["sub"] == "user-1"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        assert verify_token(token) is None

    def test_garbage_rejected(self):
        assert verify_token("not-a-token") is None


# ════════════════════════════════════════════════════════════════
# OTP over HTTP
# ════════════════════════════════════════════════════════════════

class TestOtpFlow:

    @pytest.mark.asyncio
    async def test_request_then_verify_creates_user(self, client, use_otp_service, sender):
        response = await client.post("/api/auth/request-otp", json={"email": "New.User@Example.com"})
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["delivery"] == {"delivered": False, "provider": "dev-console"}

        email, code = sender.sent[-1]
        assert email == "new.user@example.com"

        verified = await client.post("/api/auth/verify-otp", json={"email": "new.user@example.com", "code": code})
        assert verified.status_code == 200
        auth = verified.json()
        assert auth["isNewUser"] is True
        assert auth["user"]["email"] == "new.user@example.com"
        assert auth["user"]["displayName"] == "new.user"
        assert auth["user"]["verified"] is True

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {auth['token']}"})
        assert me.status_code == 200
        assert me.json()["id"] == auth["user"]["id"]

    @pytest.mark.asyncio
    async def test_existing_user_is_not_new(self, client, use_otp_service, sender, alice):
        await client.post("/api/auth/request-otp", json={"email": alice.email})
        _, code = sender.sent[-1]

        verified = await client.post("/api/auth/verify-otp", json={"email": alice.email, "code": code})
        assert verified.json()["isNewUser"] is False
        assert verified.json()["user"]["id"] == alice.id
        assert verified.json()["user"]["lastLoginAt"] is not None

    @pytest.mark.asyncio
    async def test_code_is_single_use(self, client, use_otp_service, sender):
        await client.post("/api/auth/request-otp", json={"email": "once@example.com"})
        _, code = sender.sent[-1]

        ok = await client.post("/api/auth/verify-otp", json={"email": "once@example.com", "code": code})
        assert ok.status_code == 200

        again = await client.post("/api/auth/verify-otp", json={"email": "once@example.com", "code": code})
        assert again.status_code == 400
        assert again.json()["message"] == "OTP expired or not found"

    @pytest.mark.asyncio
    async def test_wrong_code_increments_attempts(self, client, session_factory, use_otp_service, sender):
        await client.post("/api/auth/request-otp", json={"email": "wrong@example.com"})
        _, code = sender.sent[-1]

        response = await client.post(
            "/api/auth/verify-otp", json={"email": "wrong@example.com", "code": wrong_code(code)}
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid OTP code", "code": "validation", "field": "code"}

        async with session_factory() as session:
            otp = (await session.execute(select(OtpCode).where(OtpCode.email == "wrong@example.com"))).scalar_one()
            assert otp.attempts == 1
            assert otp.code_hash == hash_code(code)

    @pytest.mark.asyncio
    async def test_attempts_exhausted_invalidates_code(self, client, use_otp_service, sender):
        await client.post("/api/auth/request-otp", json={"email": "brute@example.com"})
        _, code = sender.sent[-1]

        for _ in range(settings.otp_max_attempts):
            await client.post("/api/auth/verify-otp", json={"email": "brute@example.com", "code": wrong_code(code)})

        exhausted = await client.post("/api/auth/verify-otp", json={"email": "brute@example.com", "code": code})
        assert exhausted.status_code == 400
        assert exhausted.json()["message"] == "OTP attempts exceeded"

        after = await client.post("/api/auth/verify-otp", json={"email": "brute@example.com", "code": code})
        assert after.json()["message"] == "OTP expired or not found"

    @pytest.mark.asyncio
    async def test_expired_code_rejected(self, client, session_factory, use_otp_service, sender):
        await client.post("/api/auth/request-otp", json={"email": "late@example.com"})
        _, code = sender.sent[-1]

        async with session_factory() as session:
            otp = (await session.execute(select(OtpCode).where(OtpCode.email == "late@example.com"))).scalar_one()
            otp.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
            await session.commit()

        response = await client.post("/api/auth/verify-otp", json={"email": "late@example.com", "code": code})
        assert response.status_code == 400
        assert response.json()["message"] == "OTP expired or not found"

    @pytest.mark.asyncio
    async def test_new_request_replaces_old_code(self, client, use_otp_service, sender):
        await client.post("/api/auth/request-otp", json={"email": "twice@example.com"})
        _, old_code = sender.sent[-1]
        await client.post("/api/auth/request-otp", json={"email": "twice@example.com"})
        _, new_code = sender.sent[-1]

        if old_code != new_code:
            stale = await client.post("/api/auth/verify-otp", json={"email": "twice@example.com", "code": old_code})
            assert stale.status_code == 400

        fresh = await client.post("/api/auth/verify-otp", json={"email": "twice@example.com", "code": new_code})
        assert fresh.status_code == 200

    @pytest.mark.asyncio
    async def test_request_rate_limited(self, client, sender):
        from petcrush.main import app

        store = InMemoryCounterStore()
        service = OtpService(
            email_sender=sender,
            request_limiter=RateLimiter(store, "test:otp-request", limit=2, window_seconds=60),
        )
        app.dependency_overrides[get_otp_service] = lambda: service

        for _ in range(2):
            ok = await client.post("/api/auth/request-otp", json={"email": "spam@example.com"})
            assert ok.status_code == 200

        limited = await client.post("/api/auth/request-otp", json={"email": "spam@example.com"})
        assert limited.status_code == 429
        assert limited.json()["code"] == "rate_limited"
        assert int(limited.headers["Retry-After"]) > 0

    @pytest.mark.asyncio
    async def test_malformed_code_rejected(self, client):
        response = await client.post("/api/auth/verify-otp", json={"email": "a@example.com", "code": "12ab"})
        assert response.status_code == 400
        assert response.json()["field"] == "code"

    @pytest.mark.asyncio
    async def test_exists(self, client, alice):
        yes = await client.get("/api/auth/exists", params={"email": "ALICE@example.com"})
        no = await client.get("/api/auth/exists", params={"email": "nobody@example.com"})
        assert yes.json() == {"exists": True}
        assert no.json() == {"exists": False}

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        bad = await client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
        assert bad.status_code == 401


# ════════════════════════════════════════════════════════════════
# Email fallback
# ════════════════════════════════════════════════════════════════

class TestEmailSender:

    @pytest.mark.asyncio
    async def test_dev_console_without_key(self):
        sender = EmailSender(api_key="", allow_console_fallback=True)
        result = await sender.send_otp("a@example.com", "123456", datetime.now(timezone.utc))
        assert result == DeliveryResult(delivered=False, provider="dev-console")

    @pytest.mark.asyncio
    async def test_production_without_key_is_unavailable(self):
        from petcrush.common.exceptions import ServiceUnavailable

        sender = EmailSender(api_key="", allow_console_fallback=False)
        with pytest.raises(ServiceUnavailable):
            await sender.send_otp("a@example.com", "123456", datetime.now(timezone.utc))


# ════════════════════════════════════════════════════════════════
# /api/users/me
# ════════════════════════════════════════════════════════════════

class TestUserProfile:

    @pytest.mark.asyncio
    async def test_get_me(self, client, alice):
        response = await client.get("/api/users/me", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_patch_absent_and_null_fields_unchanged(self, client, alice):
        headers = auth_headers(alice)
        response = await client.patch(
            "/api/users/me",
            json={"whatsapp": "11988887777", "region": None, "onboardingCompleted": True},
            headers=headers,
        )
        body = response.json()
        assert response.status_code == 200
        assert body["whatsapp"] == "11988887777"
        assert body["displayName"] == "Alice"
        assert body["region"] is None
        assert body["onboardingCompleted"] is True

    @pytest.mark.asyncio
    async def test_patch_rejects_blank_and_sales_text(self, client, alice):
        headers = auth_headers(alice)
        blank = await client.patch("/api/users/me", json={"displayName": " "}, headers=headers)
        assert blank.status_code == 400

        sales = await client.patch("/api/users/me", json={"displayName": "Alice vendo filhotes"}, headers=headers)
        assert sales.status_code == 400
        assert sales.json()["field"] == "displayName"
