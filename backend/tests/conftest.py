"""Shared fixtures: in-memory SQLite, ASGI client, users and pets."""

import os

# Must be set before petcrush.common.config is imported
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["ENVIRONMENT"] = "development"
os.environ["REDIS_ENABLED"] = "false"
os.environ["MINIO_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from petcrush import models  # noqa: F401  register all tables
from petcrush.common.base import Base
from petcrush.common.counters import init_counter_store
from petcrush.common.database import get_session
from petcrush.domains.auth.jwt import create_user_token
from petcrush.domains.auth.service import reset_otp_service
from petcrush.domains.pet.models import Pet
from petcrush.domains.user.models import User
from petcrush.main import app

VIDEO_URL = "https://cdn.example.com/media/video.mp4"
PHOTOS = [
    "https://cdn.example.com/media/1.jpg",
    "https://cdn.example.com/media/2.jpg",
    "https://cdn.example.com/media/3.jpg",
]


def pet_payload(**overrides):
    """Valid camelCase body for POST /api/pets."""
    payload = {
        "displayName": "Thor",
        "species": "Dog",
        "breed": "Golden Retriever",
        "gender": "MALE",
        "size": "LARGE",
        "colors": ["Gold"],
        "ageMonths": 24,
        "pedigree": True,
        "vaccinated": True,
        "neutered": False,
        "objective": "BREEDING",
        "region": "São Paulo, SP",
        "about": "Friendly and energetic, loves to play fetch.",
        "photos": list(PHOTOS),
        "videoUrl": VIDEO_URL,
        "videoDuration": 12,
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user.id)}"}


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def counter_store():
    """Fresh rate-limit counters for every test."""
    store = init_counter_store(None)
    reset_otp_service()
    yield store
    reset_otp_service()


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    async def _make_user(email: str, display_name: str = None) -> User:
        async with session_factory() as session:
            user = User(email=email, username=email, display_name=display_name or email.split("@")[0], verified=True)
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def make_pet(session_factory):
    """Insert a pet directly, bypassing the API checks."""

    async def _make_pet(owner: User, **fields) -> Pet:
        values = {
            "display_name": "Pet",
            "species": "Dog",
            "breed": "Mixed",
            "gender": "MALE",
            "colors": [],
            "age_months": 12,
            "objective": "BREEDING",
            "region": "São Paulo, SP",
            "about": "A good pet.",
            "photos": list(PHOTOS),
            "video_url": VIDEO_URL,
            "video_duration": 10.0,
        }
        values.update(fields)
        async with session_factory() as session:
            pet = Pet(owner_id=owner.id, **values)
            session.add(pet)
            await session.commit()
            return pet

    return _make_pet


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice@example.com", "Alice")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user("bob@example.com", "Bob")


@pytest_asyncio.fixture
async def carol(make_user):
    return await make_user("carol@example.com", "Carol")
