"""
Database connection management with graceful degradation.

Tier 1 (Critical): PostgreSQL (or SQLite for local development)
Tier 2 (Important): Redis - rate-limit counters
Tier 3 (Optional): MinIO - media uploads
"""

from typing import AsyncIterator, Optional
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, async_sessionmaker, create_async_engine

from petcrush.common.config import settings
from petcrush.common.exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages database connections with fallback strategies.

    Degradation Tiers:
    - Tier 1 (Critical): PostgreSQL / SQLite
      - Without it: System cannot start
    - Tier 2 (Important): Redis
      - Fallback: process-local rate-limit counters (reset on restart)
    - Tier 3 (Optional): MinIO
      - Fallback: media uploads answer 503
    """

    def __init__(self):
        self.postgres_available = False
        self.redis_available = False
        self.minio_available = False

        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self.redis_pool = None
        self.redis_client = None
        self.minio_client = None

    @property
    def db_label(self) -> str:
        return "SQLite" if settings.database_type == "sqlite" else "PostgreSQL"

    async def initialize(self):
        """Initialize all connections and determine availability"""
        self.postgres_available = await self._init_postgres()
        if not self.postgres_available:
            raise RuntimeError(
                f"{self.db_label} is not available. This is a critical dependency. "
                f"Check your configuration and database setup."
            )

        self.redis_available = await self._init_redis()
        if not self.redis_available:
            logger.warning(
                "Redis is not available. Rate-limit counters fall back to process memory. "
                "Start Redis with: docker compose up -d redis"
            )

        self.minio_available = await self._init_minio()
        if not self.minio_available:
            logger.warning(
                "MinIO is not available. Media uploads will be disabled. "
                "Start MinIO with: docker compose up -d minio"
            )

        self._log_status()

    def bind_engine(self, engine: AsyncEngine):
        """Attach an already created engine (scripts and tests)."""
        self.engine = engine
        self.session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        self.postgres_available = True

    async def _init_postgres(self) -> bool:
        """Initialize database connection (PostgreSQL or SQLite)"""
        try:
            is_sqlite = settings.database_type == "sqlite"
            engine_kwargs = {"echo": settings.debug and not is_sqlite}

            if is_sqlite:
                Path(settings.sqlite_path).parent.mkdir(parents=True, exist_ok=True)
            else:
                engine_kwargs.update({
                    "pool_size": 10,
                    "max_overflow": 20,
                    "pool_pre_ping": True,
                })

            self.bind_engine(create_async_engine(settings.database_url, **engine_kwargs))

            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))

            logger.info(f"✓ {self.db_label} connection established")
            return True
        except Exception as e:
            logger.error(f"✗ {self.db_label} connection failed: {e}")
            return False

    async def _init_redis(self) -> bool:
        """Initialize Redis connection"""
        if not settings.redis_enabled:
            logger.info("Redis disabled by configuration")
            return False
        try:
            import redis.asyncio as redis

            self.redis_pool = redis.ConnectionPool.from_url(
                settings.redis_url,
                max_connections=10,
                decode_responses=True
            )
            self.redis_client = redis.Redis(connection_pool=self.redis_pool)
            await self.redis_client.ping()

            logger.info("✓ Redis connection established")
            return True
        except Exception as e:
            logger.error(f"✗ Redis connection failed: {e}")
            self.redis_client = None
            return False

    async def _init_minio(self) -> bool:
        """Initialize MinIO connection and make sure the media bucket exists"""
        if not settings.minio_enabled:
            logger.info("MinIO disabled by configuration")
            return False
        try:
            from minio import Minio

            self.minio_client = Minio(
                endpoint=settings.minio_endpoint,
                access_key=settings.minio_access_key,
                secret_key=settings.minio_secret_key,
                secure=settings.minio_secure
            )
            if not self.minio_client.bucket_exists(bucket_name=settings.minio_bucket):
                self.minio_client.make_bucket(bucket_name=settings.minio_bucket)

            logger.info("✓ MinIO connection established")
            return True
        except Exception as e:
            logger.error(f"✗ MinIO connection failed: {e}")
            self.minio_client = None
            return False

    def _log_status(self):
        """Log current availability status"""
        status = {
            self.db_label: "✓" if self.postgres_available else "✗",
            "Redis": "✓" if self.redis_available else "⚠ (in-memory counters)",
            "MinIO": "✓" if self.minio_available else "⚠ (media uploads disabled)",
        }

        logger.info("Database availability:")
        for db, state in status.items():
            logger.info(f"  {db}: {state}")

    def require_minio(self):
        """Check if MinIO is required for this operation"""
        if not self.minio_available or self.minio_client is None:
            raise ServiceUnavailable("Media storage is unavailable right now")

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get a database session; commits on success, rolls back on error.

        Usage:
            async with db_manager.get_session() as session:
                result = await session.execute(stmt)
        """
        if not self.postgres_available or self.session_factory is None:
            raise RuntimeError(f"{self.db_label} is not available")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def get_redis(self):
        """Redis client or None when running on the in-memory fallback"""
        return self.redis_client if self.redis_available else None

    def get_minio(self):
        """
        Get MinIO client

        Usage:
            minio = db_manager.get_minio()
            minio.put_object(...)
        """
        self.require_minio()
        return self.minio_client

    async def create_all(self):
        """Create every table registered on Base (scripts / tests)"""
        from petcrush.common.base import Base, SCHEMA
        from petcrush import models  # noqa: F401  register all tables

        async with self.engine.begin() as conn:
            if settings.database_type != "sqlite":
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        if self.redis_client is not None:
            await self.redis_client.aclose()
        if self.engine is not None:
            await self.engine.dispose()


# Global database manager instance
db_manager = DatabaseManager()


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request, committed at the end"""
    async with db_manager.get_session() as session:
        yield session
