"""
PetCrushes API

Run locally with ``uvicorn petcrush.main:app --reload`` from ``backend/``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from petcrush.common.config import settings
from petcrush.common.counters import init_counter_store
from petcrush.common.database import db_manager
from petcrush.common.exceptions import register_exception_handlers
from petcrush.common.logging_config import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        log_file_prefix=settings.app_name,
    )
    logger.info("🚀 PetCrushes API starting...")

    await db_manager.initialize()
    if settings.database_type == "sqlite":
        # 本地 SQLite 没有迁移流程，直接建表
        await db_manager.create_all()
    init_counter_store(db_manager.get_redis())
    logger.info("✅ Database initialization completed")

    yield

    logger.info("Application shutting down...")
    await db_manager.close()


app = FastAPI(
    title="PetCrushes API",
    description="Pet matching and adoption marketplace",
    version=settings.app_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
register_exception_handlers(app)


@app.get("/")
async def root():
    return {
        "name": "PetCrushes API",
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "databases": {
            "database": {
                "available": db_manager.postgres_available,
                "status": f"✓ {db_manager.db_label}" if db_manager.postgres_available else "✗ disconnected"
            },
            "redis": {
                "available": db_manager.redis_available,
                "status": "✓ connected" if db_manager.redis_available else "⚠ in-memory counters"
            },
            "minio": {
                "available": db_manager.minio_available,
                "status": "✓ connected" if db_manager.minio_available else "⚠ media uploads disabled"
            }
        }
    }


from petcrush.domains.auth.api import router as auth_router
from petcrush.domains.user.api import router as user_router
from petcrush.domains.pet.api import router as pet_router, feed_router
from petcrush.domains.match.api import router as match_router, likes_router
from petcrush.domains.report.api import router as report_router
from petcrush.domains.adoption.api import router as adoption_router
from petcrush.domains.media.api import router as media_router

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(user_router, prefix="/api/users", tags=["users"])
app.include_router(pet_router, prefix="/api/pets", tags=["pets"])
app.include_router(feed_router, prefix="/api/feed", tags=["feed"])
app.include_router(likes_router, prefix="/api/likes", tags=["likes"])
app.include_router(match_router, prefix="/api/matches", tags=["matches"])
app.include_router(report_router, prefix="/api/reports", tags=["reports"])
app.include_router(adoption_router, prefix="/api/adoptions", tags=["adoptions"])
app.include_router(media_router, prefix="/api/media", tags=["media"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "petcrush.main:app",
        host="0.0.0.0",
        port=3001,
        reload=settings.debug,
        log_level="info"
    )
