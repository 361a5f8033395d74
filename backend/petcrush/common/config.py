"""
配置管理 - 从环境变量加载配置
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """应用配置"""

    # 应用配置
    app_name: str = "petcrush"
    app_version: str = "0.1.0"
    debug: bool = True
    environment: str = "development"  # development / production

    # 数据库类型: postgresql / sqlite
    database_type: str = "postgresql"

    # PostgreSQL配置
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "petcrush"
    postgres_password: str = "petcrush_dev_pass"
    postgres_db: str = "petcrush"

    # SQLite配置
    sqlite_path: str = "./data/petcrush.db"

    # Redis配置 (rate-limit counters)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # MinIO配置 (media uploads)
    minio_enabled: bool = True
    minio_endpoint: str = "localhost:9000"
    minio_access_key: str = "petcrush"
    minio_secret_key: str = "petcrush_dev_pass"
    minio_secure: bool = False
    minio_bucket: str = "petcrush-media"
    minio_public_url: Optional[str] = None
    media_max_bytes: int = 50 * 1024 * 1024

    # Auth
    secret_key: str = "petcrush-dev-secret-change-me"
    access_token_expire_days: int = 7
    otp_ttl_minutes: int = 10
    otp_max_attempts: int = 5
    otp_request_limit: int = 5
    otp_verify_limit: int = 10
    otp_rate_window_seconds: int = 15 * 60

    # Email (Resend)
    resend_api_key: Optional[str] = None
    email_from: str = "PetCrushes <no-reply@petcrushes.local>"

    # HTTP
    cors_origin: str = ""

    # 日志
    log_level: str = "INFO"
    log_dir: str = "./logs"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def postgres_url(self) -> str:
        """PostgreSQL异步连接URL"""
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    @property
    def sqlite_url(self) -> str:
        """SQLite异步连接URL"""
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

    @property
    def database_url(self) -> str:
        """根据 database_type 选择连接URL"""
        if self.database_type == "sqlite":
            return self.sqlite_url
        return self.postgres_url

    @property
    def redis_url(self) -> str:
        """Redis连接URL"""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def cors_origin_list(self) -> List[str]:
        """CORS origins; local dev servers are always allowed outside production"""
        origins = [o.strip() for o in self.cors_origin.split(",") if o.strip()]
        if not self.is_production:
            origins.extend([
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ])
        return list(dict.fromkeys(origins))


# 全局配置实例
settings = Settings()
