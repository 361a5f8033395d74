"""
日志配置 - 控制台 + 按天滚动的日志文件
"""

import logging
import sys
import time
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from fastapi import Request

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore", "urllib3", "multipart")


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = "./logs",
    log_file_prefix: str = "petcrush",
    backup_count: int = 14,
) -> None:
    """
    配置根日志

    Args:
        log_level: 日志级别
        log_dir: 日志目录，None 表示只输出到控制台
        log_file_prefix: 日志文件名前缀（petcrush.log, petcrush.log.2026-10-19）
        backup_count: 保留的历史日志天数
    """
    root = logging.getLogger()
    root.setLevel(log_level.upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            path / f"{log_file_prefix}.log",
            when="midnight",
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_request_logger = logging.getLogger("petcrush.request")


async def log_requests(request: Request, call_next):
    """HTTP middleware: ``GET /api/pets 200 in 12ms``"""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        _request_logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
        )
    return response
