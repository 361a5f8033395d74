"""
Media upload to MinIO.

Files land under ``media/<uuid><ext>`` in the configured bucket. Storage
being disabled, unreachable or failing is a ServiceUnavailable, never a
validation error.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import uuid4
import asyncio
import io
import logging
import mimetypes

from petcrush.common.config import settings
from petcrush.common.database import db_manager
from petcrush.common.exceptions import ServiceUnavailable, ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_PREFIXES = ("image/", "video/")


@dataclass
class StoredMedia:
    url: str
    key: str
    duration: Optional[float] = None


def object_key(filename: Optional[str], content_type: str) -> str:
    ext = Path(filename or "").suffix.lower()
    if not ext:
        ext = mimetypes.guess_extension(content_type) or ""
    return f"media/{uuid4().hex}{ext}"


def public_url(key: str) -> str:
    if settings.minio_public_url:
        return f"{settings.minio_public_url.rstrip('/')}/{key}"
    scheme = "https" if settings.minio_secure else "http"
    return f"{scheme}://{settings.minio_endpoint}/{settings.minio_bucket}/{key}"


class MediaService:
    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes or settings.media_max_bytes

    def validate(self, data: bytes, content_type: Optional[str]) -> str:
        if not data:
            raise ValidationFailed("No file uploaded", field="file")
        content_type = (content_type or "").lower()
        if not content_type.startswith(ALLOWED_PREFIXES):
            raise ValidationFailed("Only image and video files are allowed", field="file")
        if len(data) > self.max_bytes:
            raise ValidationFailed(f"File exceeds the {self.max_bytes} byte limit", field="file")
        return content_type

    async def upload(
        self,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        duration: Optional[float] = None,
    ) -> StoredMedia:
        content_type = self.validate(data, content_type)
        client = db_manager.get_minio()

        key = object_key(filename, content_type)
        try:
            await asyncio.to_thread(
                client.put_object,
                bucket_name=settings.minio_bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except Exception as e:
            logger.error(f"Media upload failed for {key}: {e}")
            raise ServiceUnavailable("Media storage is unavailable right now")

        logger.info(f"Stored {key} ({len(data)} bytes, {content_type})")
        return StoredMedia(url=public_url(key), key=key, duration=duration)


_media_service: Optional[MediaService] = None


def get_media_service() -> MediaService:
    global _media_service
    if _media_service is None:
        _media_service = MediaService()
    return _media_service
