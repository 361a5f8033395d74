"""Media upload endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.media.schemas import UploadResponse
from petcrush.domains.media.service import MediaService, get_media_service
from petcrush.domains.user.models import User

router = APIRouter()


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True, summary="Upload photo or video")
async def upload_media(
    file: Optional[UploadFile] = File(None),
    duration: Optional[float] = Form(None, ge=0),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
):
    """Videos should carry the client-measured ``duration`` in seconds."""
    data = await file.read() if file is not None else b""
    stored = await media_service.upload(
        data,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        duration=duration,
    )
    return UploadResponse(url=stored.url, duration=stored.duration)
