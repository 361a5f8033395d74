"""Media upload schemas."""

from typing import Optional

from petcrush.common.schemas import CamelModel


class UploadResponse(CamelModel):
    url: str
    duration: Optional[float] = None
