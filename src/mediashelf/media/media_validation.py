"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile

from ..assets.assets_models import MediaType
from ..exceptions import ValidationError
from .media_models import UploadPayload

logger = logging.getLogger(__name__)


def media_type_for(content_type: str | None) -> MediaType:
    """Only ``image/*`` and ``video/*`` uploads are accepted."""
    lowered = (content_type or "").lower()
    if lowered.startswith("video/"):
        return MediaType.VIDEO
    if lowered.startswith("image/"):
        return MediaType.IMAGE
    logger.warning("media.upload.unsupported_media", extra={"content_type": content_type})
    raise ValidationError(f"unsupported media type '{content_type}'; only images or videos are allowed")


@dataclass(slots=True)
class UploadReader:
    """Read multipart uploads into memory, enforcing the per-file size cap."""

    max_bytes: int
    chunk_size_bytes: int

    async def read(self, upload: UploadFile) -> UploadPayload:
        media_type_for(upload.content_type)
        chunks: list[bytes] = []
        size = 0
        try:
            while True:
                chunk = await upload.read(self.chunk_size_bytes)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    logger.warning(
                        "media.upload.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": self.max_bytes},
                    )
                    raise ValidationError(
                        f"'{upload.filename}' exceeds the {self.max_bytes} byte upload limit"
                    )
                chunks.append(chunk)
        finally:
            await upload.close()
        return UploadPayload(
            filename=upload.filename or "upload",
            content_type=upload.content_type or "application/octet-stream",
            data=b"".join(chunks),
        )
