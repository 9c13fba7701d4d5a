import asyncio
import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.mediashelf.assets.assets_models import MediaType
from src.mediashelf.exceptions import ValidationError
from src.mediashelf.media.media_validation import UploadReader, media_type_for


def _upload(data: bytes, content_type: str, filename: str = "file.bin") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [("image/png", MediaType.IMAGE), ("IMAGE/JPEG", MediaType.IMAGE), ("video/mp4", MediaType.VIDEO)],
)
def test_media_type_for_accepts_images_and_videos(content_type, expected):
    assert media_type_for(content_type) is expected


@pytest.mark.parametrize("content_type", ["text/plain", "", None, "application/pdf"])
def test_media_type_for_rejects_everything_else(content_type):
    with pytest.raises(ValidationError):
        media_type_for(content_type)


def test_reader_collects_chunks():
    reader = UploadReader(max_bytes=100, chunk_size_bytes=4)

    payload = asyncio.run(reader.read(_upload(b"0123456789", "image/png", "a.png")))

    assert payload.data == b"0123456789"
    assert payload.filename == "a.png"
    assert payload.content_type == "image/png"


def test_reader_enforces_size_limit():
    reader = UploadReader(max_bytes=5, chunk_size_bytes=2)

    with pytest.raises(ValidationError):
        asyncio.run(reader.read(_upload(b"0123456789", "image/png")))
