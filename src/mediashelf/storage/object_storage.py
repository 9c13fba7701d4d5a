"""Object storage collaborator contract and adapter selection."""

from __future__ import annotations

from typing import Protocol

from ..assets.assets_models import MediaType, StorageRef
from ..config import Settings


class ObjectStorage(Protocol):
    """Remote blob store holding the media bytes."""

    def put(self, data: bytes, media_type: MediaType, *, filename: str) -> StorageRef:
        """Store ``data`` and return a usable url/provider id pair."""

    def delete(self, provider_id: str, media_type: MediaType) -> None:
        """Release a stored object; callers treat failures as best effort."""


def build_object_storage(settings: Settings) -> ObjectStorage:
    """Cloudinary when configured, local disk under ``media_root`` otherwise."""
    if settings.cloudinary_url:
        from .cloudinary_storage import CloudinaryObjectStorage

        return CloudinaryObjectStorage.from_url(
            settings.cloudinary_url, folder=settings.cloudinary_folder
        )
    from .local_storage import LocalObjectStorage

    return LocalObjectStorage(root=settings.media_root, public_base_url=settings.public_base_url)


__all__ = ["ObjectStorage", "build_object_storage"]
