"""Disk-backed object storage used when no cloud provider is configured."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from ..assets.assets_models import MediaType, StorageRef
from ..exceptions import StorageUploadError


@dataclass(slots=True)
class LocalObjectStorage:
    """Store media under ``root/<media_type>/`` and serve it below ``public_base_url``."""

    root: Path
    public_base_url: str = "/media"
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def put(self, data: bytes, media_type: MediaType, *, filename: str) -> StorageRef:
        directory = self.root / media_type.value
        target = directory / f"{uuid.uuid4().hex}{self._suffix(filename)}"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            self.log.error("storage.local.put_failed", extra={"path": str(target)}, exc_info=exc)
            raise StorageUploadError(f"could not store '{filename}'") from exc
        provider_id = target.relative_to(self.root).as_posix()
        self.log.info(
            "storage.local.stored",
            extra={"provider_id": provider_id, "size_bytes": len(data)},
        )
        return StorageRef(url=f"{self.public_base_url.rstrip('/')}/{provider_id}", provider_id=provider_id)

    def delete(self, provider_id: str, media_type: MediaType) -> None:
        path = (self.root / provider_id).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"provider id '{provider_id}' escapes the storage root")
        path.unlink(missing_ok=True)

    @staticmethod
    def _suffix(filename: str) -> str:
        suffix = Path(filename or "").suffix.lower()
        if suffix and suffix[1:].isalnum() and len(suffix) <= 6:
            return suffix
        return ""
