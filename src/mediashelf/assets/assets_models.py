"""Asset domain dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


class LifecycleState(StrEnum):
    ACTIVE = "active"
    TRASHED = "trashed"


@dataclass(slots=True, frozen=True)
class StorageRef:
    """Opaque pointer into external object storage."""

    url: str
    provider_id: str


@dataclass(slots=True)
class Asset:
    id: str
    user_id: str
    original_name: str
    media_type: MediaType
    storage: StorageRef
    size_bytes: int
    created_at: datetime
    album_id: str | None = None
    favorite: bool = False
    lifecycle_state: LifecycleState = LifecycleState.ACTIVE
    is_locked: bool = False
    locked_at: datetime | None = None
    trashed_at: datetime | None = None
    scheduled_delete_at: datetime | None = None

    @property
    def is_trashed(self) -> bool:
        return self.lifecycle_state is LifecycleState.TRASHED

    @property
    def url(self) -> str:
        return self.storage.url


@dataclass(slots=True, frozen=True)
class AssetFilter:
    """Selection used by listing and size aggregation; ``None`` means any."""

    lifecycle_state: LifecycleState | None = None
    is_locked: bool | None = None


ACTIVE = AssetFilter(lifecycle_state=LifecycleState.ACTIVE)
TRASHED = AssetFilter(lifecycle_state=LifecycleState.TRASHED)
LOCKED_ACTIVE = AssetFilter(lifecycle_state=LifecycleState.ACTIVE, is_locked=True)


__all__ = [
    "ACTIVE",
    "Asset",
    "AssetFilter",
    "LOCKED_ACTIVE",
    "LifecycleState",
    "MediaType",
    "StorageRef",
    "TRASHED",
]
