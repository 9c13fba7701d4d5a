"""Locked folder data models."""

from dataclasses import dataclass
from datetime import datetime

from ..assets.assets_models import Asset


@dataclass(slots=True)
class LockedFolderSession:
    """At most one per user; access is live only while ``session_expires`` is ahead of now."""

    user_id: str
    has_access: bool
    session_expires: datetime | None
    updated_at: datetime

    def is_open(self, now: datetime) -> bool:
        return self.has_access and self.session_expires is not None and self.session_expires > now


@dataclass(slots=True)
class LockedAsset:
    asset: Asset
    token: str
    token_expires_at: datetime
