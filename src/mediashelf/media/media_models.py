"""Media lifecycle data models."""

from dataclasses import dataclass
from datetime import datetime
from math import ceil

from ..assets.assets_models import Asset
from ..quota.quota_service import QuotaSnapshot

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(slots=True)
class UploadPayload:
    """One file handed over by the request handler."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class UploadResult:
    requested: int
    assets: list[Asset]
    quota: QuotaSnapshot

    @property
    def uploaded(self) -> int:
        return len(self.assets)


@dataclass(slots=True)
class LifecycleResult:
    asset: Asset | None
    quota: QuotaSnapshot


@dataclass(slots=True)
class BulkResult:
    requested: int
    affected: int
    quota: QuotaSnapshot


@dataclass(slots=True)
class TrashedAsset:
    asset: Asset
    days_left: int


def days_left(scheduled_delete_at: datetime, now: datetime) -> int:
    return ceil((scheduled_delete_at - now).total_seconds() / SECONDS_PER_DAY)
