"""Pydantic schemas for the media API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..assets.assets_models import Asset
from ..quota.quota_service import QuotaSnapshot
from .media_models import TrashedAsset


class QuotaPayload(BaseModel):
    used: int
    total: int
    percentage: float


class AssetPayload(BaseModel):
    id: str
    original_name: str
    media_type: str
    url: str
    size_bytes: int
    created_at: datetime
    album_id: str | None = None
    favorite: bool
    is_trashed: bool
    is_locked: bool
    locked_at: datetime | None = None
    trashed_at: datetime | None = None
    scheduled_delete_at: datetime | None = None


class TrashedAssetPayload(AssetPayload):
    days_left: int


class UploadResponse(BaseModel):
    requested: int
    uploaded: int
    media: list[AssetPayload]
    storage: QuotaPayload


class LifecycleResponse(BaseModel):
    media: AssetPayload | None
    storage: QuotaPayload


class FavoriteResponse(BaseModel):
    id: str
    favorite: bool


class BulkMediaRequest(BaseModel):
    media_ids: list[str] = Field(default_factory=list)


class BulkMoveRequest(BulkMediaRequest):
    target_folder_id: str | None = None


class MoveMediaRequest(BaseModel):
    target_folder_id: str | None = None


class BulkResponse(BaseModel):
    requested: int
    affected: int
    storage: QuotaPayload | None = None


def quota_payload(snapshot: QuotaSnapshot) -> QuotaPayload:
    return QuotaPayload(used=snapshot.used, total=snapshot.total, percentage=snapshot.percentage)


def asset_payload(asset: Asset) -> AssetPayload:
    return AssetPayload(**_asset_fields(asset))


def trashed_payload(item: TrashedAsset) -> TrashedAssetPayload:
    return TrashedAssetPayload(**_asset_fields(item.asset), days_left=item.days_left)


def _asset_fields(asset: Asset) -> dict:
    return {
        "id": asset.id,
        "original_name": asset.original_name,
        "media_type": asset.media_type.value,
        "url": asset.url,
        "size_bytes": asset.size_bytes,
        "created_at": asset.created_at,
        "album_id": asset.album_id,
        "favorite": asset.favorite,
        "is_trashed": asset.is_trashed,
        "is_locked": asset.is_locked,
        "locked_at": asset.locked_at,
        "trashed_at": asset.trashed_at,
        "scheduled_delete_at": asset.scheduled_delete_at,
    }
