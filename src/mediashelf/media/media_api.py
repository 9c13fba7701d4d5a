"""Media library routes: upload, listings and lifecycle transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from starlette.concurrency import run_in_threadpool

from ..auth.auth_dependencies import require_user_id
from ..exceptions import ValidationError
from ..folders.folders_service import FolderTreeService
from ..quota.quota_service import QuotaAggregator
from .media_models import LifecycleResult, UploadPayload
from .media_schemas import (
    AssetPayload,
    BulkMediaRequest,
    BulkMoveRequest,
    BulkResponse,
    FavoriteResponse,
    LifecycleResponse,
    MoveMediaRequest,
    QuotaPayload,
    TrashedAssetPayload,
    UploadResponse,
    asset_payload,
    quota_payload,
    trashed_payload,
)
from .media_service import MediaLifecycleService
from .media_validation import UploadReader

router = APIRouter(prefix="/api/media", tags=["media"])


def get_media_service(request: Request) -> MediaLifecycleService:
    try:
        return request.app.state.media_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("MediaLifecycleService is not configured") from exc


def get_upload_reader(request: Request) -> UploadReader:
    try:
        return request.app.state.upload_reader  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("UploadReader is not configured") from exc


def get_quota(request: Request) -> QuotaAggregator:
    try:
        return request.app.state.quota  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("QuotaAggregator is not configured") from exc


def get_folder_tree(request: Request) -> FolderTreeService:
    try:
        return request.app.state.folder_tree  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("FolderTreeService is not configured") from exc


def _lifecycle_response(result: LifecycleResult) -> LifecycleResponse:
    return LifecycleResponse(
        media=asset_payload(result.asset) if result.asset is not None else None,
        storage=quota_payload(result.quota),
    )


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_media(
    files: list[UploadFile] | None = File(default=None),
    album_id: str | None = Form(default=None),
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
    reader: UploadReader = Depends(get_upload_reader),
) -> UploadResponse:
    if not files:
        raise ValidationError("no files uploaded")
    payloads: list[UploadPayload] = [await reader.read(upload) for upload in files]
    result = await run_in_threadpool(service.upload, user_id, payloads, album_id=album_id or None)
    return UploadResponse(
        requested=result.requested,
        uploaded=result.uploaded,
        media=[asset_payload(asset) for asset in result.assets],
        storage=quota_payload(result.quota),
    )


@router.get("")
def list_media(
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> list[AssetPayload]:
    return [asset_payload(asset) for asset in service.list_active(user_id)]


@router.get("/storage")
def storage_usage(
    user_id: str = Depends(require_user_id),
    quota: QuotaAggregator = Depends(get_quota),
) -> QuotaPayload:
    return quota_payload(quota.snapshot(user_id))


@router.get("/trash")
def list_trash(
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> list[TrashedAssetPayload]:
    return [trashed_payload(item) for item in service.list_trash(user_id)]


@router.post("/bulk-trash")
def bulk_trash(
    payload: BulkMediaRequest,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> BulkResponse:
    result = service.bulk_trash(payload.media_ids, user_id)
    return BulkResponse(
        requested=result.requested, affected=result.affected, storage=quota_payload(result.quota)
    )


@router.post("/bulk-restore")
def bulk_restore(
    payload: BulkMediaRequest,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> BulkResponse:
    result = service.bulk_restore(payload.media_ids, user_id)
    return BulkResponse(
        requested=result.requested, affected=result.affected, storage=quota_payload(result.quota)
    )


@router.post("/bulk-move")
def bulk_move(
    payload: BulkMoveRequest,
    user_id: str = Depends(require_user_id),
    folder_tree: FolderTreeService = Depends(get_folder_tree),
) -> BulkResponse:
    moved = folder_tree.bulk_move_media(payload.media_ids, payload.target_folder_id, user_id)
    return BulkResponse(requested=len(payload.media_ids), affected=moved)


@router.patch("/{asset_id}/favorite")
def toggle_favorite(
    asset_id: str,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> FavoriteResponse:
    asset = service.toggle_favorite(asset_id, user_id)
    return FavoriteResponse(id=asset.id, favorite=asset.favorite)


@router.post("/{asset_id}/trash")
def trash_media(
    asset_id: str,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> LifecycleResponse:
    return _lifecycle_response(service.trash(asset_id, user_id))


@router.post("/{asset_id}/restore")
def restore_media(
    asset_id: str,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> LifecycleResponse:
    return _lifecycle_response(service.restore(asset_id, user_id))


@router.post("/{asset_id}/lock")
def toggle_lock(
    asset_id: str,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> LifecycleResponse:
    return _lifecycle_response(service.toggle_lock(asset_id, user_id))


@router.patch("/{asset_id}/move")
def move_media(
    asset_id: str,
    payload: MoveMediaRequest,
    user_id: str = Depends(require_user_id),
    folder_tree: FolderTreeService = Depends(get_folder_tree),
) -> AssetPayload:
    return asset_payload(folder_tree.move_media(asset_id, payload.target_folder_id, user_id))


@router.delete("/{asset_id}")
def delete_media(
    asset_id: str,
    user_id: str = Depends(require_user_id),
    service: MediaLifecycleService = Depends(get_media_service),
) -> LifecycleResponse:
    return _lifecycle_response(service.permanent_delete(asset_id, user_id))
