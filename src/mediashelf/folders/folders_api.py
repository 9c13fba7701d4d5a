"""Folder and album routes."""

from fastapi import APIRouter, Depends, status

from ..auth.auth_dependencies import require_user_id
from .folders_schemas import (
    FolderCreateRequest,
    FolderDeletionPayload,
    FolderDetailPayload,
    FolderMediaRequest,
    FolderMoveRequest,
    FolderPayload,
    FolderUpdateRequest,
    PathEntryPayload,
    folder_detail_payload,
    folder_payload,
    path_payload,
)
from .folders_service import FolderTreeService


def build_folders_router(service: FolderTreeService) -> APIRouter:
    router = APIRouter(prefix="/api/folders", tags=["folders"])

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_folder(
        payload: FolderCreateRequest, user_id: str = Depends(require_user_id)
    ) -> FolderPayload:
        folder = service.create(
            user_id,
            payload.name,
            parent_id=payload.parent_folder_id,
            is_folder=payload.is_folder,
            description=payload.description,
            category=payload.category,
        )
        return folder_payload(folder)

    @router.get("")
    def list_roots(user_id: str = Depends(require_user_id)) -> list[FolderPayload]:
        return [folder_payload(folder) for folder in service.list_roots(user_id)]

    @router.get("/{folder_id}")
    def folder_detail(folder_id: str, user_id: str = Depends(require_user_id)) -> FolderDetailPayload:
        return folder_detail_payload(service.contents(folder_id, user_id))

    @router.get("/{folder_id}/children")
    def list_children(folder_id: str, user_id: str = Depends(require_user_id)) -> list[FolderPayload]:
        return [folder_payload(folder) for folder in service.list_children(folder_id, user_id)]

    @router.get("/{folder_id}/path")
    def folder_path(folder_id: str, user_id: str = Depends(require_user_id)) -> list[PathEntryPayload]:
        return path_payload(service.path(folder_id, user_id))

    @router.patch("/{folder_id}")
    def update_folder(
        folder_id: str, payload: FolderUpdateRequest, user_id: str = Depends(require_user_id)
    ) -> FolderPayload:
        folder = service.update(
            folder_id,
            user_id,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            is_folder=payload.is_folder,
        )
        return folder_payload(folder)

    @router.patch("/{folder_id}/move")
    def move_folder(
        folder_id: str, payload: FolderMoveRequest, user_id: str = Depends(require_user_id)
    ) -> FolderPayload:
        return folder_payload(service.move(folder_id, payload.parent_folder_id, user_id))

    @router.post("/{folder_id}/media")
    def add_media(
        folder_id: str, payload: FolderMediaRequest, user_id: str = Depends(require_user_id)
    ) -> FolderPayload:
        return folder_payload(service.add_media(folder_id, payload.media_id, user_id))

    @router.delete("/{folder_id}/media/{asset_id}")
    def remove_media(
        folder_id: str, asset_id: str, user_id: str = Depends(require_user_id)
    ) -> FolderPayload:
        return folder_payload(service.remove_media(folder_id, asset_id, user_id))

    @router.delete("/{folder_id}")
    def delete_folder(folder_id: str, user_id: str = Depends(require_user_id)) -> FolderDeletionPayload:
        deletion = service.delete(folder_id, user_id)
        return FolderDeletionPayload(
            deleted_folder_ids=deletion.deleted_folder_ids,
            detached_media_ids=deletion.detached_asset_ids,
        )

    return router


__all__ = ["build_folders_router"]
