"""Pydantic schemas for the folder API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..media.media_schemas import AssetPayload, asset_payload
from .folders_models import Folder, FolderContents, PathEntry


class FolderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    parent_folder_id: str | None = None
    is_folder: bool = False
    description: str = ""
    category: str = ""


class FolderUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    is_folder: bool | None = None


class FolderMoveRequest(BaseModel):
    parent_folder_id: str | None = None


class FolderMediaRequest(BaseModel):
    media_id: str = Field(..., min_length=1)


class FolderPayload(BaseModel):
    id: str
    name: str
    description: str
    category: str
    is_folder: bool
    parent_folder_id: str | None
    cover_url: str
    media_ids: list[str]
    media_count: int
    created_at: datetime
    updated_at: datetime


class FolderDetailPayload(FolderPayload):
    media: list[AssetPayload]
    children: list[FolderPayload]


class PathEntryPayload(BaseModel):
    id: str
    name: str
    is_folder: bool


class FolderDeletionPayload(BaseModel):
    deleted_folder_ids: list[str]
    detached_media_ids: list[str]


def folder_payload(folder: Folder) -> FolderPayload:
    return FolderPayload(**_folder_fields(folder))


def folder_detail_payload(contents: FolderContents) -> FolderDetailPayload:
    return FolderDetailPayload(
        **_folder_fields(contents.folder),
        media=[asset_payload(asset) for asset in contents.assets],
        children=[folder_payload(child) for child in contents.children],
    )


def path_payload(entries: list[PathEntry]) -> list[PathEntryPayload]:
    return [PathEntryPayload(id=entry.id, name=entry.name, is_folder=entry.is_folder) for entry in entries]


def _folder_fields(folder: Folder) -> dict:
    return {
        "id": folder.id,
        "name": folder.name,
        "description": folder.description,
        "category": folder.category,
        "is_folder": folder.is_folder,
        "parent_folder_id": folder.parent_folder_id,
        "cover_url": folder.cover_url,
        "media_ids": list(folder.media_ids),
        "media_count": len(folder.media_ids),
        "created_at": folder.created_at,
        "updated_at": folder.updated_at,
    }
