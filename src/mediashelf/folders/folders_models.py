"""Folder domain dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..assets.assets_models import Asset

# A legitimate tree is never this deep; walks that exceed it are treated as cycles.
MAX_TREE_DEPTH = 1000


@dataclass(slots=True)
class Folder:
    id: str
    user_id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    category: str = ""
    is_folder: bool = False
    parent_folder_id: str | None = None
    media_ids: list[str] = field(default_factory=list)
    cover_url: str = ""


@dataclass(slots=True, frozen=True)
class FolderNode:
    """Parent-link view of a folder used by ancestor walks."""

    id: str
    name: str
    is_folder: bool
    parent_folder_id: str | None


@dataclass(slots=True, frozen=True)
class PathEntry:
    id: str
    name: str
    is_folder: bool


@dataclass(slots=True)
class FolderContents:
    folder: Folder
    assets: list[Asset]
    children: list[Folder]


@dataclass(slots=True)
class FolderDeletion:
    deleted_folder_ids: list[str]
    detached_asset_ids: list[str]
