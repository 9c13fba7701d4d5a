"""Database models and session helpers."""

from .db_models import AssetModel, Base, FolderMediaModel, FolderModel, LockedFolderSessionModel

__all__ = [
    "AssetModel",
    "Base",
    "FolderMediaModel",
    "FolderModel",
    "LockedFolderSessionModel",
]
