"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..clock import utcnow


class Base(DeclarativeBase):
    """Base declarative class."""


class AssetModel(Base):
    __tablename__ = "asset"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    media_type: Mapped[str] = mapped_column(String(16), nullable=False)  # image|video
    storage_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    storage_provider_id: Mapped[str] = mapped_column(String(512), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # weak reference, cleared explicitly by the folder tree
    album_id: Mapped[str | None] = mapped_column(String(32), index=True)
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lifecycle_state: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime)
    trashed_at: Mapped[datetime | None] = mapped_column(DateTime)
    scheduled_delete_at: Mapped[datetime | None] = mapped_column(DateTime, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_asset_user_state", "user_id", "lifecycle_state"),
    )


class FolderModel(Base):
    __tablename__ = "folder"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    is_folder: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # weak reference, never an owning pointer
    parent_folder_id: Mapped[str | None] = mapped_column(String(32), index=True)
    cover_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class FolderMediaModel(Base):
    """Ordered direct membership; ``asset_id`` as key keeps one folder per asset."""

    __tablename__ = "folder_media"

    asset_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("asset.id", ondelete="CASCADE"), primary_key=True
    )
    folder_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("folder.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)


class LockedFolderSessionModel(Base):
    __tablename__ = "locked_folder_session"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    has_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    session_expires: Mapped[datetime | None] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
