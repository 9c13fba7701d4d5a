"""Lifecycle engine: upload, favorite, trash/restore, lock toggle and reclamation.

Trash and lock are independent axes. Trashed assets keep their folder
membership so a restore puts them back where they were; permanent deletion
and reclamation detach the asset before the record disappears.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

import structlog

from ..assets.assets_models import ACTIVE, Asset, LifecycleState
from ..clock import Clock, utcnow
from ..db.unit_of_work import UnitOfWorkFactory
from ..exceptions import NotFoundError, NotInTrashError, StorageUploadError, ValidationError
from ..folders import membership
from ..locks import KeyedLock, asset_key, folder_key
from ..quota.quota_service import QuotaAggregator
from ..storage.object_storage import ObjectStorage
from .media_models import (
    BulkResult,
    LifecycleResult,
    TrashedAsset,
    UploadPayload,
    UploadResult,
    days_left,
)
from .media_validation import media_type_for

logger = structlog.get_logger(__name__)

DEFAULT_RETENTION = timedelta(days=15)


class MediaLifecycleService:
    """Moves assets between active, trashed and locked states."""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        locks: KeyedLock,
        storage: ObjectStorage,
        quota: QuotaAggregator,
        retention: timedelta = DEFAULT_RETENTION,
        max_files_per_upload: int = 10,
        max_upload_bytes: int = 100 * 1024 * 1024,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._storage = storage
        self._quota = quota
        self._retention = retention
        self._max_files = max_files_per_upload
        self._max_upload_bytes = max_upload_bytes
        self._clock = clock or utcnow

    def now(self) -> datetime:
        return self._clock()

    # ----------------------------------------------------------------- upload

    def upload(
        self,
        user_id: str,
        files: Sequence[UploadPayload],
        *,
        album_id: str | None = None,
    ) -> UploadResult:
        """Store each file remotely, then record it; a failed ``put`` creates no record."""
        if not files:
            raise ValidationError("no files uploaded")
        if len(files) > self._max_files:
            raise ValidationError(f"at most {self._max_files} files per upload")
        media_types = [media_type_for(payload.content_type) for payload in files]
        for payload in files:
            if payload.size_bytes > self._max_upload_bytes:
                raise ValidationError(
                    f"'{payload.filename}' exceeds the {self._max_upload_bytes} byte upload limit"
                )
        if album_id is not None:
            with self._uow_factory() as uow:
                uow.folders.get(album_id, user_id)

        created: list[Asset] = []
        for payload, media_type in zip(files, media_types):
            try:
                ref = self._storage.put(payload.data, media_type, filename=payload.filename)
            except StorageUploadError:
                logger.warning("media.upload.storage_failed", user_id=user_id, filename=payload.filename)
                continue
            with self._locks.hold(folder_key(album_id)):
                with self._uow_factory() as uow:
                    now = self._clock()
                    asset_id = uow.assets.create(
                        user_id=user_id,
                        original_name=payload.filename,
                        media_type=media_type,
                        storage=ref,
                        size_bytes=payload.size_bytes,
                        created_at=now,
                    )
                    if album_id is not None and uow.folders.find_node(album_id, user_id) is not None:
                        membership.attach(uow, album_id, asset_id, user_id, now)
                    created.append(uow.assets.get(asset_id, user_id))
        logger.info(
            "media.upload.completed",
            user_id=user_id,
            album_id=album_id,
            requested=len(files),
            uploaded=len(created),
        )
        return UploadResult(requested=len(files), assets=created, quota=self._quota.snapshot(user_id))

    # ------------------------------------------------------------------ reads

    def get(self, asset_id: str, user_id: str) -> Asset:
        with self._uow_factory() as uow:
            return uow.assets.get(asset_id, user_id)

    def list_active(self, user_id: str) -> list[Asset]:
        with self._uow_factory() as uow:
            return uow.assets.list_by_user(user_id, ACTIVE)

    def list_trash(self, user_id: str) -> list[TrashedAsset]:
        now = self._clock()
        with self._uow_factory() as uow:
            trashed = uow.assets.list_trashed(user_id)
        return [
            TrashedAsset(asset=asset, days_left=days_left(asset.scheduled_delete_at, now))
            for asset in trashed
            if asset.scheduled_delete_at is not None
        ]

    def list_reclaimable(self, reference_time: datetime) -> list[Asset]:
        with self._uow_factory() as uow:
            return uow.assets.list_expired_trash(reference_time)

    # ------------------------------------------------------------ transitions

    def toggle_favorite(self, asset_id: str, user_id: str) -> Asset:
        def apply(asset: Asset) -> None:
            asset.favorite = not asset.favorite

        return self._mutate(asset_id, user_id, apply)

    def trash(self, asset_id: str, user_id: str) -> LifecycleResult:
        asset = self._mutate(asset_id, user_id, self._trash_transition())
        return LifecycleResult(asset=asset, quota=self._quota.snapshot(user_id))

    def restore(self, asset_id: str, user_id: str) -> LifecycleResult:
        asset = self._mutate(asset_id, user_id, self._restore_transition())
        return LifecycleResult(asset=asset, quota=self._quota.snapshot(user_id))

    def toggle_lock(self, asset_id: str, user_id: str) -> LifecycleResult:
        """Lock when unlocked, unlock when locked; works on either trash state."""
        now = self._clock()

        def apply(asset: Asset) -> None:
            asset.is_locked = not asset.is_locked
            asset.locked_at = now if asset.is_locked else None

        asset = self._mutate(asset_id, user_id, apply)
        logger.info("media.lock.toggled", asset_id=asset_id, user_id=user_id, is_locked=asset.is_locked)
        return LifecycleResult(asset=asset, quota=self._quota.snapshot(user_id))

    def bulk_trash(self, asset_ids: Sequence[str], user_id: str) -> BulkResult:
        return self._bulk(asset_ids, user_id, self._trash_transition, "trash")

    def bulk_restore(self, asset_ids: Sequence[str], user_id: str) -> BulkResult:
        return self._bulk(asset_ids, user_id, self._restore_transition, "restore")

    def permanent_delete(self, asset_id: str, user_id: str) -> LifecycleResult:
        """Destroy a trashed asset and release its stored object."""
        with membership.hold_asset_membership(self._locks, self._uow_factory, user_id, asset_id):
            with self._uow_factory() as uow:
                asset = uow.assets.get(asset_id, user_id)
            if not asset.is_trashed:
                raise NotInTrashError(f"Asset '{asset_id}' is not in the trash")
            self._destroy(asset)
        logger.info("media.deleted", asset_id=asset_id, user_id=user_id)
        return LifecycleResult(asset=asset, quota=self._quota.snapshot(user_id))

    def reclaim(self, asset_id: str, user_id: str, *, now: datetime | None = None) -> bool:
        """Sweep action; a concurrent restore or delete that won the race makes this a no-op."""
        reference = now or self._clock()
        try:
            with membership.hold_asset_membership(self._locks, self._uow_factory, user_id, asset_id):
                with self._uow_factory() as uow:
                    asset = uow.assets.find(asset_id, user_id)
                if (
                    asset is None
                    or not asset.is_trashed
                    or asset.scheduled_delete_at is None
                    or asset.scheduled_delete_at > reference
                ):
                    return False
                self._destroy(asset)
        except NotFoundError:
            return False
        return True

    # --------------------------------------------------------------- helpers

    def _mutate(self, asset_id: str, user_id: str, apply: Callable[[Asset], None]) -> Asset:
        with self._locks.hold(asset_key(asset_id)):
            with self._uow_factory() as uow:
                return uow.assets.update(asset_id, user_id, apply)

    def _trash_transition(self) -> Callable[[Asset], None]:
        now = self._clock()

        def apply(asset: Asset) -> None:
            if asset.is_trashed:
                return
            asset.lifecycle_state = LifecycleState.TRASHED
            asset.trashed_at = now
            asset.scheduled_delete_at = now + self._retention

        return apply

    def _restore_transition(self) -> Callable[[Asset], None]:
        def apply(asset: Asset) -> None:
            if not asset.is_trashed:
                raise NotFoundError(f"Asset '{asset.id}' not found in trash")
            asset.lifecycle_state = LifecycleState.ACTIVE
            asset.trashed_at = None
            asset.scheduled_delete_at = None

        return apply

    def _bulk(
        self,
        asset_ids: Sequence[str],
        user_id: str,
        transition: Callable[[], Callable[[Asset], None]],
        action: str,
    ) -> BulkResult:
        """Apply one transition per id; unresolved ids are skipped, nothing is rolled back."""
        if not asset_ids:
            raise ValidationError("no media selected")
        affected = 0
        for asset_id in dict.fromkeys(asset_ids):
            try:
                self._mutate(asset_id, user_id, transition())
            except NotFoundError:
                continue
            affected += 1
        logger.info(f"media.bulk_{action}", user_id=user_id, requested=len(asset_ids), affected=affected)
        return BulkResult(
            requested=len(asset_ids), affected=affected, quota=self._quota.snapshot(user_id)
        )

    def _destroy(self, asset: Asset) -> None:
        try:
            self._storage.delete(asset.storage.provider_id, asset.media_type)
        except Exception:
            logger.warning(
                "storage.delete.failed",
                asset_id=asset.id,
                provider_id=asset.storage.provider_id,
                exc_info=True,
            )
        with self._uow_factory() as uow:
            membership.detach(uow, asset.id, asset.user_id, self._clock())
            uow.assets.delete(asset.id, asset.user_id)


__all__ = ["MediaLifecycleService"]
