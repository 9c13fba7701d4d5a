"""Album/media membership primitives shared by the folder tree and the lifecycle engine.

Each helper runs inside an open unit of work so the membership row, the
asset's ``album_id`` and the affected covers change in one transaction.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

import structlog

from ..db.unit_of_work import SqlAlchemyUnitOfWork, UnitOfWorkFactory
from ..exceptions import MembershipConflictError
from ..locks import KeyedLock, asset_key, folder_key

logger = structlog.get_logger(__name__)

_MAX_LOCK_RETRIES = 16


def refresh_cover(uow: SqlAlchemyUnitOfWork, folder_id: str, user_id: str, now: datetime) -> str:
    """Point the cover at the current first member, or clear it."""
    media_ids = uow.folders.media_ids(folder_id)
    cover_url = ""
    if media_ids:
        first = uow.assets.find(media_ids[0], user_id)
        if first is not None:
            cover_url = first.url
        else:
            logger.warning("folders.cover.dangling_member", folder_id=folder_id, asset_id=media_ids[0])
    uow.folders.set_cover(folder_id, cover_url, now)
    return cover_url


def attach(
    uow: SqlAlchemyUnitOfWork,
    folder_id: str,
    asset_id: str,
    user_id: str,
    now: datetime,
) -> str | None:
    """Make ``asset_id`` a member of ``folder_id``; returns the folder it left, if any."""
    asset = uow.assets.get(asset_id, user_id)
    uow.folders.get(folder_id, user_id)
    current = uow.folders.membership(asset_id)
    if current == folder_id and asset.album_id == folder_id:
        return None

    previous = current or asset.album_id
    if current is not None and current != folder_id:
        uow.folders.remove_member(asset_id)
    if current != folder_id:
        uow.folders.append_member(folder_id, asset_id)
    uow.assets.update(asset_id, user_id, lambda record: setattr(record, "album_id", folder_id))

    refresh_cover(uow, folder_id, user_id, now)
    if previous is not None and previous != folder_id:
        if uow.folders.find_node(previous, user_id) is not None:
            refresh_cover(uow, previous, user_id, now)
        return previous
    return None


def detach(uow: SqlAlchemyUnitOfWork, asset_id: str, user_id: str, now: datetime) -> str | None:
    """Send ``asset_id`` back to the main library; returns the folder it left."""
    asset = uow.assets.find(asset_id, user_id)
    previous = uow.folders.membership(asset_id)
    if previous is not None:
        uow.folders.remove_member(asset_id)
    if asset is not None and asset.album_id is not None:
        previous = previous or asset.album_id
        uow.assets.update(asset_id, user_id, lambda record: setattr(record, "album_id", None))
    if previous is not None and uow.folders.find_node(previous, user_id) is not None:
        refresh_cover(uow, previous, user_id, now)
    return previous


@contextmanager
def hold_asset_membership(
    locks: KeyedLock,
    uow_factory: UnitOfWorkFactory,
    user_id: str,
    asset_id: str,
    *folder_ids: str | None,
) -> Iterator[str | None]:
    """Lock the asset, its current folder and ``folder_ids`` together.

    The current folder is read before locking, so the read is repeated under
    the locks and the acquisition retried when a concurrent move changed it.
    Yields the folder the asset belongs to while the locks are held.
    """
    for _ in range(_MAX_LOCK_RETRIES):
        seen = _current_folder(uow_factory, user_id, asset_id)
        with locks.hold(asset_key(asset_id), folder_key(seen), *map(folder_key, folder_ids)):
            if _current_folder(uow_factory, user_id, asset_id) == seen:
                yield seen
                return
    raise MembershipConflictError(f"membership of asset '{asset_id}' kept changing while locking")


def _current_folder(uow_factory: UnitOfWorkFactory, user_id: str, asset_id: str) -> str | None:
    with uow_factory() as uow:
        asset = uow.assets.get(asset_id, user_id)
        return uow.folders.membership(asset_id) or asset.album_id
