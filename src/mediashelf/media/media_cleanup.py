"""Helpers for the trash reclamation sweep."""

from __future__ import annotations

import logging
from datetime import datetime

from ..exceptions import MediaShelfError
from .media_service import MediaLifecycleService

logger = logging.getLogger(__name__)


def sweep_expired_trash(
    service: MediaLifecycleService,
    reference_time: datetime | None = None,
) -> int:
    """Reclaim every trashed asset whose deadline passed; returns how many were destroyed."""
    now = reference_time or service.now()
    reclaimed = 0
    for asset in service.list_reclaimable(now):
        try:
            destroyed = service.reclaim(asset.id, asset.user_id, now=now)
        except MediaShelfError:
            logger.exception("media.sweep.item_failed", extra={"asset_id": asset.id})
            continue
        if destroyed:
            reclaimed += 1
            logger.info(
                "media.sweep.reclaimed",
                extra={"asset_id": asset.id, "user_id": asset.user_id},
            )
    return reclaimed
