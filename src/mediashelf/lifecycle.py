"""Background tasks started with the FastAPI application."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from .media.media_cleanup import sweep_expired_trash
from .media.media_service import MediaLifecycleService

logger = logging.getLogger(__name__)


def sweep_once(*, media_service: MediaLifecycleService, now: datetime | None = None) -> int:
    """Run a single reclamation pass and return how many assets were destroyed."""
    return sweep_expired_trash(media_service, reference_time=now)


async def run_periodic_trash_sweep(
    *,
    media_service: MediaLifecycleService,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 3600.0,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Sweep expired trash until ``shutdown_event`` is signalled."""
    interval = max(1.0, float(interval_seconds))
    tick = clock or media_service.now
    while not shutdown_event.is_set():
        try:
            reclaimed = await asyncio.to_thread(sweep_once, media_service=media_service, now=tick())
        except Exception:  # pragma: no cover - defensive logging
            logger.exception("media.sweep.iteration_failed")
        else:
            if reclaimed:
                logger.info("media.sweep.completed", extra={"reclaimed": reclaimed})
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = ["run_periodic_trash_sweep", "sweep_once"]
