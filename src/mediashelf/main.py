"""FastAPI application entry point (``uvicorn src.mediashelf.main:create_app --factory``)."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from fastapi import FastAPI

from .api.errors import register_error_handlers
from .config import AppConfig, load_config
from .dependencies import Services, build_services, include_routers
from .lifecycle import run_periodic_trash_sweep
from .logging import configure_logging


def create_app(
    config: AppConfig | None = None,
    *,
    services: Services | None = None,
    run_sweeper: bool = True,
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()
    wired = services or build_services(cfg)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if not run_sweeper:
            yield
            return
        shutdown_event = asyncio.Event()
        task = asyncio.create_task(
            run_periodic_trash_sweep(
                media_service=wired.media_service,
                shutdown_event=shutdown_event,
                interval_seconds=cfg.settings.sweep_interval_seconds,
            )
        )
        try:
            yield
        finally:
            shutdown_event.set()
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="MediaShelf", lifespan=lifespan)
    register_error_handlers(app)
    include_routers(app, cfg, wired)
    return app


__all__ = ["create_app"]
