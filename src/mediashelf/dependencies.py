"""Dependency wiring helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .auth.auth_service import TokenIdentityService
from .config import AppConfig
from .db.unit_of_work import unit_of_work_factory
from .folders.folders_api import build_folders_router
from .folders.folders_service import FolderTreeService
from .locked.locked_api import router as locked_router
from .locked.locked_passwords import HashedPasswordVerifier, PasswordVerifier
from .locked.locked_service import AccessGate
from .locked.locked_tokens import CapabilitySigner
from .locks import KeyedLock
from .media.media_api import router as media_router
from .media.media_service import MediaLifecycleService
from .media.media_validation import UploadReader
from .quota.quota_service import QuotaAggregator
from .storage.local_storage import LocalObjectStorage
from .storage.object_storage import ObjectStorage, build_object_storage


@dataclass(slots=True)
class Services:
    folder_tree: FolderTreeService
    media_service: MediaLifecycleService
    access_gate: AccessGate
    quota: QuotaAggregator
    storage: ObjectStorage


def build_services(
    config: AppConfig,
    *,
    storage: ObjectStorage | None = None,
    password_verifier: PasswordVerifier | None = None,
) -> Services:
    """Construct the service graph shared by the API, the sweep loop and the CLI."""
    settings = config.settings
    uow_factory = unit_of_work_factory(config.session_factory)
    locks = KeyedLock()
    object_storage = storage or build_object_storage(settings)
    if password_verifier is None and settings.locked_credentials_path is not None:
        password_verifier = HashedPasswordVerifier.from_file(settings.locked_credentials_path)

    quota = QuotaAggregator(uow_factory=uow_factory, total_bytes=settings.quota_bytes)
    folder_tree = FolderTreeService(uow_factory=uow_factory, locks=locks)
    media_service = MediaLifecycleService(
        uow_factory=uow_factory,
        locks=locks,
        storage=object_storage,
        quota=quota,
        retention=timedelta(days=settings.trash_retention_days),
        max_files_per_upload=settings.max_files_per_upload,
        max_upload_bytes=settings.max_upload_bytes,
    )
    access_gate = AccessGate(
        uow_factory=uow_factory,
        signer=CapabilitySigner(
            signing_key=settings.token_signing_key,
            ttl=timedelta(seconds=settings.locked_token_ttl_seconds),
        ),
        session_ttl=timedelta(minutes=settings.locked_session_ttl_minutes),
        password_verifier=password_verifier,
    )
    return Services(
        folder_tree=folder_tree,
        media_service=media_service,
        access_gate=access_gate,
        quota=quota,
        storage=object_storage,
    )


def include_routers(app: FastAPI, config: AppConfig, services: Services) -> None:
    """Mount module routers and attach services."""
    settings = config.settings
    app.state.config = config
    app.state.services = services
    app.state.folder_tree = services.folder_tree
    app.state.media_service = services.media_service
    app.state.access_gate = services.access_gate
    app.state.quota = services.quota
    app.state.identity_service = TokenIdentityService(signing_key=settings.token_signing_key)
    app.state.upload_reader = UploadReader(
        max_bytes=settings.max_upload_bytes,
        chunk_size_bytes=settings.upload_chunk_bytes,
    )

    app.include_router(media_router)
    app.include_router(build_folders_router(services.folder_tree))
    app.include_router(locked_router)

    if isinstance(services.storage, LocalObjectStorage) and settings.public_base_url.startswith("/"):
        services.storage.root.mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.public_base_url,
            StaticFiles(directory=services.storage.root),
            name="media-static",
        )


__all__ = ["Services", "build_services", "include_routers"]
