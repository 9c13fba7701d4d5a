"""Persistence layer for asset records.

Every lookup is scoped by ``user_id``; an id owned by somebody else resolves
exactly like a missing one.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..clock import utcnow
from ..db.db_models import AssetModel
from ..exceptions import handle_sqlalchemy_errors, NotFoundError
from .assets_models import LOCKED_ACTIVE, Asset, AssetFilter, LifecycleState, MediaType, StorageRef


class AssetRepository:
    """Store media asset metadata bound to a unit-of-work session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        *,
        user_id: str,
        original_name: str,
        media_type: MediaType,
        storage: StorageRef,
        size_bytes: int,
        created_at: datetime | None = None,
    ) -> str:
        asset_id = uuid.uuid4().hex
        with handle_sqlalchemy_errors(entity="asset"):
            self._session.add(
                AssetModel(
                    id=asset_id,
                    user_id=user_id,
                    original_name=original_name,
                    media_type=media_type.value,
                    storage_url=storage.url,
                    storage_provider_id=storage.provider_id,
                    size_bytes=max(0, int(size_bytes)),
                    album_id=None,
                    favorite=False,
                    lifecycle_state=LifecycleState.ACTIVE.value,
                    is_locked=False,
                    created_at=created_at or utcnow(),
                )
            )
            self._session.flush()
        return asset_id

    def get(self, asset_id: str, user_id: str) -> Asset:
        return self._to_domain(self._get_model(asset_id, user_id))

    def find(self, asset_id: str, user_id: str) -> Asset | None:
        with handle_sqlalchemy_errors(entity="asset"):
            model = self._session.get(AssetModel, asset_id)
        if model is None or model.user_id != user_id:
            return None
        return self._to_domain(model)

    def update(self, asset_id: str, user_id: str, mutator: Callable[[Asset], None]) -> Asset:
        """Apply ``mutator`` to the domain record and persist changed fields."""
        model = self._get_model(asset_id, user_id)
        asset = self._to_domain(model)
        mutator(asset)
        with handle_sqlalchemy_errors(entity="asset"):
            model.original_name = asset.original_name
            model.album_id = asset.album_id
            model.favorite = asset.favorite
            model.lifecycle_state = asset.lifecycle_state.value
            model.is_locked = asset.is_locked
            model.locked_at = asset.locked_at
            model.trashed_at = asset.trashed_at
            model.scheduled_delete_at = asset.scheduled_delete_at
            self._session.flush()
        return asset

    def delete(self, asset_id: str, user_id: str) -> None:
        model = self._get_model(asset_id, user_id)
        with handle_sqlalchemy_errors(entity="asset"):
            self._session.delete(model)
            self._session.flush()

    def list_by_user(
        self,
        user_id: str,
        filter: AssetFilter | None = None,
        *,
        newest_first: bool = True,
    ) -> list[Asset]:
        stmt = self._filtered(select(AssetModel).where(AssetModel.user_id == user_id), filter)
        order = AssetModel.created_at.desc() if newest_first else AssetModel.created_at.asc()
        stmt = stmt.order_by(order, AssetModel.id)
        with handle_sqlalchemy_errors(entity="asset"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def list_trashed(self, user_id: str) -> list[Asset]:
        stmt = (
            select(AssetModel)
            .where(
                AssetModel.user_id == user_id,
                AssetModel.lifecycle_state == LifecycleState.TRASHED.value,
            )
            .order_by(AssetModel.trashed_at.desc(), AssetModel.id)
        )
        with handle_sqlalchemy_errors(entity="asset"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def list_locked(self, user_id: str) -> list[Asset]:
        stmt = self._filtered(
            select(AssetModel).where(AssetModel.user_id == user_id),
            LOCKED_ACTIVE,
        ).order_by(AssetModel.locked_at.desc(), AssetModel.id)
        with handle_sqlalchemy_errors(entity="asset"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def list_by_ids(self, asset_ids: Sequence[str], user_id: str) -> dict[str, Asset]:
        if not asset_ids:
            return {}
        stmt = select(AssetModel).where(
            AssetModel.user_id == user_id, AssetModel.id.in_(list(asset_ids))
        )
        with handle_sqlalchemy_errors(entity="asset"):
            rows = self._session.scalars(stmt).all()
        return {row.id: self._to_domain(row) for row in rows}

    def list_expired_trash(self, reference_time: datetime) -> list[Asset]:
        """Return trashed assets of every user whose deadline has passed."""
        stmt = (
            select(AssetModel)
            .where(
                AssetModel.lifecycle_state == LifecycleState.TRASHED.value,
                AssetModel.scheduled_delete_at.is_not(None),
                AssetModel.scheduled_delete_at <= reference_time,
            )
            .order_by(AssetModel.scheduled_delete_at.asc(), AssetModel.id)
        )
        with handle_sqlalchemy_errors(entity="asset"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def sum_size(self, user_id: str, filter: AssetFilter | None = None) -> int:
        stmt = self._filtered(
            select(func.coalesce(func.sum(AssetModel.size_bytes), 0)).where(
                AssetModel.user_id == user_id
            ),
            filter,
        )
        with handle_sqlalchemy_errors(entity="asset"):
            total = self._session.scalar(stmt)
        return int(total or 0)

    def _get_model(self, asset_id: str, user_id: str) -> AssetModel:
        with handle_sqlalchemy_errors(entity="asset"):
            model = self._session.get(AssetModel, asset_id)
        if model is None or model.user_id != user_id:
            raise NotFoundError(f"Asset '{asset_id}' not found")
        return model

    @staticmethod
    def _filtered(stmt, filter: AssetFilter | None):
        if filter is None:
            return stmt
        if filter.lifecycle_state is not None:
            stmt = stmt.where(AssetModel.lifecycle_state == filter.lifecycle_state.value)
        if filter.is_locked is not None:
            stmt = stmt.where(AssetModel.is_locked == filter.is_locked)
        return stmt

    @staticmethod
    def _to_domain(model: AssetModel) -> Asset:
        return Asset(
            id=model.id,
            user_id=model.user_id,
            original_name=model.original_name,
            media_type=MediaType(model.media_type),
            storage=StorageRef(url=model.storage_url, provider_id=model.storage_provider_id),
            size_bytes=int(model.size_bytes or 0),
            created_at=model.created_at,
            album_id=model.album_id,
            favorite=bool(model.favorite),
            lifecycle_state=LifecycleState(model.lifecycle_state),
            is_locked=bool(model.is_locked),
            locked_at=model.locked_at,
            trashed_at=model.trashed_at,
            scheduled_delete_at=model.scheduled_delete_at,
        )
