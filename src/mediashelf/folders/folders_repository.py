"""Persistence layer for folders and their ordered media membership."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ..clock import utcnow
from ..db.db_models import FolderMediaModel, FolderModel
from ..exceptions import handle_sqlalchemy_errors, NotFoundError
from .folders_models import Folder, FolderNode


class FolderRepository:
    """Flat folder table keyed by id; parent links are plain id references."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        *,
        user_id: str,
        name: str,
        parent_folder_id: str | None = None,
        is_folder: bool = False,
        description: str = "",
        category: str = "",
        created_at: datetime | None = None,
    ) -> Folder:
        now = created_at or utcnow()
        model = FolderModel(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            description=description,
            category=category,
            is_folder=is_folder,
            parent_folder_id=parent_folder_id,
            cover_url="",
            created_at=now,
            updated_at=now,
        )
        with handle_sqlalchemy_errors(entity="folder"):
            self._session.add(model)
            self._session.flush()
        return self._to_domain(model, [])

    def get(self, folder_id: str, user_id: str) -> Folder:
        model = self._get_model(folder_id, user_id)
        return self._to_domain(model, self.media_ids(folder_id))

    def find_node(self, folder_id: str, user_id: str) -> FolderNode | None:
        model = self._find_model(folder_id, user_id)
        if model is None:
            return None
        return FolderNode(
            id=model.id,
            name=model.name,
            is_folder=bool(model.is_folder),
            parent_folder_id=model.parent_folder_id,
        )

    def update(self, folder_id: str, user_id: str, mutator: Callable[[Folder], None]) -> Folder:
        model = self._get_model(folder_id, user_id)
        folder = self._to_domain(model, self.media_ids(folder_id))
        mutator(folder)
        with handle_sqlalchemy_errors(entity="folder"):
            model.name = folder.name
            model.description = folder.description
            model.category = folder.category
            model.is_folder = folder.is_folder
            model.parent_folder_id = folder.parent_folder_id
            model.cover_url = folder.cover_url
            model.updated_at = folder.updated_at
            self._session.flush()
        return folder

    def set_cover(self, folder_id: str, cover_url: str, updated_at: datetime) -> None:
        with handle_sqlalchemy_errors(entity="folder"):
            model = self._session.get(FolderModel, folder_id)
            if model is None:
                return
            if model.cover_url != cover_url:
                model.cover_url = cover_url
            model.updated_at = updated_at
            self._session.flush()

    def delete(self, folder_id: str, user_id: str) -> None:
        model = self._get_model(folder_id, user_id)
        with handle_sqlalchemy_errors(entity="folder"):
            self._session.execute(
                delete(FolderMediaModel).where(FolderMediaModel.folder_id == folder_id)
            )
            self._session.delete(model)
            self._session.flush()

    def media_ids(self, folder_id: str) -> list[str]:
        stmt = (
            select(FolderMediaModel.asset_id)
            .where(FolderMediaModel.folder_id == folder_id)
            .order_by(FolderMediaModel.position.asc())
        )
        with handle_sqlalchemy_errors(entity="folder_media"):
            return list(self._session.scalars(stmt).all())

    def membership(self, asset_id: str) -> str | None:
        with handle_sqlalchemy_errors(entity="folder_media"):
            row = self._session.get(FolderMediaModel, asset_id)
        return row.folder_id if row is not None else None

    def append_member(self, folder_id: str, asset_id: str) -> None:
        with handle_sqlalchemy_errors(entity="folder_media"):
            last = self._session.scalar(
                select(func.max(FolderMediaModel.position)).where(
                    FolderMediaModel.folder_id == folder_id
                )
            )
            self._session.add(
                FolderMediaModel(
                    asset_id=asset_id,
                    folder_id=folder_id,
                    position=(last + 1) if last is not None else 0,
                )
            )
            self._session.flush()

    def remove_member(self, asset_id: str) -> str | None:
        """Drop the membership row of ``asset_id`` and return its former folder."""
        with handle_sqlalchemy_errors(entity="folder_media"):
            row = self._session.get(FolderMediaModel, asset_id)
            if row is None:
                return None
            folder_id = row.folder_id
            self._session.delete(row)
            self._session.flush()
        return folder_id

    def list_children(self, user_id: str, parent_folder_id: str | None) -> list[Folder]:
        stmt = select(FolderModel).where(FolderModel.user_id == user_id)
        if parent_folder_id is None:
            stmt = stmt.where(FolderModel.parent_folder_id.is_(None))
        else:
            stmt = stmt.where(FolderModel.parent_folder_id == parent_folder_id)
        stmt = stmt.order_by(
            FolderModel.is_folder.desc(), FolderModel.name.asc(), FolderModel.id.asc()
        )
        with handle_sqlalchemy_errors(entity="folder"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row, self.media_ids(row.id)) for row in rows]

    def child_ids(self, folder_id: str, user_id: str) -> list[str]:
        stmt = select(FolderModel.id).where(
            FolderModel.user_id == user_id, FolderModel.parent_folder_id == folder_id
        )
        with handle_sqlalchemy_errors(entity="folder"):
            return list(self._session.scalars(stmt).all())

    def list_by_user(self, user_id: str) -> list[Folder]:
        stmt = select(FolderModel).where(FolderModel.user_id == user_id)
        with handle_sqlalchemy_errors(entity="folder"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row, self.media_ids(row.id)) for row in rows]

    def _find_model(self, folder_id: str, user_id: str) -> FolderModel | None:
        with handle_sqlalchemy_errors(entity="folder"):
            model = self._session.get(FolderModel, folder_id)
        if model is None or model.user_id != user_id:
            return None
        return model

    def _get_model(self, folder_id: str, user_id: str) -> FolderModel:
        model = self._find_model(folder_id, user_id)
        if model is None:
            raise NotFoundError(f"Folder '{folder_id}' not found")
        return model

    @staticmethod
    def _to_domain(model: FolderModel, media_ids: list[str]) -> Folder:
        return Folder(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            description=model.description or "",
            category=model.category or "",
            is_folder=bool(model.is_folder),
            parent_folder_id=model.parent_folder_id,
            media_ids=media_ids,
            cover_url=model.cover_url or "",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
