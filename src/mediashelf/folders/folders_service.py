"""Folder tree: the per-user forest of albums/folders and their membership."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from ..assets.assets_models import Asset
from ..clock import Clock, utcnow
from ..db.unit_of_work import SqlAlchemyUnitOfWork, UnitOfWorkFactory
from ..exceptions import (
    CyclicMoveError,
    InvalidParentError,
    NotFoundError,
    ValidationError,
    ensure_found,
)
from ..locks import KeyedLock, folder_key, tree_key
from . import membership
from .folders_models import MAX_TREE_DEPTH, Folder, FolderContents, FolderDeletion, PathEntry

logger = structlog.get_logger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("folder name is required")
    return cleaned


class FolderTreeService:
    """Create, nest, move and delete folders while keeping membership consistent."""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        locks: KeyedLock,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock or utcnow

    # ------------------------------------------------------------------ reads

    def get(self, folder_id: str, user_id: str) -> Folder:
        with self._uow_factory() as uow:
            return uow.folders.get(folder_id, user_id)

    def contents(self, folder_id: str, user_id: str) -> FolderContents:
        """Folder with its member assets in insertion order and its child folders."""
        with self._uow_factory() as uow:
            folder = uow.folders.get(folder_id, user_id)
            by_id = uow.assets.list_by_ids(folder.media_ids, user_id)
            assets = [by_id[asset_id] for asset_id in folder.media_ids if asset_id in by_id]
            children = uow.folders.list_children(user_id, folder_id)
        return FolderContents(folder=folder, assets=assets, children=children)

    def list_roots(self, user_id: str) -> list[Folder]:
        with self._uow_factory() as uow:
            return uow.folders.list_children(user_id, None)

    def list_children(self, folder_id: str, user_id: str) -> list[Folder]:
        with self._uow_factory() as uow:
            uow.folders.get(folder_id, user_id)
            return uow.folders.list_children(user_id, folder_id)

    def path(self, folder_id: str, user_id: str) -> list[PathEntry]:
        """Root-to-folder breadcrumb; stops quietly at an unresolvable ancestor."""
        with self._uow_factory() as uow:
            node = ensure_found(
                uow.folders.find_node(folder_id, user_id), entity="Folder", identifier=folder_id
            )
            entries = [PathEntry(id=node.id, name=node.name, is_folder=node.is_folder)]
            visited = {node.id}
            while node.parent_folder_id is not None:
                if len(entries) > MAX_TREE_DEPTH or node.parent_folder_id in visited:
                    logger.warning(
                        "folders.path.cycle_detected", folder_id=folder_id, at=node.id
                    )
                    break
                parent = uow.folders.find_node(node.parent_folder_id, user_id)
                if parent is None:
                    logger.warning(
                        "folders.path.orphaned",
                        folder_id=folder_id,
                        missing_parent_id=node.parent_folder_id,
                    )
                    break
                entries.append(PathEntry(id=parent.id, name=parent.name, is_folder=parent.is_folder))
                visited.add(parent.id)
                node = parent
        entries.reverse()
        return entries

    # ------------------------------------------------------------- structure

    def create(
        self,
        user_id: str,
        name: str,
        *,
        parent_id: str | None = None,
        is_folder: bool = False,
        description: str = "",
        category: str = "",
    ) -> Folder:
        cleaned = _clean_name(name)
        with self._locks.hold(tree_key(user_id) if parent_id else None):
            with self._uow_factory() as uow:
                if parent_id is not None and uow.folders.find_node(parent_id, user_id) is None:
                    raise InvalidParentError(f"Parent folder '{parent_id}' not found")
                folder = uow.folders.create(
                    user_id=user_id,
                    name=cleaned,
                    parent_folder_id=parent_id,
                    is_folder=is_folder,
                    description=(description or "").strip(),
                    category=(category or "").strip(),
                    created_at=self._clock(),
                )
        logger.info("folders.created", folder_id=folder.id, user_id=user_id, parent_id=parent_id)
        return folder

    def update(
        self,
        folder_id: str,
        user_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
        is_folder: bool | None = None,
    ) -> Folder:
        cleaned = _clean_name(name) if name is not None else None
        now = self._clock()

        def apply(folder: Folder) -> None:
            if cleaned is not None:
                folder.name = cleaned
            if description is not None:
                folder.description = description.strip()
            if category is not None:
                folder.category = category.strip()
            if is_folder is not None:
                folder.is_folder = is_folder
            folder.updated_at = now

        with self._locks.hold(folder_key(folder_id)):
            with self._uow_factory() as uow:
                return uow.folders.update(folder_id, user_id, apply)

    def rename(self, folder_id: str, user_id: str, name: str) -> Folder:
        return self.update(folder_id, user_id, name=name)

    def move(self, folder_id: str, new_parent_id: str | None, user_id: str) -> Folder:
        """Reparent ``folder_id``; rejected before any write when it would close a cycle."""
        now = self._clock()
        with self._locks.hold(tree_key(user_id)), self._locks.hold(folder_key(folder_id)):
            with self._uow_factory() as uow:
                uow.folders.get(folder_id, user_id)
                if new_parent_id is not None:
                    self._ensure_acyclic(uow, folder_id, new_parent_id, user_id)

                def apply(folder: Folder) -> None:
                    folder.parent_folder_id = new_parent_id
                    folder.updated_at = now

                moved = uow.folders.update(folder_id, user_id, apply)
        logger.info("folders.moved", folder_id=folder_id, new_parent_id=new_parent_id, user_id=user_id)
        return moved

    def delete(self, folder_id: str, user_id: str) -> FolderDeletion:
        """Delete the folder and every descendant; member assets go back to the main library."""
        now = self._clock()
        with self._locks.hold(tree_key(user_id)):
            with self._uow_factory() as uow:
                uow.folders.get(folder_id, user_id)
                ordered = self._subtree_post_order(uow, folder_id, user_id)
            with self._locks.hold(*map(folder_key, ordered)):
                detached: list[str] = []
                with self._uow_factory() as uow:
                    for current in ordered:
                        for asset_id in uow.folders.media_ids(current):
                            uow.folders.remove_member(asset_id)
                            if uow.assets.find(asset_id, user_id) is not None:
                                uow.assets.update(
                                    asset_id, user_id, lambda record: setattr(record, "album_id", None)
                                )
                            detached.append(asset_id)
                        uow.folders.delete(current, user_id)
        logger.info(
            "folders.deleted",
            folder_id=folder_id,
            user_id=user_id,
            folders=len(ordered),
            detached_assets=len(detached),
        )
        return FolderDeletion(deleted_folder_ids=ordered, detached_asset_ids=detached)

    # ------------------------------------------------------------ membership

    def add_media(self, folder_id: str, asset_id: str, user_id: str) -> Folder:
        with membership.hold_asset_membership(
            self._locks, self._uow_factory, user_id, asset_id, folder_id
        ):
            with self._uow_factory() as uow:
                previous = membership.attach(uow, folder_id, asset_id, user_id, self._clock())
                folder = uow.folders.get(folder_id, user_id)
        if previous is not None:
            logger.info("folders.media.moved", asset_id=asset_id, source=previous, target=folder_id)
        return folder

    def remove_media(self, folder_id: str, asset_id: str, user_id: str) -> Folder:
        with membership.hold_asset_membership(
            self._locks, self._uow_factory, user_id, asset_id, folder_id
        ) as current:
            with self._uow_factory() as uow:
                uow.folders.get(folder_id, user_id)
                if current == folder_id:
                    membership.detach(uow, asset_id, user_id, self._clock())
                folder = uow.folders.get(folder_id, user_id)
        return folder

    def move_media(self, asset_id: str, target_folder_id: str | None, user_id: str) -> Asset:
        """Attach to ``target_folder_id`` or, when ``None``, return to the main library."""
        with membership.hold_asset_membership(
            self._locks, self._uow_factory, user_id, asset_id, target_folder_id
        ):
            with self._uow_factory() as uow:
                if target_folder_id is None:
                    membership.detach(uow, asset_id, user_id, self._clock())
                else:
                    membership.attach(uow, target_folder_id, asset_id, user_id, self._clock())
                return uow.assets.get(asset_id, user_id)

    def bulk_move_media(
        self, asset_ids: Sequence[str], target_folder_id: str | None, user_id: str
    ) -> int:
        if not asset_ids:
            raise ValidationError("asset ids are required")
        if target_folder_id is not None:
            self.get(target_folder_id, user_id)
        moved = 0
        for asset_id in asset_ids:
            try:
                self.move_media(asset_id, target_folder_id, user_id)
            except NotFoundError:
                logger.info("folders.media.bulk_move.skipped", asset_id=asset_id, user_id=user_id)
                continue
            moved += 1
        return moved

    # --------------------------------------------------------------- helpers

    @staticmethod
    def _ensure_acyclic(
        uow: SqlAlchemyUnitOfWork, folder_id: str, new_parent_id: str, user_id: str
    ) -> None:
        if new_parent_id == folder_id:
            raise CyclicMoveError("a folder cannot be its own parent")
        node = uow.folders.find_node(new_parent_id, user_id)
        if node is None:
            raise InvalidParentError(f"Parent folder '{new_parent_id}' not found")
        hops = 0
        while node is not None:
            if node.id == folder_id:
                logger.info("folders.move.rejected", folder_id=folder_id, new_parent_id=new_parent_id)
                raise CyclicMoveError("target parent is a descendant of the folder")
            hops += 1
            if hops > MAX_TREE_DEPTH:
                raise CyclicMoveError("ancestor chain exceeds the maximum tree depth")
            if node.parent_folder_id is None:
                return
            node = uow.folders.find_node(node.parent_folder_id, user_id)

    @staticmethod
    def _subtree_post_order(
        uow: SqlAlchemyUnitOfWork, folder_id: str, user_id: str
    ) -> list[str]:
        """Descendants before ancestors, each folder once."""
        ordered: list[str] = []
        visited = {folder_id}
        stack: list[tuple[str, bool]] = [(folder_id, False)]
        while stack:
            current, expanded = stack.pop()
            if expanded:
                ordered.append(current)
                continue
            stack.append((current, True))
            for child_id in uow.folders.child_ids(current, user_id):
                if child_id not in visited:
                    visited.add(child_id)
                    stack.append((child_id, False))
        return ordered


__all__ = ["FolderTreeService"]
