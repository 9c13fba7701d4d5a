"""Structural folder operations racing a cascading delete must all finish."""

from __future__ import annotations

import threading
import time

import pytest

from src.mediashelf.exceptions import InvalidParentError, NotFoundError
from src.mediashelf.folders.folders_service import FolderTreeService
from tests.helpers.stack import Stack, build_stack


@pytest.fixture
def threaded_stack(tmp_path) -> Stack:
    return build_stack(f"sqlite:///{tmp_path / 'structure.db'}")


@pytest.fixture
def slow_subtree_walk(monkeypatch) -> threading.Event:
    """Pause ``delete`` after it took the tree lock and before it locks the subtree."""
    walking = threading.Event()
    original = FolderTreeService._subtree_post_order

    def slow(uow, folder_id, user_id):
        walking.set()
        time.sleep(0.3)
        return original(uow, folder_id, user_id)

    monkeypatch.setattr(FolderTreeService, "_subtree_post_order", staticmethod(slow))
    return walking


def _run_against_delete(stack: Stack, walking: threading.Event, root_id: str, action) -> list[BaseException]:
    errors: list[BaseException] = []

    def deleter() -> None:
        try:
            stack.folders.delete(root_id, "alice")
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    def racer() -> None:
        walking.wait(5)
        try:
            action()
        except BaseException as exc:
            errors.append(exc)

    threads = [threading.Thread(target=deleter, daemon=True), threading.Thread(target=racer, daemon=True)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)

    assert not any(thread.is_alive() for thread in threads), "operations did not finish"
    return errors


def _assert_consistent(stack: Stack) -> None:
    with stack.uow_factory() as uow:
        folders = {folder.id: folder for folder in uow.folders.list_by_user("alice")}
        assets = {asset.id: asset for asset in uow.assets.list_by_user("alice")}
    members: dict[str, str] = {}
    for folder in folders.values():
        for asset_id in folder.media_ids:
            assert asset_id not in members
            members[asset_id] = folder.id
        seen = {folder.id}
        parent = folder.parent_folder_id
        while parent is not None:
            assert parent in folders
            assert parent not in seen
            seen.add(parent)
            parent = folders[parent].parent_folder_id
    for asset in assets.values():
        assert asset.album_id == members.get(asset.id)


def test_move_waits_for_ancestor_delete(threaded_stack, slow_subtree_walk):
    stack = threaded_stack
    root = stack.folders.create("alice", "Root", is_folder=True)
    child = stack.folders.create("alice", "Child", parent_id=root.id)
    other = stack.folders.create("alice", "Other", is_folder=True)
    stack.upload("alice", "x.jpg", 10, album_id=child.id)

    errors = _run_against_delete(
        stack, slow_subtree_walk, root.id, lambda: stack.folders.move(child.id, other.id, "alice")
    )

    assert all(isinstance(exc, NotFoundError) for exc in errors)
    with stack.uow_factory() as uow:
        assert [f.id for f in uow.folders.list_by_user("alice")] == [other.id]
    _assert_consistent(stack)


def test_create_under_folder_being_deleted(threaded_stack, slow_subtree_walk):
    stack = threaded_stack
    root = stack.folders.create("alice", "Root", is_folder=True)
    stack.folders.create("alice", "Child", parent_id=root.id)

    errors = _run_against_delete(
        stack,
        slow_subtree_walk,
        root.id,
        lambda: stack.folders.create("alice", "Late", parent_id=root.id),
    )

    assert all(isinstance(exc, InvalidParentError) for exc in errors)
    with stack.uow_factory() as uow:
        assert uow.folders.list_by_user("alice") == []
    _assert_consistent(stack)


def test_add_media_during_delete_keeps_single_membership(threaded_stack, slow_subtree_walk):
    stack = threaded_stack
    root = stack.folders.create("alice", "Root", is_folder=True)
    child = stack.folders.create("alice", "Child", parent_id=root.id)
    asset = stack.upload("alice", "x.jpg", 10)

    errors = _run_against_delete(
        stack, slow_subtree_walk, root.id, lambda: stack.folders.add_media(child.id, asset.id, "alice")
    )

    assert all(isinstance(exc, NotFoundError) for exc in errors)
    assert stack.media.get(asset.id, "alice").album_id is None
    _assert_consistent(stack)
