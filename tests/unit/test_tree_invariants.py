"""Random operation sequences must never break membership, cover or lifecycle invariants."""

from __future__ import annotations

import random

import pytest

from src.mediashelf.exceptions import CyclicMoveError, NotFoundError, NotInTrashError
from tests.helpers.stack import Stack, build_stack

USERS = ("alice", "bob")


def _assert_invariants(stack: Stack) -> None:
    with stack.uow_factory() as uow:
        for user in USERS:
            folders = {folder.id: folder for folder in uow.folders.list_by_user(user)}
            assets = {asset.id: asset for asset in uow.assets.list_by_user(user)}
            members: dict[str, str] = {}
            for folder in folders.values():
                for asset_id in folder.media_ids:
                    assert asset_id not in members, "asset listed in two folders"
                    members[asset_id] = folder.id
                    assert asset_id in assets, "member from another user or missing"
                first = assets[folder.media_ids[0]].url if folder.media_ids else ""
                assert folder.cover_url == first

                seen = {folder.id}
                parent = folder.parent_folder_id
                while parent is not None:
                    assert parent in folders, "parent chain left the user's forest"
                    assert parent not in seen, "parent chain loops"
                    seen.add(parent)
                    parent = folders[parent].parent_folder_id

            for asset in assets.values():
                assert asset.album_id == members.get(asset.id)
                assert (asset.trashed_at is None) == (asset.scheduled_delete_at is None)
                assert (asset.trashed_at is not None) == asset.is_trashed
                assert (asset.locked_at is not None) == asset.is_locked


def _random_step(stack: Stack, rng: random.Random, user: str) -> None:
    with stack.uow_factory() as uow:
        folder_ids = [f.id for f in uow.folders.list_by_user(user)]
        asset_ids = [a.id for a in uow.assets.list_by_user(user)]
    foreign = "bob" if user == "alice" else "alice"
    pick = lambda items: rng.choice(items) if items else "missing"  # noqa: E731
    action = rng.choice(
        ["create", "create", "upload", "add", "add", "remove", "move", "delete", "detach", "trash", "restore", "purge", "lock", "foreign"]
    )
    try:
        if action == "create":
            parent = rng.choice(folder_ids + [None]) if folder_ids else None
            stack.folders.create(user, f"f{rng.randint(0, 999)}", parent_id=parent, is_folder=rng.random() < 0.5)
        elif action == "upload":
            stack.upload(user, f"a{rng.randint(0, 999)}.jpg", rng.randint(0, 50), album_id=rng.choice(folder_ids + [None]) if folder_ids else None)
        elif action == "add":
            stack.folders.add_media(pick(folder_ids), pick(asset_ids), user)
        elif action == "remove":
            stack.folders.remove_media(pick(folder_ids), pick(asset_ids), user)
        elif action == "move":
            stack.folders.move(pick(folder_ids), rng.choice(folder_ids + [None]) if folder_ids else None, user)
        elif action == "delete":
            stack.folders.delete(pick(folder_ids), user)
        elif action == "detach":
            stack.folders.move_media(pick(asset_ids), None, user)
        elif action == "trash":
            stack.media.trash(pick(asset_ids), user)
        elif action == "restore":
            stack.media.restore(pick(asset_ids), user)
        elif action == "purge":
            stack.media.permanent_delete(pick(asset_ids), user)
        elif action == "lock":
            stack.media.toggle_lock(pick(asset_ids), user)
        else:
            stack.folders.add_media(pick(folder_ids), pick(asset_ids), foreign)
    except (CyclicMoveError, NotFoundError, NotInTrashError):
        pass


@pytest.mark.parametrize("seed", range(8))
def test_random_sequences_preserve_invariants(seed):
    stack = build_stack()
    rng = random.Random(seed)
    for _ in range(120):
        _random_step(stack, rng, rng.choice(USERS))
        _assert_invariants(stack)
        if rng.random() < 0.1:
            stack.clock.advance(days=rng.randint(1, 20))
