from __future__ import annotations

import threading

import pytest

from src.mediashelf.exceptions import NotFoundError, ValidationError
from tests.helpers.stack import build_stack


def test_cover_tracks_first_member(stack):
    trip = stack.folders.create("alice", "Trip")
    x = stack.upload("alice", "x.jpg", 10)
    y = stack.upload("alice", "y.jpg", 10)

    assert stack.folders.add_media(trip.id, x.id, "alice").cover_url == x.url
    assert stack.folders.add_media(trip.id, y.id, "alice").cover_url == x.url

    after_remove = stack.folders.remove_media(trip.id, x.id, "alice")
    assert after_remove.media_ids == [y.id]
    assert after_remove.cover_url == y.url
    assert stack.media.get(x.id, "alice").album_id is None


def test_adding_to_second_folder_moves_asset(stack):
    f1 = stack.folders.create("alice", "F1")
    f2 = stack.folders.create("alice", "F2")
    a = stack.upload("alice", "a.jpg", 10, album_id=f1.id)
    b = stack.upload("alice", "b.jpg", 10, album_id=f1.id)

    stack.folders.add_media(f2.id, a.id, "alice")

    source = stack.folders.get(f1.id, "alice")
    target = stack.folders.get(f2.id, "alice")
    assert source.media_ids == [b.id]
    assert source.cover_url == b.url
    assert target.media_ids == [a.id]
    assert stack.media.get(a.id, "alice").album_id == f2.id


def test_adding_twice_keeps_single_entry(stack):
    trip = stack.folders.create("alice", "Trip")
    x = stack.upload("alice", "x.jpg", 10)

    stack.folders.add_media(trip.id, x.id, "alice")
    folder = stack.folders.add_media(trip.id, x.id, "alice")

    assert folder.media_ids == [x.id]


def test_remove_of_non_member_is_noop(stack):
    trip = stack.folders.create("alice", "Trip")
    other = stack.folders.create("alice", "Other")
    x = stack.upload("alice", "x.jpg", 10, album_id=other.id)

    stack.folders.remove_media(trip.id, x.id, "alice")

    assert stack.folders.get(other.id, "alice").media_ids == [x.id]


def test_add_foreign_asset_is_not_found(stack):
    trip = stack.folders.create("alice", "Trip")
    theirs = stack.upload("bob", "b.jpg", 10)

    with pytest.raises(NotFoundError):
        stack.folders.add_media(trip.id, theirs.id, "alice")


def test_move_media_to_main_library(stack):
    trip = stack.folders.create("alice", "Trip")
    x = stack.upload("alice", "x.jpg", 10, album_id=trip.id)

    moved = stack.folders.move_media(x.id, None, "alice")

    assert moved.album_id is None
    folder = stack.folders.get(trip.id, "alice")
    assert folder.media_ids == []
    assert folder.cover_url == ""


def test_bulk_move_skips_unknown_ids(stack):
    target = stack.folders.create("alice", "Target")
    assets = [stack.upload("alice", f"{i}.jpg", 10) for i in range(2)]

    moved = stack.folders.bulk_move_media([a.id for a in assets] + ["missing"], target.id, "alice")

    assert moved == 2
    assert stack.folders.get(target.id, "alice").media_ids == [a.id for a in assets]


def test_bulk_move_validates_input(stack):
    x = stack.upload("alice", "x.jpg", 10)

    with pytest.raises(ValidationError):
        stack.folders.bulk_move_media([], None, "alice")
    with pytest.raises(NotFoundError):
        stack.folders.bulk_move_media([x.id], "missing", "alice")


def test_concurrent_adds_leave_exactly_one_membership(tmp_path):
    stack = build_stack(f"sqlite:///{tmp_path / 'concurrent.db'}")
    folders = [stack.folders.create("alice", f"F{i}") for i in range(4)]
    asset = stack.upload("alice", "x.jpg", 10)
    errors: list[BaseException] = []

    def worker(folder_id: str) -> None:
        try:
            for _ in range(5):
                stack.folders.add_media(folder_id, asset.id, "alice")
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(folder.id,)) for folder in folders]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    holders = [f for f in folders if asset.id in stack.folders.get(f.id, "alice").media_ids]
    assert len(holders) == 1
    assert stack.media.get(asset.id, "alice").album_id == holders[0].id
    for folder in folders:
        current = stack.folders.get(folder.id, "alice")
        assert current.cover_url == (asset.url if current.media_ids else "")
