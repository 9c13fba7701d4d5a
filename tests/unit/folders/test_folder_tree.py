from __future__ import annotations

import pytest

from src.mediashelf.exceptions import CyclicMoveError, InvalidParentError, NotFoundError, ValidationError
from src.mediashelf.folders.folders_models import MAX_TREE_DEPTH


def test_create_nested_and_list(stack):
    root = stack.folders.create("alice", "Photos", is_folder=True)
    child = stack.folders.create("alice", "Trip", parent_id=root.id, description=" summer ")

    assert [f.id for f in stack.folders.list_roots("alice")] == [root.id]
    assert [f.id for f in stack.folders.list_children(root.id, "alice")] == [child.id]
    assert child.description == "summer"
    assert stack.folders.list_roots("bob") == []


def test_list_children_orders_folders_before_albums(stack):
    root = stack.folders.create("alice", "Root", is_folder=True)
    stack.folders.create("alice", "b-album", parent_id=root.id)
    stack.folders.create("alice", "z-folder", parent_id=root.id, is_folder=True)
    stack.folders.create("alice", "a-album", parent_id=root.id)

    names = [f.name for f in stack.folders.list_children(root.id, "alice")]

    assert names == ["z-folder", "a-album", "b-album"]


def test_create_requires_name_and_resolvable_parent(stack):
    with pytest.raises(ValidationError):
        stack.folders.create("alice", "   ")
    with pytest.raises(InvalidParentError):
        stack.folders.create("alice", "Orphan", parent_id="missing")
    foreign = stack.folders.create("bob", "Theirs")
    with pytest.raises(InvalidParentError):
        stack.folders.create("alice", "Sneaky", parent_id=foreign.id)


def test_path_walks_to_root(stack):
    a = stack.folders.create("alice", "A", is_folder=True)
    b = stack.folders.create("alice", "B", parent_id=a.id, is_folder=True)
    c = stack.folders.create("alice", "C", parent_id=b.id)

    assert [entry.name for entry in stack.folders.path(c.id, "alice")] == ["A", "B", "C"]


def test_path_stops_at_unresolvable_ancestor(stack):
    a = stack.folders.create("alice", "A", is_folder=True)
    b = stack.folders.create("alice", "B", parent_id=a.id)
    with stack.uow_factory() as uow:
        uow.folders.update(b.id, "alice", lambda folder: setattr(folder, "parent_folder_id", "ghost"))

    assert [entry.name for entry in stack.folders.path(b.id, "alice")] == ["B"]


def test_path_of_unknown_folder_is_not_found(stack):
    with pytest.raises(NotFoundError):
        stack.folders.path("missing", "alice")


@pytest.mark.parametrize("depth", [0, 1, 2])
def test_move_into_own_subtree_is_rejected(stack, depth):
    top = stack.folders.create("alice", "Top", is_folder=True)
    chain = [top]
    for index in range(2):
        chain.append(stack.folders.create("alice", f"L{index}", parent_id=chain[-1].id, is_folder=True))

    with pytest.raises(CyclicMoveError):
        stack.folders.move(top.id, chain[depth].id, "alice")

    assert stack.folders.get(top.id, "alice").parent_folder_id is None


def test_move_reparents_and_back_to_root(stack):
    a = stack.folders.create("alice", "A", is_folder=True)
    b = stack.folders.create("alice", "B")

    assert stack.folders.move(b.id, a.id, "alice").parent_folder_id == a.id
    assert stack.folders.move(b.id, None, "alice").parent_folder_id is None


def test_move_under_missing_parent_is_invalid(stack):
    b = stack.folders.create("alice", "B")

    with pytest.raises(InvalidParentError):
        stack.folders.move(b.id, "missing", "alice")


def test_move_rejects_corrupt_ancestor_loop(stack):
    a = stack.folders.create("alice", "A", is_folder=True)
    b = stack.folders.create("alice", "B", parent_id=a.id, is_folder=True)
    c = stack.folders.create("alice", "C")
    with stack.uow_factory() as uow:
        uow.folders.update(a.id, "alice", lambda folder: setattr(folder, "parent_folder_id", b.id))

    with pytest.raises(CyclicMoveError):
        stack.folders.move(c.id, b.id, "alice")
    assert MAX_TREE_DEPTH == 1000


def test_delete_cascades_and_detaches_assets(stack):
    top = stack.folders.create("alice", "F", is_folder=True)
    d1 = stack.folders.create("alice", "D1", parent_id=top.id, is_folder=True)
    d2 = stack.folders.create("alice", "D2", parent_id=d1.id)
    keep = stack.folders.create("alice", "Keep")
    assets = {
        folder.id: stack.upload("alice", f"{folder.name}.jpg", 10, album_id=folder.id)
        for folder in (top, d1, d2, keep)
    }

    deletion = stack.folders.delete(top.id, "alice")

    assert set(deletion.deleted_folder_ids) == {top.id, d1.id, d2.id}
    assert deletion.deleted_folder_ids[-1] == top.id
    for folder_id in (top.id, d1.id, d2.id):
        with pytest.raises(NotFoundError):
            stack.folders.get(folder_id, "alice")
        assert stack.media.get(assets[folder_id].id, "alice").album_id is None
    assert stack.media.get(assets[keep.id].id, "alice").album_id == keep.id


def test_update_and_rename(stack):
    album = stack.folders.create("alice", "Old")

    renamed = stack.folders.rename(album.id, "alice", "  New ")
    updated = stack.folders.update(album.id, "alice", description="beach", category="travel")

    assert renamed.name == "New"
    assert (updated.name, updated.description, updated.category) == ("New", "beach", "travel")
    with pytest.raises(ValidationError):
        stack.folders.rename(album.id, "alice", "")


def test_contents_lists_members_in_insertion_order(stack):
    album = stack.folders.create("alice", "Trip", is_folder=True)
    sub = stack.folders.create("alice", "Day 1", parent_id=album.id)
    first = stack.upload("alice", "1.jpg", 10, album_id=album.id)
    second = stack.upload("alice", "2.jpg", 10, album_id=album.id)

    contents = stack.folders.contents(album.id, "alice")

    assert [a.id for a in contents.assets] == [first.id, second.id]
    assert [c.id for c in contents.children] == [sub.id]
