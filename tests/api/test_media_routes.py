from __future__ import annotations

from fastapi import status


def _upload(api, *files, album_id=None, user="alice"):
    data = {"album_id": album_id} if album_id else None
    return api.client.post(
        "/api/media/upload",
        files=[("files", file) for file in files],
        data=data,
        headers=api.headers(user),
    )


def test_requests_without_bearer_token_are_rejected(api):
    response = api.client.get("/api/media")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"]["failure_reason"] == "missing_token"


def test_upload_list_and_storage(api):
    response = _upload(
        api,
        ("a.jpg", b"x" * 100, "image/jpeg"),
        ("b.mp4", b"y" * 200, "video/mp4"),
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["requested"] == 2
    assert body["uploaded"] == 2
    assert body["storage"] == {"used": 300, "total": 1000, "percentage": 30.0}
    assert {item["media_type"] for item in body["media"]} == {"image", "video"}

    listing = api.client.get("/api/media", headers=api.headers())
    assert len(listing.json()) == 2
    assert api.client.get("/api/media", headers=api.headers("bob")).json() == []

    storage = api.client.get("/api/media/storage", headers=api.headers())
    assert storage.json()["used"] == 300


def test_upload_rejects_unsupported_type(api):
    response = _upload(api, ("notes.txt", b"hello", "text/plain"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "validation_error"


def test_upload_without_files_is_bad_request(api):
    response = api.client.post("/api/media/upload", headers=api.headers())

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_upload_into_unknown_album_is_not_found(api):
    response = _upload(api, ("a.jpg", b"x", "image/jpeg"), album_id="missing")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert api.storage.stored == {}


def test_trash_restore_and_delete_flow(api):
    asset_id = _upload(api, ("a.jpg", b"x" * 100, "image/jpeg")).json()["media"][0]["id"]

    trashed = api.client.post(f"/api/media/{asset_id}/trash", headers=api.headers())
    assert trashed.status_code == status.HTTP_200_OK
    assert trashed.json()["media"]["is_trashed"] is True
    assert trashed.json()["storage"]["used"] == 0

    trash = api.client.get("/api/media/trash", headers=api.headers()).json()
    assert [item["id"] for item in trash] == [asset_id]
    assert trash[0]["days_left"] == 15

    restored = api.client.post(f"/api/media/{asset_id}/restore", headers=api.headers())
    assert restored.json()["media"]["scheduled_delete_at"] is None

    conflict = api.client.delete(f"/api/media/{asset_id}", headers=api.headers())
    assert conflict.status_code == status.HTTP_409_CONFLICT
    assert conflict.json()["error"]["code"] == "not_in_trash"

    api.client.post(f"/api/media/{asset_id}/trash", headers=api.headers())
    deleted = api.client.delete(f"/api/media/{asset_id}", headers=api.headers())
    assert deleted.status_code == status.HTTP_200_OK
    assert api.client.get("/api/media/trash", headers=api.headers()).json() == []


def test_foreign_asset_is_not_found(api):
    asset_id = _upload(api, ("a.jpg", b"x", "image/jpeg")).json()["media"][0]["id"]

    response = api.client.post(f"/api/media/{asset_id}/trash", headers=api.headers("bob"))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "not_found"


def test_favorite_and_lock_toggles(api):
    asset_id = _upload(api, ("a.jpg", b"x", "image/jpeg")).json()["media"][0]["id"]

    favorite = api.client.patch(f"/api/media/{asset_id}/favorite", headers=api.headers())
    assert favorite.json() == {"id": asset_id, "favorite": True}

    locked = api.client.post(f"/api/media/{asset_id}/lock", headers=api.headers())
    assert locked.json()["media"]["is_locked"] is True
    unlocked = api.client.post(f"/api/media/{asset_id}/lock", headers=api.headers())
    assert unlocked.json()["media"]["is_locked"] is False


def test_bulk_trash_and_restore(api):
    body = _upload(api, ("a.jpg", b"x", "image/jpeg"), ("b.jpg", b"y", "image/jpeg")).json()
    ids = [item["id"] for item in body["media"]]

    trashed = api.client.post(
        "/api/media/bulk-trash", json={"media_ids": ids + ["missing"]}, headers=api.headers()
    )
    assert trashed.json()["requested"] == 3
    assert trashed.json()["affected"] == 2

    restored = api.client.post("/api/media/bulk-restore", json={"media_ids": ids}, headers=api.headers())
    assert restored.json()["affected"] == 2

    empty = api.client.post("/api/media/bulk-trash", json={"media_ids": []}, headers=api.headers())
    assert empty.status_code == status.HTTP_400_BAD_REQUEST


def test_move_and_bulk_move_media(api):
    folder_id = api.client.post("/api/folders", json={"name": "Trip"}, headers=api.headers()).json()["id"]
    ids = [
        item["id"]
        for item in _upload(api, ("a.jpg", b"x", "image/jpeg"), ("b.jpg", b"y", "image/jpeg")).json()["media"]
    ]

    moved = api.client.patch(
        f"/api/media/{ids[0]}/move", json={"target_folder_id": folder_id}, headers=api.headers()
    )
    assert moved.json()["album_id"] == folder_id

    bulk = api.client.post(
        "/api/media/bulk-move",
        json={"media_ids": ids, "target_folder_id": None},
        headers=api.headers(),
    )
    assert bulk.json()["affected"] == 2
    folder = api.client.get(f"/api/folders/{folder_id}", headers=api.headers()).json()
    assert folder["media_ids"] == []
