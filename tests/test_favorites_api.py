import pytest


@pytest.fixture
def listener(make_user):
    return make_user("listener")


@pytest.fixture
def song(storage, make_user, make_song):
    return make_song(storage, make_user("admin", is_admin=True).id)


def test_favorite_toggle(client, headers_for, listener, song):
    headers = headers_for(listener)
    assert client.get(f"/api/favorites/{song.id}", headers=headers).json() == {"isFavorite": False}

    assert client.post(f"/api/favorites/{song.id}", headers=headers).status_code == 201
    assert client.get(f"/api/favorites/{song.id}", headers=headers).json() == {"isFavorite": True}
    assert [s["id"] for s in client.get("/api/favorites", headers=headers).json()] == [song.id]

    assert client.delete(f"/api/favorites/{song.id}", headers=headers).status_code == 204
    assert client.get(f"/api/favorites/{song.id}", headers=headers).json() == {"isFavorite": False}
    assert client.delete(f"/api/favorites/{song.id}", headers=headers).status_code == 404


def test_favorite_unknown_song(client, headers_for, listener):
    assert client.post("/api/favorites/999", headers=headers_for(listener)).status_code == 404


def test_library(client, headers_for, listener, song):
    headers = headers_for(listener)
    assert client.post(f"/api/library/{song.id}", headers=headers).status_code == 201
    assert client.get(f"/api/library/{song.id}", headers=headers).json() == {"isInLibrary": True}
    assert client.get(f"/api/favorites/{song.id}", headers=headers).json() == {"isFavorite": False}
    assert len(client.get("/api/library", headers=headers).json()) == 1

    assert client.delete(f"/api/library/{song.id}", headers=headers).status_code == 204
    assert client.get("/api/library", headers=headers).json() == []


def test_deleted_song_leaves_library(client, storage, headers_for, listener, song):
    headers = headers_for(listener)
    client.post(f"/api/library/{song.id}", headers=headers)
    client.post(f"/api/favorites/{song.id}", headers=headers)
    storage.delete_song(song.id)
    assert client.get("/api/library", headers=headers).json() == []
    assert client.get("/api/favorites", headers=headers).json() == []
