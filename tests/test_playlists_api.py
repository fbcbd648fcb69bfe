import pytest


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def guest(make_user):
    return make_user("guest")


@pytest.fixture
def song(storage, make_user, make_song):
    uploader = make_user("uploader", is_admin=True)
    return make_song(storage, uploader.id, title="Anthem")


def create_playlist(client, headers, name="Road Trip"):
    return client.post("/api/playlists", headers=headers, json={"name": name, "description": "Summer"})


def test_road_trip_playlist(client, headers_for, owner, guest, song):
    response = create_playlist(client, headers_for(owner))
    assert response.status_code == 201
    playlist = response.json()
    assert playlist["name"] == "Road Trip"
    assert playlist["userId"] == owner.id
    assert playlist["isCollaborative"] is False

    # Songs uploaded by someone else may still be added
    added = client.post(
        f"/api/playlists/{playlist['id']}/songs", headers=headers_for(owner), json={"songId": song.id}
    )
    assert added.status_code == 201
    assert added.json()["addedBy"] == owner.id

    songs = client.get(f"/api/playlists/{playlist['id']}/songs", headers=headers_for(owner)).json()
    assert [s["title"] for s in songs] == ["Anthem"]

    assert client.delete(f"/api/playlists/{playlist['id']}", headers=headers_for(guest)).status_code == 403
    assert client.delete(f"/api/playlists/{playlist['id']}", headers=headers_for(owner)).status_code == 204
    assert client.get(f"/api/playlists/{playlist['id']}", headers=headers_for(owner)).status_code == 404


def test_adding_twice_keeps_one_entry(client, storage, headers_for, owner, song):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    for _ in range(2):
        client.post(f"/api/playlists/{playlist_id}/songs", headers=headers_for(owner), json={"songId": song.id})
    assert len(storage.get_playlist_song_rows(playlist_id)) == 1


def test_add_unknown_song(client, headers_for, owner):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    response = client.post(f"/api/playlists/{playlist_id}/songs", headers=headers_for(owner), json={"songId": 999})
    assert response.status_code == 404


def test_strangers_cannot_read_or_edit(client, headers_for, owner, guest, song):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    headers = headers_for(guest)
    assert client.get(f"/api/playlists/{playlist_id}", headers=headers).status_code == 403
    assert client.patch(f"/api/playlists/{playlist_id}", headers=headers, json={"name": "Mine"}).status_code == 403
    assert client.post(
        f"/api/playlists/{playlist_id}/songs", headers=headers, json={"songId": song.id}
    ).status_code == 403


def test_update_playlist(client, headers_for, owner):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    response = client.patch(f"/api/playlists/{playlist_id}", headers=headers_for(owner), json={"name": "Night Drive"})
    assert response.json()["name"] == "Night Drive"
    assert response.json()["description"] == "Summer"


def test_remove_song(client, headers_for, owner, song):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    client.post(f"/api/playlists/{playlist_id}/songs", headers=headers_for(owner), json={"songId": song.id})
    url = f"/api/playlists/{playlist_id}/songs/{song.id}"
    assert client.delete(url, headers=headers_for(owner)).status_code == 204
    assert client.delete(url, headers=headers_for(owner)).status_code == 404


def test_collaborators_share_the_track_list(client, headers_for, owner, guest, song):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]

    # Only the owner manages collaborators
    assert client.post(
        f"/api/playlists/{playlist_id}/collaborators", headers=headers_for(guest), json={"userId": guest.id}
    ).status_code == 403

    shared = client.post(
        f"/api/playlists/{playlist_id}/collaborators", headers=headers_for(owner), json={"userId": guest.id}
    ).json()
    assert shared["isCollaborative"] is True
    assert shared["collaborators"] == [guest.id]

    mine = client.get("/api/playlists", headers=headers_for(guest)).json()
    assert [p["id"] for p in mine] == [playlist_id]

    added = client.post(f"/api/playlists/{playlist_id}/songs", headers=headers_for(guest), json={"songId": song.id})
    assert added.status_code == 201
    assert added.json()["addedBy"] == guest.id

    # Collaborators cannot rename or delete
    assert client.patch(f"/api/playlists/{playlist_id}", headers=headers_for(guest), json={"name": "x"}).status_code == 403
    assert client.delete(f"/api/playlists/{playlist_id}", headers=headers_for(guest)).status_code == 403

    removed = client.delete(f"/api/playlists/{playlist_id}/collaborators/{guest.id}", headers=headers_for(owner))
    assert removed.json()["collaborators"] == []
    assert client.get(f"/api/playlists/{playlist_id}", headers=headers_for(guest)).status_code == 403


def test_add_unknown_collaborator(client, headers_for, owner):
    playlist_id = create_playlist(client, headers_for(owner)).json()["id"]
    response = client.post(
        f"/api/playlists/{playlist_id}/collaborators", headers=headers_for(owner), json={"userId": 999}
    )
    assert response.status_code == 404


def test_blank_name_rejected(client, headers_for, owner):
    response = client.post("/api/playlists", headers=headers_for(owner), json={"name": ""})
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "name"
