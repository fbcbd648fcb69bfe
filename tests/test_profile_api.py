import fnmatch
import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from jamvault.config import Settings
from jamvault.main import create_app
from jamvault.schemas.user import UserCreate

PASSWORD = "Sup3r$ecret"
NEW_PASSWORD = "N3w$ecret!"


class FakeRedis:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = value

    def setex(self, key, expire, value):
        self.store[key] = value

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    def scan_iter(self, match="*"):
        return [key for key in list(self.store) if fnmatch.fnmatch(key, match)]


@pytest.fixture
def alice(make_user):
    return make_user("alice", email="alice@example.com")


def login(client, username, password):
    return client.post("/api/login", json={"username": username, "password": password})


def test_update_profile_fields(client, headers_for, alice):
    response = client.patch("/api/profile", headers=headers_for(alice), json={
        "bio": "Synth lover",
        "favoriteArtists": ["Kraftwerk"],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Synth lover"
    assert body["favoriteArtists"] == ["Kraftwerk"]
    assert body["email"] == "alice@example.com"


def test_profile_email_must_be_unique(client, make_user, headers_for, alice):
    make_user("bob", email="bob@example.com")
    response = client.patch("/api/profile", headers=headers_for(alice), json={"email": "bob@example.com"})
    assert response.status_code == 400


def test_password_change_requires_current_password(client, headers_for, alice):
    headers = headers_for(alice)
    missing = client.patch("/api/profile", headers=headers, json={"newPassword": NEW_PASSWORD})
    assert missing.status_code == 400

    wrong = client.patch("/api/profile", headers=headers, json={
        "currentPassword": "Wr0ng$pass", "newPassword": NEW_PASSWORD,
    })
    assert wrong.status_code == 400
    assert login(client, "alice", PASSWORD).status_code == 200

    ok = client.patch("/api/profile", headers=headers, json={
        "currentPassword": PASSWORD, "newPassword": NEW_PASSWORD,
    })
    assert ok.status_code == 200
    assert login(client, "alice", PASSWORD).status_code == 401
    assert login(client, "alice", NEW_PASSWORD).status_code == 200


def test_password_reset_flow(client, app, alice):
    response = client.post("/api/password-reset/request", json={"email": "alice@example.com"})
    assert response.status_code == 200
    assert "token" not in response.json()
    message = app.state.reset_notifier.outbox[-1]
    assert (message.user_id, message.email) == (alice.id, "alice@example.com")
    token = message.token

    reset = client.post("/api/password-reset/reset", json={"token": token, "newPassword": NEW_PASSWORD})
    assert reset.status_code == 200
    assert login(client, "alice", NEW_PASSWORD).status_code == 200

    # Tokens are single use
    again = client.post("/api/password-reset/reset", json={"token": token, "newPassword": "An0ther$pass"})
    assert again.status_code == 400


def test_password_reset_request_does_not_leak_accounts(client, app, alice):
    known = client.post("/api/password-reset/request", json={"username": "alice"})
    unknown = client.post("/api/password-reset/request", json={"username": "ghost"})
    assert known.json() == unknown.json()
    assert [m.username for m in app.state.reset_notifier.outbox] == ["alice"]
    assert client.post("/api/password-reset/request", json={}).status_code == 400


def test_password_reset_enforces_policy(client, storage, alice):
    token = storage.create_password_reset_token(alice.id)
    response = client.post("/api/password-reset/reset", json={"token": token, "newPassword": "weak"})
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "newPassword"


def test_profile_image_upload(client, app_settings, headers_for, alice):
    response = client.post(
        "/api/profile/image",
        headers=headers_for(alice),
        files={"file": ("Me Photo.PNG", b"\x89PNG data", "image/png")},
    )
    assert response.status_code == 200
    url = response.json()["profileImage"]
    assert url.startswith("/uploads/images/me_photo-")
    assert url.endswith(".png")
    assert client.get(url).content == b"\x89PNG data"


def test_stats_are_cached_until_next_listen(client, app, storage, make_user, make_song, headers_for, alice):
    app.state.stats_cache.redis_client = FakeRedis()
    song = make_song(storage, make_user("admin", is_admin=True).id)
    headers = headers_for(alice)

    client.post(f"/api/songs/{song.id}/play", headers=headers, json={"duration": 30})
    assert client.get("/api/user/stats", headers=headers).json()["totalPlays"] == 1
    assert app.state.stats_cache.key(alice.id) in app.state.stats_cache.redis_client.store

    # A listen recorded behind the API's back is not visible while cached
    storage.record_listen(alice.id, song.id, 30)
    assert client.get("/api/user/stats", headers=headers).json()["totalPlays"] == 1

    client.post(f"/api/songs/{song.id}/play", headers=headers, json={"duration": 30})
    stats = client.get("/api/user/stats", headers=headers).json()
    assert stats["totalPlays"] == 3
    assert stats["totalTime"] == 90


def test_rejected_profile_update_keeps_old_password(client, make_user, headers_for, alice):
    make_user("bob", email="bob@example.com")
    response = client.patch("/api/profile", headers=headers_for(alice), json={
        "email": "bob@example.com", "currentPassword": PASSWORD, "newPassword": NEW_PASSWORD,
    })
    assert response.status_code == 400
    assert login(client, "alice", PASSWORD).status_code == 200
    assert login(client, "alice", NEW_PASSWORD).status_code == 401


def test_reset_token_lifetime_follows_settings(tmp_path):
    app = create_app(Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"), SEED_DEFAULT_USERS=False, PASSWORD_RESET_EXPIRE_MINUTES=5,
    ))
    storage = app.state.storage
    user = storage.create_user(UserCreate(username="carol", password=PASSWORD, email="carol@example.com"))
    before = datetime.utcnow()
    storage.create_password_reset_token(user.id)
    remaining = storage.get_user(user.id).reset_token_expiry - before
    assert timedelta(minutes=4) < remaining <= timedelta(minutes=5, seconds=5)


def test_stats_cache_is_not_shared_between_app_instances(tmp_path, make_song, headers_for):
    shared = FakeRedis()
    apps = []
    for run in ("first", "second"):
        application = create_app(Settings(UPLOAD_DIR=str(tmp_path / run), SEED_DEFAULT_USERS=False))
        application.state.stats_cache.redis_client = shared
        apps.append(application)

    first_store = apps[0].state.storage
    admin = first_store.create_user(UserCreate(username="admin", password=PASSWORD), is_admin=True)
    listener = first_store.create_user(UserCreate(username="alice", password=PASSWORD))
    song = make_song(first_store, admin.id)
    with TestClient(apps[0]) as first:
        first.post(f"/api/songs/{song.id}/play", headers=headers_for(listener), json={"duration": 30})
        assert first.get("/api/user/stats", headers=headers_for(listener)).json()["totalPlays"] == 1

    # Same user id and username in a fresh process with no history
    second_store = apps[1].state.storage
    second_store.create_user(UserCreate(username="admin", password=PASSWORD), is_admin=True)
    newcomer = second_store.create_user(UserCreate(username="alice", password=PASSWORD))
    assert newcomer.id == listener.id
    with TestClient(apps[1]) as second:
        assert second.get("/api/user/stats", headers=headers_for(newcomer)).json()["totalPlays"] == 0


def test_deleting_a_song_drops_cached_stats(client, app, storage, make_user, make_song, headers_for, alice):
    app.state.stats_cache.redis_client = FakeRedis()
    admin = make_user("admin", is_admin=True)
    song = make_song(storage, admin.id, title="Gone Soon")
    headers = headers_for(alice)

    client.post(f"/api/songs/{song.id}/play", headers=headers, json={"duration": 30})
    assert [s["title"] for s in client.get("/api/user/stats", headers=headers).json()["topSongs"]] == ["Gone Soon"]

    assert client.delete(f"/api/songs/{song.id}", headers=headers_for(admin)).status_code == 204
    assert app.state.stats_cache.key(alice.id) not in app.state.stats_cache.redis_client.store
    assert client.get("/api/user/stats", headers=headers).json()["topSongs"] == []
