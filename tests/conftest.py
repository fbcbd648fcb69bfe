import pytest
from fastapi.testclient import TestClient
from jamvault.config import Settings
from jamvault.core.security import create_access_token
from jamvault.main import create_app
from jamvault.schemas.music import SongCreate
from jamvault.schemas.user import UserCreate

PASSWORD = "Sup3r$ecret"


@pytest.fixture
def app_settings(tmp_path):
    return Settings(UPLOAD_DIR=str(tmp_path / "uploads"), SEED_DEFAULT_USERS=False)


@pytest.fixture
def app(app_settings):
    application = create_app(app_settings)
    # Never let tests share state through a real Redis server
    application.state.stats_cache.redis_client = None
    return application


@pytest.fixture
def storage(app):
    return app.state.storage


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(storage):
    def _make_user(username, is_admin=False, password=PASSWORD, **fields):
        return storage.create_user(
            UserCreate(username=username, password=password, **fields), is_admin=is_admin
        )
    return _make_user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.username})}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "track.mp3"
    path.write_bytes(bytes(range(256)) * 3 + bytes(232))  # 1000 bytes
    return path


@pytest.fixture
def make_song(tmp_path):
    counter = {"n": 0}

    def _make_song(store, user_id, title="Song", artist="Artist", genre=None, **fields):
        counter["n"] += 1
        path = tmp_path / f"song-{counter['n']}.mp3"
        path.write_bytes(b"\x00" * 100)
        data = SongCreate(title=title, artist=artist, duration=fields.pop("duration", 180), genre=genre, **fields)
        return store.create_song(user_id, data, str(path))
    return _make_song
