import io
import os
import tempfile

# configure the app before anything imports rasclat
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEARCH_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BACKEND_ADMIN_USER"] = "admin"
os.environ["BACKEND_ADMIN_PASSWORD"] = "rasclat-test"
os.environ["REINDEX_ENABLED"] = "0"
os.environ["UPLOAD_TMP_DIR"] = os.path.join(tempfile.gettempdir(), "rasclat-test-uploads")
os.environ.pop("SENTRY_DSN", None)

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from rasclat.core.cache import recordings_cache
from rasclat.core.db import Base, SessionLocal, engine
from rasclat.core.tokens import get_token_store
from rasclat.main import app
from rasclat.services.search import reset_indexes
from rasclat.services.storage import reset_blob_store
from rasclat.services.users import ensure_admin


@pytest.fixture(autouse=True)
def fresh_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_admin(db)
    finally:
        db.close()
    recordings_cache().clear()
    reset_indexes()
    reset_blob_store()
    get_token_store().clear()
    yield
    get_token_store().clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def token(client):
    r = client.post("/auth/login", json={"username": "admin", "password": "rasclat-test"})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": f"Bearer {token}"}


def make_image(width=1600, height=900, fmt="PNG", mode="RGB") -> bytes:
    img = Image.new(mode, (width, height), color=(200, 30, 30) if mode == "RGB" else None)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png():
    return make_image()


@pytest.fixture
def make_artist(client, auth):
    def _make(title="Kerosene Kid"):
        r = client.post("/artists", json={"title": title}, headers=auth)
        assert r.json()["success"], r.json()
        return r.json()["artist"]
    return _make


@pytest.fixture
def make_genre(client, auth):
    def _make(title="Dub", color="#00FF00"):
        r = client.post("/genres", json={"title": title, "color": color}, headers=auth)
        assert r.json()["success"], r.json()
        return r.json()["genre"]
    return _make


@pytest.fixture
def make_show(client, auth):
    def _make(title="Night Shift", description="Late night selections"):
        r = client.post("/shows", json={"title": title, "description": description}, headers=auth)
        assert r.json()["success"], r.json()
        return r.json()["show"]
    return _make


@pytest.fixture
def make_recording(client, auth, png, make_artist, make_genre, make_show):
    def _make(title="Night Shift #1", time_start="2024-05-01T20:00:00Z", show=None, artists=None, genres=None):
        show = show or make_show()
        artists = artists or [make_artist()]
        genres = genres or [make_genre()]
        data = {
            "title": title,
            "show": show["_id"],
            "artists": [a["_id"] for a in artists],
            "genres": [g["_id"] for g in genres],
            "timeStart": time_start,
            "timeEnd": "2024-05-01T22:00:00Z",
        }
        files = {
            "audio": ("Night Shift 01.mp3", b"ID3\x03\x00fake-mp3-data", "audio/mpeg"),
            "image": ("cover.png", png, "image/png"),
        }
        r = client.post("/recordings", data=data, files=files, headers=auth)
        assert r.json()["success"], r.json()
        return r.json()["recording"]
    return _make
