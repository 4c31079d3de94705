import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from sounddream.core.db import get_db
from sounddream.core.errors import DataAccessError, StoreTimeoutError
from sounddream.main import app
from sounddream.models.music import Artist, Track, TrackLike, User
from sounddream.services.recommendation_service import recommendation_service


@pytest.fixture
def client(db_session):
    db_session.add_all([Artist(id=1, name="Band", is_public=True), User(id=1, email="x@example.com"),
                        User(id=2, email="y@example.com"), User(id=3, email="z@example.com")])
    db_session.add_all([
        Track(id=1, title="Liked", artist_id=1, plays=100),
        Track(id=2, title="Neighbour", artist_id=1, plays=40, audio_url="/a/2.mp3"),
        Track(id=3, title="Orphan", artist_id=None, plays=70),
    ])
    db_session.flush()
    db_session.add_all([
        TrackLike(user_id=1, track_id=1),
        TrackLike(user_id=2, track_id=1),
        TrackLike(user_id=2, track_id=2),
        TrackLike(user_id=3, track_id=2),
    ])
    db_session.commit()

    app.dependency_overrides[get_db] = lambda: db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_recommend_personalised(client):
    r = client.get("/recommend/user/1")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert [item["id"] for item in body["data"]] == [2]
    first = body["data"][0]
    assert first["score"] == pytest.approx(3 * 1 / 2)
    assert first["audioUrl"] == "/a/2.mp3"
    assert "coverUrl" in first
    assert first["artist"] == {"id": 1, "name": "Band"}
    assert first["album"] is None


def test_recommend_fallback_for_new_listener(client):
    r = client.get("/recommend/user/999")
    assert r.status_code == 200
    data = r.json()["data"]
    assert [item["id"] for item in data] == [1, 3, 2]
    assert all(item["score"] == 0 for item in data)
    assert data[1]["artist"] == {"name": "Desconhecido"}


def test_data_access_error_maps_to_503(client, monkeypatch):
    def boom(*args, **kwargs):
        raise DataAccessError("down")

    monkeypatch.setattr(recommendation_service, "recommend", boom)
    r = client.get("/recommend/user/1")
    assert r.status_code == 503


def test_timeout_maps_to_504(client, monkeypatch):
    def slow(*args, **kwargs):
        raise StoreTimeoutError("late")

    monkeypatch.setattr(recommendation_service, "recommend", slow)
    r = client.get("/recommend/user/1?timeout=0.5")
    assert r.status_code == 504


def test_timeout_must_be_positive(client):
    r = client.get("/recommend/user/1?timeout=0")
    assert r.status_code == 422


def test_health(client):
    assert client.get("/health/ping").json() == {"status": "ok"}
    assert client.get("/health").json() == {"status": "ok", "database": "ok"}


def test_health_reports_database_down():
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("gone"))

    app.dependency_overrides[get_db] = lambda: BrokenSession()
    try:
        r = TestClient(app).get("/health")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 503
    assert r.json()["database"] == "down"


def test_empty_catalogue_returns_no_content(db_session):
    db_session.add(User(id=1, email="x@example.com"))
    db_session.commit()
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        r = TestClient(app).get("/recommend/user/1")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 204
    assert r.content == b""
