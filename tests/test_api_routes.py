import asyncio

import pytest
from fastapi.testclient import TestClient

from artist_organizer.api.app import app
from artist_organizer.api.state import AppState, StorageSession, get_session
from artist_organizer.config import CATEGORY_PREFIX, DATA_PLAYLIST_PREFIX, LEGACY_PREFIX
from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.credentials import BearerToken
from artist_organizer.core.migration import LegacyMigrator
from artist_organizer.core.organizer import Organizer
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.transport import RateLimitedTransport, build_client
from tests.support.fake_spotify import track_entry


async def _no_sleep(seconds):
    return None


@pytest.fixture
def client(fake):
    async def session_override():
        transport = RateLimitedTransport(build_client(fake.transport()), "test-token", sleep=_no_sleep)
        registry = PlaylistRegistry(transport, page_delay=0)
        store = CategoryStore(registry, write_delay=0, detail_delay=0)
        migrator = LegacyMigrator(registry, store, fetch_delay=0, delete_delay=0)
        session = StorageSession(
            transport=transport,
            registry=registry,
            store=store,
            migrator=migrator,
            organizer=Organizer(registry, store, migrator, delete_delay=0),
        )
        try:
            yield session
        finally:
            await transport.close()

    app.dependency_overrides[get_session] = session_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_get_categories_first_use(fake, client):
    fake.follow("a1", "a2")

    r = client.get("/api/categories")

    assert r.status_code == 200
    body = r.json()
    assert body["categories"] == {"Uncategorized": ["a1", "a2"]}
    assert body["corrupted"] is False
    assert body["migration"] is None
    assert [a["id"] for a in body["artists"]] == ["a1", "a2"]


def test_get_categories_flags_corruption(fake, client):
    fake.add_playlist(DATA_PLAYLIST_PREFIX, description="not json at all {")

    body = client.get("/api/categories").json()

    assert body["corrupted"] is True


def test_create_move_delete_category(fake, client):
    fake.follow("a1")
    client.get("/api/categories")

    r = client.post("/api/categories", json={"name": "Rock"})
    assert r.status_code == 200
    assert r.json()["categories"] == {"Uncategorized": ["a1"], "Rock": []}

    r = client.post("/api/categories/move", json={"artist_id": "a1", "source": "Uncategorized", "target": "Rock"})
    assert r.json()["categories"] == {"Uncategorized": [], "Rock": ["a1"]}

    r = client.delete("/api/categories/Rock")
    assert r.status_code == 200
    assert r.json()["categories"] == {"Uncategorized": ["a1"]}


def test_category_errors_map_to_http_statuses(fake, client):
    client.get("/api/categories")

    assert client.post("/api/categories", json={"name": "Uncategorized"}).status_code == 400
    assert client.delete("/api/categories/Uncategorized").status_code == 400
    assert client.delete("/api/categories/Missing").status_code == 404
    r = client.post("/api/categories/move", json={"artist_id": "a1", "source": "Nope", "target": "Uncategorized"})
    assert r.status_code == 404
    r = client.post("/api/categories/move", json={"artist_id": "a1", "source": "Uncategorized", "target": "Uncategorized"})
    assert r.status_code == 200


def test_edit_refused_when_store_corrupted(fake, client):
    fake.add_playlist(DATA_PLAYLIST_PREFIX, description="{{{")

    r = client.post("/api/categories", json={"name": "Rock"})

    assert r.status_code == 409


def test_migration_offer_and_accept(fake, client):
    fake.add_playlist(f"{LEGACY_PREFIX}Rock", tracks=[track_entry("a1")])
    fake.follow("a1")

    offer = client.get("/api/storage/migration").json()["migration"]
    assert offer["categories"] == {"Rock": ["a1"]}
    assert offer["artist_count"] == 1
    assert client.get("/api/categories").json()["migration"] == offer

    body = client.post("/api/storage/migration", json={"accept": True}).json()

    assert body["categories"] == {"Rock": ["a1"], "Uncategorized": []}
    assert client.get("/api/storage/migration").json()["migration"] is None


def test_reset_requires_confirmation(fake, client):
    fake.add_playlist(f"{CATEGORY_PREFIX}Rock")

    assert client.post("/api/storage/reset", json={}).status_code == 400
    assert f"{CATEGORY_PREFIX}Rock" in fake.names()

    body = client.post("/api/storage/reset", json={"confirm": True}).json()

    assert body["deleted_categories"] == 1
    assert body["deleted_data"] == 0
    assert body["categories"] == {"Uncategorized": []}


def test_throttling_maps_to_429(fake, client):
    fake.throttle_next = 100
    fake.retry_after = "7"

    r = client.get("/api/categories")

    assert r.status_code == 429
    assert r.headers["Retry-After"] == "7"


def test_remote_error_maps_to_502(fake, client):
    fake.fail_status = 500

    r = client.get("/api/categories")

    assert r.status_code == 502
    assert r.json()["spotify_status"] == 500


def test_unlinked_session_returns_503(monkeypatch):
    import artist_organizer.api.state as state_module

    monkeypatch.setattr(state_module, "_state", AppState(token_supplier=lambda: None))
    with TestClient(app) as test_client:
        r = test_client.get("/api/categories")

    assert r.status_code == 503


def test_expired_token_returns_503(monkeypatch):
    import artist_organizer.api.state as state_module

    expired = BearerToken(access_token="old", expires_at=0)
    monkeypatch.setattr(state_module, "_state", AppState(token_supplier=lambda: expired))
    with TestClient(app) as test_client:
        r = test_client.get("/api/categories")

    assert r.status_code == 503


def test_move_of_artist_outside_source_is_rejected(fake, client):
    fake.follow("a1")
    client.get("/api/categories")
    client.post("/api/categories", json={"name": "Rock"})
    client.post("/api/categories", json={"name": "Jazz"})

    r = client.post("/api/categories/move", json={"artist_id": "a1", "source": "Rock", "target": "Jazz"})

    assert r.status_code == 400
    assert client.get("/api/categories").json()["categories"] == {"Uncategorized": ["a1"], "Rock": [], "Jazz": []}


def test_default_category_create_on_empty_store_is_rejected(fake, client):
    client.get("/api/categories")

    assert client.post("/api/categories", json={"name": "Uncategorized"}).status_code == 400
    assert fake.names() == [f"{CATEGORY_PREFIX}Uncategorized"]


def test_token_lookup_runs_in_threadpool(monkeypatch):
    import artist_organizer.api.state as state_module

    seen = []

    def supplier():
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            seen.append("threadpool")
        else:
            seen.append("event loop")
        return None

    monkeypatch.setattr(state_module, "_state", AppState(token_supplier=supplier))
    with TestClient(app) as test_client:
        assert test_client.get("/api/categories").status_code == 503

    assert seen == ["threadpool"]
