import pytest

from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.migration import LegacyMigrator
from artist_organizer.core.organizer import Organizer
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.transport import RateLimitedTransport, build_client
from tests.support.fake_spotify import FakeSpotify


class SleepRecorder:
    """Async sleep replacement that records requested delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def fake():
    return FakeSpotify(user_id="owner", page_size=2)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
async def transport(fake, sleeper):
    t = RateLimitedTransport(build_client(fake.transport()), "test-token", sleep=sleeper)
    yield t
    await t.close()


@pytest.fixture
def registry(transport):
    return PlaylistRegistry(transport, page_delay=0)


@pytest.fixture
def store(registry):
    # Small capacity so modest documents span several slots
    return CategoryStore(registry, capacity=20, write_delay=0, detail_delay=0)


@pytest.fixture
def migrator(registry, store):
    return LegacyMigrator(registry, store, fetch_delay=0, delete_delay=0)


@pytest.fixture
def organizer(registry, store, migrator):
    return Organizer(registry, store, migrator, delete_delay=0)
