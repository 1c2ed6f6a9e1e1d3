"""Shared application state: builds a storage session per request."""
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

import httpx
from fastapi.concurrency import run_in_threadpool

from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.credentials import BearerToken, get_bearer_token
from artist_organizer.core.errors import NotLinkedError
from artist_organizer.core.migration import LegacyMigrator
from artist_organizer.core.organizer import Organizer
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.transport import RateLimitedTransport, build_client


@dataclass
class StorageSession:
    """Everything one request needs to talk to Spotify on behalf of the linked user."""
    transport: RateLimitedTransport
    registry: PlaylistRegistry
    store: CategoryStore
    migrator: LegacyMigrator
    organizer: Organizer
    owner_id: str = ""

    async def resolve_owner(self) -> str:
        if not self.owner_id:
            self.owner_id = (await self.registry.current_user())["id"]
        return self.owner_id


class AppState:
    def __init__(
        self,
        token_supplier: Callable[[], Optional[BearerToken]] = get_bearer_token,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.token_supplier = token_supplier
        self.http_transport = http_transport

    def open_session(self) -> StorageSession:
        token = self.token_supplier()
        if token is None or token.is_expired:
            raise NotLinkedError("Spotify not linked. Use the Connect page to log in.")
        transport = RateLimitedTransport(build_client(self.http_transport), token.access_token)
        registry = PlaylistRegistry(transport)
        store = CategoryStore(registry)
        migrator = LegacyMigrator(registry, store)
        return StorageSession(
            transport=transport,
            registry=registry,
            store=store,
            migrator=migrator,
            organizer=Organizer(registry, store, migrator),
        )


_state = AppState()


def get_state() -> AppState:
    return _state


async def get_session() -> AsyncIterator[StorageSession]:
    """FastAPI dependency: open a session for the request, close its HTTP client afterwards.

    The token lookup goes through spotipy, which may refresh over the network,
    so it runs in the threadpool.
    """
    session = await run_in_threadpool(get_state().open_session)
    try:
        yield session
    finally:
        await session.transport.close()
