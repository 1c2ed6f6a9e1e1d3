"""Spotify playlist endpoints and prefix-based classification of the user's playlists."""
import logging
from typing import Dict, List

from artist_organizer.config import CATEGORY_PREFIX, PAGE_DELAY_SEC
from artist_organizer.core.pagination import TOP_LEVEL, collect_pages, nested
from artist_organizer.core.transport import RateLimitedTransport, ensure_ok
from artist_organizer.models.playlist import Playlist

logger = logging.getLogger(__name__)

# Statuses meaning the playlist is already gone for this user
_ABSENT_STATUSES = (403, 404)


def category_description(category: str) -> str:
    return f'Artists categorized as "{category}" - managed by Artist Organizer'


class PlaylistRegistry:
    """Lists, creates, updates and deletes the playlists the organizer owns."""

    def __init__(self, transport: RateLimitedTransport, page_delay: float = PAGE_DELAY_SEC) -> None:
        self.transport = transport
        self.page_delay = page_delay

    # ------------------------------------------------------------------
    # User & artists
    # ------------------------------------------------------------------

    async def current_user(self) -> dict:
        response = ensure_ok(await self.transport.call("GET", "/me"))
        return response.json()

    async def followed_artists(self) -> List[dict]:
        """All followed artists; this endpoint nests its paging object under "artists"."""
        return await collect_pages(
            self.transport,
            "/me/following?type=artist&limit=50",
            shape=nested("artists"),
            delay=self.page_delay,
        )

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_playlists(self) -> List[Playlist]:
        items = await collect_pages(self.transport, "/me/playlists?limit=50", shape=TOP_LEVEL, delay=self.page_delay)
        return [Playlist.from_api(item) for item in items if item and item.get("id")]

    async def list_by_prefix(self, prefix: str, owner_id: str) -> List[Playlist]:
        return filter_by_prefix(await self.list_playlists(), prefix, owner_id)

    async def get_details(self, playlist_id: str) -> Playlist:
        """Full playlist; listings may truncate the description, this does not."""
        response = ensure_ok(
            await self.transport.call(
                "GET",
                f"/playlists/{playlist_id}",
                params={"fields": "id,name,description,owner(id)"},
            )
        )
        return Playlist.from_api(response.json())

    async def list_tracks(self, playlist_id: str) -> List[dict]:
        return await collect_pages(
            self.transport,
            f"/playlists/{playlist_id}/tracks?limit=100",
            shape=TOP_LEVEL,
            delay=self.page_delay,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, owner_id: str, name: str, description: str, public: bool = False) -> Playlist:
        response = ensure_ok(
            await self.transport.call(
                "POST",
                f"/users/{owner_id}/playlists",
                json={"name": name, "description": description, "public": public},
            )
        )
        playlist = Playlist.from_api(response.json())
        logger.debug("Created playlist %r (%s)", name, playlist.id)
        return playlist

    async def update_description(self, playlist_id: str, description: str) -> None:
        ensure_ok(await self.transport.call("PUT", f"/playlists/{playlist_id}", json={"description": description}))

    async def delete(self, playlist_id: str) -> bool:
        """Unfollow (Spotify's delete). Returns False if it was already gone."""
        response = await self.transport.call("DELETE", f"/playlists/{playlist_id}/followers")
        if response.status_code in _ABSENT_STATUSES:
            logger.info("Playlist %s already absent (%d), nothing to delete", playlist_id, response.status_code)
            return False
        ensure_ok(response)
        return True

    # ------------------------------------------------------------------
    # Category playlists (visual markers, always empty)
    # ------------------------------------------------------------------

    async def create_category_playlist(self, owner_id: str, category: str) -> Playlist:
        return await self.create(owner_id, f"{CATEGORY_PREFIX}{category}", category_description(category), public=False)

    async def delete_category_playlist(self, playlist_id: str) -> None:
        if not playlist_id:
            return
        await self.delete(playlist_id)

    async def get_category_playlists(self, owner_id: str) -> Dict[str, str]:
        """Category name -> playlist id for the owner's category playlists."""
        playlists = await self.list_by_prefix(CATEGORY_PREFIX, owner_id)
        return {p.name[len(CATEGORY_PREFIX):]: p.id for p in playlists}


def filter_by_prefix(playlists: List[Playlist], prefix: str, owner_id: str) -> List[Playlist]:
    return [p for p in playlists if p.name.startswith(prefix) and p.owner_id == owner_id]
