"""One-time conversion from the legacy format: one playlist per category, filled with tracks."""
import asyncio
import logging
from typing import Dict, List, Optional

from artist_organizer.config import CATEGORY_PREFIX, DELETE_DELAY_SEC, LEGACY_PREFIX, PAGE_DELAY_SEC
from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.models.categories import Categories, Migration
from artist_organizer.models.playlist import Playlist

logger = logging.getLogger(__name__)


def is_legacy_playlist(playlist: Playlist, owner_id: str) -> bool:
    return (
        playlist.owner_id == owner_id
        and playlist.name.startswith(LEGACY_PREFIX)
        and not playlist.name.startswith(CATEGORY_PREFIX)
    )


def primary_artist_ids(entries: List[dict]) -> List[str]:
    """Distinct first-artist ids across playlist entries, in first-seen order."""
    seen: Dict[str, None] = {}
    for entry in entries:
        artists = (entry.get("track") or {}).get("artists") or []
        if artists and artists[0].get("id"):
            seen.setdefault(artists[0]["id"], None)
    return list(seen)


class LegacyMigrator:
    def __init__(
        self,
        registry: PlaylistRegistry,
        store: CategoryStore,
        fetch_delay: float = PAGE_DELAY_SEC,
        delete_delay: float = DELETE_DELAY_SEC,
    ) -> None:
        self.registry = registry
        self.store = store
        self.fetch_delay = fetch_delay
        self.delete_delay = delete_delay

    async def detect(self, owner_id: str) -> Optional[Migration]:
        """Derive categories from legacy playlists without changing anything remotely.

        Track listings are fetched one playlist at a time to stay inside
        Spotify's informal rate budget.
        """
        legacy = [p for p in await self.registry.list_playlists() if is_legacy_playlist(p, owner_id)]
        if not legacy:
            return None

        categories: Categories = {}
        for n, playlist in enumerate(legacy):
            if n:
                await asyncio.sleep(self.fetch_delay)
            artist_ids = primary_artist_ids(await self.registry.list_tracks(playlist.id))
            if artist_ids:
                categories[playlist.name[len(LEGACY_PREFIX):]] = artist_ids
            else:
                logger.debug("Legacy playlist %r has no artists, skipping", playlist.name)

        migration = Migration(categories=categories, legacy_playlists=legacy)
        logger.info(
            "Found %d legacy playlist(s) holding %d artist(s) in %d categories",
            len(legacy), migration.artist_count, len(categories),
        )
        return migration

    async def commit(self, owner_id: str, migration: Migration) -> Dict[str, str]:
        """Save the derived categories, create their playlists, then remove the legacy ones.

        Legacy playlists are deleted only after the save returned, so a failure
        before that point leaves them in place for another attempt.
        Returns category name -> new category playlist id.
        """
        await self.store.save(owner_id, migration.categories)

        category_playlists: Dict[str, str] = {}
        for name in migration.categories:
            playlist = await self.registry.create_category_playlist(owner_id, name)
            category_playlists[name] = playlist.id

        for n, playlist in enumerate(migration.legacy_playlists):
            if n:
                await asyncio.sleep(self.delete_delay)
            await self.registry.delete(playlist.id)

        logger.info("Migration complete: %d categories, %d legacy playlists removed",
                    len(category_playlists), len(migration.legacy_playlists))
        return category_playlists
