"""Delete every playlist the organizer owns. Irreversible; callers confirm first."""
import asyncio
import logging

from artist_organizer.config import CATEGORY_PREFIX, DATA_PLAYLIST_PREFIX, DELETE_DELAY_SEC
from artist_organizer.core.playlists import PlaylistRegistry, filter_by_prefix
from artist_organizer.models.categories import ResetCounts

logger = logging.getLogger(__name__)


async def reset_all(registry: PlaylistRegistry, owner_id: str, delay: float = DELETE_DELAY_SEC) -> ResetCounts:
    """Remove data playlists, then category playlists, for owner_id."""
    playlists = await registry.list_playlists()
    data = filter_by_prefix(playlists, DATA_PLAYLIST_PREFIX, owner_id)
    categories = filter_by_prefix(playlists, CATEGORY_PREFIX, owner_id)

    for n, playlist in enumerate(data + categories):
        if n:
            await asyncio.sleep(delay)
        logger.info("Deleting playlist %r", playlist.name)
        await registry.delete(playlist.id)

    return ResetCounts(deleted_data=len(data), deleted_categories=len(categories))
