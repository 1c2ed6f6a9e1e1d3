"""Core services: transport, pagination, playlist registry, category store, migration, reset."""
from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.migration import LegacyMigrator
from artist_organizer.core.organizer import Organizer
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.transport import RateLimitedTransport

__all__ = ["CategoryStore", "LegacyMigrator", "Organizer", "PlaylistRegistry", "RateLimitedTransport"]
