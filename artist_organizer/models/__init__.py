"""Data models for playlists, category mappings and store results."""
from artist_organizer.models.categories import (
    Categories,
    Corrupted,
    Loaded,
    LoadResult,
    Migration,
    ResetCounts,
    categories_or_empty,
)
from artist_organizer.models.playlist import Playlist

__all__ = [
    "Categories",
    "Corrupted",
    "Loaded",
    "LoadResult",
    "Migration",
    "Playlist",
    "ResetCounts",
    "categories_or_empty",
]
