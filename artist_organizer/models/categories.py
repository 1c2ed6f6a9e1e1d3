"""Category mapping, load results, migration offers and reset counts."""
from dataclasses import dataclass, field
from typing import Dict, List, Union

from artist_organizer.models.playlist import Playlist

# Category name -> artist ids. Order inside a category carries no meaning.
Categories = Dict[str, List[str]]


@dataclass
class Loaded:
    """Stored document decoded; recovered=True if only a leading object survived."""
    categories: Categories
    recovered: bool = False


@dataclass
class Corrupted:
    """Stored document could not be decoded, even after recovery."""
    text_length: int
    slot_count: int


LoadResult = Union[Loaded, Corrupted]


def categories_or_empty(result: LoadResult) -> Categories:
    """Categories of a Loaded result, or an empty mapping for Corrupted."""
    if isinstance(result, Loaded):
        return result.categories
    return {}


@dataclass
class Migration:
    """Categories derived from legacy playlists, plus the playlists to remove once saved."""
    categories: Categories
    legacy_playlists: List[Playlist] = field(default_factory=list)

    @property
    def artist_count(self) -> int:
        return sum(len(ids) for ids in self.categories.values())


@dataclass
class ResetCounts:
    deleted_data: int
    deleted_categories: int
