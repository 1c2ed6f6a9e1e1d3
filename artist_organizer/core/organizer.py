"""Category bookkeeping on top of the store: followed-artist sync and category edits."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from artist_organizer.config import DEFAULT_CATEGORY, DELETE_DELAY_SEC
from artist_organizer.core.category_store import CategoryStore
from artist_organizer.core.errors import StoreCorruptedError
from artist_organizer.core.migration import LegacyMigrator
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.reset import reset_all
from artist_organizer.models.categories import (
    Categories,
    Corrupted,
    Loaded,
    Migration,
    ResetCounts,
    categories_or_empty,
)

logger = logging.getLogger(__name__)


def reconcile(categories: Categories, followed_ids: Iterable[str]) -> Tuple[Categories, bool]:
    """Match categories to the followed artists.

    New follows land in DEFAULT_CATEGORY, unfollowed artists are dropped, and
    DEFAULT_CATEGORY always exists. Returns (categories, changed).
    """
    followed = list(dict.fromkeys(followed_ids))
    followed_set = set(followed)
    result: Categories = {name: list(ids) for name, ids in categories.items()}
    changed = False

    if DEFAULT_CATEGORY not in result:
        result[DEFAULT_CATEGORY] = []

    categorized = {artist_id for ids in result.values() for artist_id in ids}
    new_ids = [artist_id for artist_id in followed if artist_id not in categorized]
    if new_ids:
        result[DEFAULT_CATEGORY].extend(new_ids)
        changed = True

    for name, ids in result.items():
        kept = [artist_id for artist_id in ids if artist_id in followed_set]
        if len(kept) != len(ids):
            result[name] = kept
            changed = True

    return result, changed


def add_category(categories: Categories, name: str) -> Tuple[Categories, str]:
    name = name.strip()
    if not name:
        raise ValueError("Category name must not be empty")
    if name in categories:
        raise ValueError(f"Category {name!r} already exists")
    return {**categories, name: []}, name


def remove_category(categories: Categories, name: str) -> Categories:
    """Drop a category, moving its artists to DEFAULT_CATEGORY."""
    if name == DEFAULT_CATEGORY:
        raise ValueError(f"{DEFAULT_CATEGORY!r} cannot be deleted")
    if name not in categories:
        raise KeyError(name)
    result = {k: list(v) for k, v in categories.items() if k != name}
    result[DEFAULT_CATEGORY] = result.get(DEFAULT_CATEGORY, []) + list(categories[name])
    return result


def move_artist(categories: Categories, artist_id: str, source: str, target: str) -> Categories:
    if source == target:
        return categories
    if source not in categories:
        raise KeyError(source)
    if target not in categories:
        raise KeyError(target)
    if artist_id not in categories[source]:
        raise ValueError(f"Artist {artist_id!r} is not in category {source!r}")
    result = {k: list(v) for k, v in categories.items()}
    result[source] = [i for i in result[source] if i != artist_id]
    if artist_id not in result[target]:
        result[target].append(artist_id)
    return result


@dataclass
class OrganizerView:
    """What the consumer renders after a start, load, migration or edit."""
    categories: Categories = field(default_factory=dict)
    category_playlists: Dict[str, str] = field(default_factory=dict)
    followed_artists: List[dict] = field(default_factory=list)
    corrupted: bool = False
    recovered: bool = False
    migration: Optional[Migration] = None


class Organizer:
    def __init__(
        self,
        registry: PlaylistRegistry,
        store: CategoryStore,
        migrator: LegacyMigrator,
        delete_delay: float = DELETE_DELAY_SEC,
    ) -> None:
        self.registry = registry
        self.store = store
        self.migrator = migrator
        self.delete_delay = delete_delay

    async def start(self, owner_id: str) -> OrganizerView:
        """Offer a legacy migration if one is pending, otherwise load."""
        migration = await self.migrator.detect(owner_id)
        if migration is not None:
            return OrganizerView(migration=migration)
        return await self.load(owner_id)

    async def load(self, owner_id: str) -> OrganizerView:
        result = await self.store.load(owner_id)
        corrupted = isinstance(result, Corrupted)
        categories = categories_or_empty(result)
        if corrupted:
            logger.warning("Data issue detected for %s, showing empty categories until reset", owner_id)

        followed = await self.registry.followed_artists()
        playlists = await self.registry.get_category_playlists(owner_id)

        categories, changed = reconcile(categories, [a["id"] for a in followed if a and a.get("id")])
        # Corrupted slots are only ever replaced by an explicit reset.
        if changed and not corrupted:
            await self.store.save(owner_id, categories)

        if DEFAULT_CATEGORY not in playlists:
            playlist = await self.registry.create_category_playlist(owner_id, DEFAULT_CATEGORY)
            playlists[DEFAULT_CATEGORY] = playlist.id

        return OrganizerView(
            categories=categories,
            category_playlists=playlists,
            followed_artists=followed,
            corrupted=corrupted,
            recovered=isinstance(result, Loaded) and result.recovered,
        )

    async def resolve_migration(self, owner_id: str, accept: bool) -> OrganizerView:
        """Commit a pending migration if accepted, then load normally."""
        if accept:
            migration = await self.migrator.detect(owner_id)
            if migration is not None:
                await self.migrator.commit(owner_id, migration)
        return await self.load(owner_id)

    async def _current(self, owner_id: str) -> Categories:
        result = await self.store.load(owner_id)
        if isinstance(result, Corrupted):
            raise StoreCorruptedError(
                f"Stored categories are unreadable ({result.slot_count} slots); reset before editing"
            )
        categories = dict(result.categories)
        categories.setdefault(DEFAULT_CATEGORY, [])
        return categories

    async def create_category(self, owner_id: str, name: str) -> Categories:
        categories, name = add_category(await self._current(owner_id), name)
        await self.registry.create_category_playlist(owner_id, name)
        await self.store.save(owner_id, categories)
        return categories

    async def delete_category(self, owner_id: str, name: str) -> Categories:
        categories = remove_category(await self._current(owner_id), name)
        await self.store.save(owner_id, categories)
        playlist_id = (await self.registry.get_category_playlists(owner_id)).get(name)
        await self.registry.delete_category_playlist(playlist_id or "")
        return categories

    async def move(self, owner_id: str, artist_id: str, source: str, target: str) -> Categories:
        current = await self._current(owner_id)
        categories = move_artist(current, artist_id, source, target)
        if categories is not current:
            await self.store.save(owner_id, categories)
        return categories

    async def reset(self, owner_id: str) -> Tuple[ResetCounts, OrganizerView]:
        counts = await reset_all(self.registry, owner_id, delay=self.delete_delay)
        logger.info("Reset removed %d data and %d category playlists", counts.deleted_data, counts.deleted_categories)
        return counts, await self.load(owner_id)
