"""Persist the category mapping as JSON split across hidden playlists' descriptions.

Spotify offers no key-value storage, so the document is chunked into
DESCRIPTION_MAX_LENGTH-sized fragments, one per "data slot" playlist.
There is no atomicity across slots: a save interrupted halfway leaves a mix
of old and new fragments until the next successful save, and load reports
that state as Corrupted (or a recovered prefix) instead of raising.
"""
import asyncio
import json
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from artist_organizer.config import (
    DATA_PLAYLIST_PREFIX,
    DESCRIPTION_MAX_LENGTH,
    DETAIL_DELAY_SEC,
    WRITE_DELAY_SEC,
)
from artist_organizer.core.playlists import PlaylistRegistry
from artist_organizer.core.slots import (
    chunk_text,
    extract_first_object,
    parse_slot_index,
    slot_name,
    unescape_entities,
)
from artist_organizer.models.categories import Categories, Corrupted, Loaded, LoadResult
from artist_organizer.models.playlist import Playlist

logger = logging.getLogger(__name__)


def encode_categories(categories: Dict[str, Iterable[str]]) -> str:
    """Compact JSON; sets are sorted so the same mapping always encodes the same way."""
    document = {
        name: sorted(ids) if isinstance(ids, (set, frozenset)) else list(ids)
        for name, ids in categories.items()
    }
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def _as_categories(document) -> Optional[Categories]:
    if not isinstance(document, dict):
        return None
    categories: Categories = {}
    for name, ids in document.items():
        if not isinstance(ids, list):
            return None
        categories[name] = [str(i) for i in ids]
    return categories


def decode_categories(text: str, slot_count: int = 0) -> LoadResult:
    """Parse a reassembled document, falling back to its first balanced object."""
    text = unescape_entities(text)
    logger.debug("Decoding %d chars from %d slot(s): %s", len(text), slot_count, text[:200])
    if not text.strip():
        return Loaded({})

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Stored categories are not valid JSON (%s), attempting recovery", e)
    else:
        categories = _as_categories(parsed)
        if categories is not None:
            return Loaded(categories)
        logger.error("Stored document is not a category mapping")
        return Corrupted(text_length=len(text), slot_count=slot_count)

    span = extract_first_object(text)
    if span is not None:
        try:
            categories = _as_categories(json.loads(span))
        except json.JSONDecodeError:
            categories = None
        if categories is not None:
            logger.info(
                "Recovered %d categories from the first %d of %d chars", len(categories), len(span), len(text)
            )
            return Loaded(categories, recovered=True)

    logger.error("Category data corrupted beyond recovery (%d chars, %d slots)", len(text), slot_count)
    return Corrupted(text_length=len(text), slot_count=slot_count)


class CategoryStore:
    """Load and save the category mapping through data-slot playlists."""

    def __init__(
        self,
        registry: PlaylistRegistry,
        base_name: str = DATA_PLAYLIST_PREFIX,
        capacity: int = DESCRIPTION_MAX_LENGTH,
        write_delay: float = WRITE_DELAY_SEC,
        detail_delay: float = DETAIL_DELAY_SEC,
    ) -> None:
        self.registry = registry
        self.base_name = base_name
        self.capacity = capacity
        self.write_delay = write_delay
        self.detail_delay = detail_delay

    async def data_slots(self, owner_id: str) -> List[Tuple[int, Playlist]]:
        """Owner's data playlists whose names decode to a slot index, ordered by index."""
        candidates = await self.registry.list_by_prefix(self.base_name, owner_id)
        slots = []
        for playlist in candidates:
            index = parse_slot_index(playlist.name, self.base_name)
            if index is None:
                logger.debug("Ignoring %r: prefix matches but it is not a data slot", playlist.name)
                continue
            slots.append((index, playlist))
        slots.sort(key=lambda slot: slot[0])
        return slots

    async def save(self, owner_id: str, categories: Dict[str, Iterable[str]]) -> None:
        chunks = chunk_text(encode_categories(categories), self.capacity)
        existing = await self.data_slots(owner_id)

        by_index: Dict[int, Playlist] = {}
        stale: List[Playlist] = []
        for index, playlist in existing:
            if index in by_index or index >= len(chunks):
                stale.append(playlist)
            else:
                by_index[index] = playlist

        for index, chunk in enumerate(chunks):
            playlist = by_index.get(index)
            if playlist is not None:
                await self.registry.update_description(playlist.id, chunk)
            else:
                await self.registry.create(owner_id, slot_name(index, self.base_name), chunk, public=False)
            await asyncio.sleep(self.write_delay)

        for playlist in stale:
            await self.registry.delete(playlist.id)
            await asyncio.sleep(self.write_delay)

        logger.info(
            "Saved %d categories in %d slot(s), removed %d surplus slot(s)",
            len(categories), len(chunks), len(stale),
        )

    async def load(self, owner_id: str) -> LoadResult:
        slots = await self.data_slots(owner_id)
        if not slots:
            logger.info("No data playlists for %s, starting empty", owner_id)
            return Loaded({})

        fragments: Dict[int, str] = {}
        for n, (index, playlist) in enumerate(slots):
            if n:
                await asyncio.sleep(self.detail_delay)
            detail = await self.registry.get_details(playlist.id)
            fragments[index] = detail.description

        text = "".join(fragments[index] for index in sorted(fragments))
        return decode_categories(text, slot_count=len(slots))
