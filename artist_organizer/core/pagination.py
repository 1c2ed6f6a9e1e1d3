"""Follow Spotify paging cursors until a listing is complete."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from artist_organizer.config import PAGE_DELAY_SEC
from artist_organizer.core.transport import RateLimitedTransport, ensure_ok

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageShape:
    """Where a page keeps its items and its next-page URL."""
    items: Callable[[dict], Optional[list]]
    next: Callable[[dict], Optional[str]]


TOP_LEVEL = PageShape(
    items=lambda page: page.get("items"),
    next=lambda page: page.get("next"),
)


def nested(key: str) -> PageShape:
    """Shape for endpoints that wrap the paging object, e.g. /me/following under "artists"."""
    return PageShape(
        items=lambda page: (page.get(key) or {}).get("items"),
        next=lambda page: (page.get(key) or {}).get("next"),
    )


async def collect_pages(
    transport: RateLimitedTransport,
    url: str,
    shape: PageShape = TOP_LEVEL,
    delay: float = PAGE_DELAY_SEC,
) -> List[Any]:
    """Return every item across all pages starting at url."""
    results: List[Any] = []
    next_url: Optional[str] = url
    pages = 0
    while next_url:
        response = ensure_ok(await transport.call("GET", next_url))
        page = response.json() or {}
        results.extend(shape.items(page) or [])
        pages += 1
        next_url = shape.next(page)
        if next_url:
            await asyncio.sleep(delay)
    logger.debug("Collected %d items over %d page(s) from %s", len(results), pages, url)
    return results
