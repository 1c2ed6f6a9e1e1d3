"""Errors raised by the storage layer."""
from typing import Optional


class OrganizerError(Exception):
    """Base class for storage-layer failures."""


class TransportExhausted(OrganizerError):
    """Spotify kept answering 429 until the retry ceiling was reached."""

    def __init__(self, url: str, attempts: int, retry_after: Optional[int] = None) -> None:
        self.url = url
        self.attempts = attempts
        self.retry_after = retry_after
        super().__init__(
            f"Rate limited (429) on {url} after {attempts} attempts "
            f"(last Retry-After: {retry_after if retry_after is not None else 'not provided'})"
        )


class RemoteError(OrganizerError):
    """Any non-2xx, non-429 answer from Spotify."""

    def __init__(self, status_code: int, url: str, body: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"Spotify returned {status_code} for {url}: {body[:200]}")


class NotLinkedError(OrganizerError):
    """No usable Spotify credential (never linked, or token expired)."""


class StoreCorruptedError(OrganizerError):
    """Refusing to modify categories while the stored document is unreadable."""
