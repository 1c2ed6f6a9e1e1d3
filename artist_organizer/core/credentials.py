"""Bearer credential supplier via Spotipy's OAuth manager and cached token."""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from artist_organizer.config import (
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
    SPOTIFY_TOKEN_CACHE,
    ensure_data_dir,
)

logger = logging.getLogger(__name__)


@dataclass
class BearerToken:
    access_token: str
    expires_at: int

    @property
    def is_expired(self) -> bool:
        return time.time() >= self.expires_at


def _oauth():
    """SpotifyOAuth bound to the on-disk token cache, or None if not configured."""
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        return None
    from spotipy.cache_handler import CacheFileHandler
    from spotipy.oauth2 import SpotifyOAuth

    ensure_data_dir()
    cache = CacheFileHandler(cache_path=str(SPOTIFY_TOKEN_CACHE))
    return SpotifyOAuth(
        client_id=SPOTIFY_CLIENT_ID,
        client_secret=SPOTIFY_CLIENT_SECRET,
        redirect_uri=SPOTIFY_REDIRECT_URI,
        scope=SPOTIFY_SCOPES,
        cache_handler=cache,
        open_browser=False,
    )


def get_bearer_token() -> Optional[BearerToken]:
    """Return a valid access token (refreshed by Spotipy if needed), or None if not logged in."""
    auth = _oauth()
    if auth is None:
        return None
    token_info = auth.validate_token(auth.cache_handler.get_cached_token())
    if token_info is None:
        return None
    return BearerToken(access_token=token_info["access_token"], expires_at=int(token_info["expires_at"]))


def get_auth_url() -> Optional[str]:
    auth = _oauth()
    if auth is None:
        return None
    return auth.get_authorize_url()


def exchange_code_and_save_token(code: str) -> bool:
    """Exchange OAuth code for tokens and save to cache. Returns True on success."""
    auth = _oauth()
    if auth is None:
        return False
    try:
        auth.get_access_token(code=code, check_cache=False)
        return True
    except Exception as e:
        logger.warning("Spotify token exchange failed: %s", e)
        return False


def logout() -> None:
    """Forget the cached token."""
    try:
        if SPOTIFY_TOKEN_CACHE.exists():
            SPOTIFY_TOKEN_CACHE.unlink()
    except OSError as e:
        logger.warning("Could not remove token cache: %s", e)
