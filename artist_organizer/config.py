"""Configuration: env, Spotify credentials, playlist naming, throttle delays."""
import os
from pathlib import Path

# Base paths (project root = parent of artist_organizer package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
try:
    from dotenv import load_dotenv
    load_dotenv(BASE_DIR / ".env")
except ImportError:
    pass
DATA_DIR = BASE_DIR / "data"
SPOTIFY_TOKEN_CACHE = Path(os.getenv("ORGANIZER_TOKEN_CACHE", str(DATA_DIR / ".spotify-token")))

APP_VERSION = "v4.1.0"

# API
API_HOST = os.getenv("ORGANIZER_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ORGANIZER_API_PORT", "8000"))

# Spotify (OAuth handled by spotipy; token cached on disk after first connect)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = os.getenv("SPOTIFY_REDIRECT_URI", "http://localhost:8000/api/spotify/callback")
SPOTIFY_SCOPES = "user-follow-read playlist-read-private playlist-modify-private playlist-modify-public"
SPOTIFY_API_BASE = os.getenv("SPOTIFY_API_BASE", "https://api.spotify.com/v1")
# After OAuth callback, redirect here (e.g. http://localhost:5173 for Vite dev)
ORGANIZER_WEB_ORIGIN = os.getenv("ORGANIZER_WEB_ORIGIN", "")

# Playlist naming conventions
CATEGORY_PREFIX = "🎸 ArtistOrganizer/"  # visual category playlists
DATA_PLAYLIST_PREFIX = "__ArtistOrganizer_Data"  # hidden data storage
LEGACY_PREFIX = "🎸 "  # pre-v4 playlists, one per category, filled with tracks
DEFAULT_CATEGORY = "Uncategorized"

# Spotify description limit (with safety margin)
DESCRIPTION_MAX_LENGTH = int(os.getenv("ORGANIZER_DESCRIPTION_MAX_LENGTH", "280"))

# Rate limiting
MAX_RETRIES = 3
DEFAULT_RETRY_AFTER_SEC = 1
HTTP_TIMEOUT_SEC = float(os.getenv("ORGANIZER_HTTP_TIMEOUT", "30"))

# Courtesy delays between sequential calls (seconds)
PAGE_DELAY_SEC = 0.1
WRITE_DELAY_SEC = 0.1
DETAIL_DELAY_SEC = 0.05
DELETE_DELAY_SEC = 0.2


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
