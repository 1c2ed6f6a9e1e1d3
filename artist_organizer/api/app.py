"""FastAPI app, CORS, error mapping and route registration."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from artist_organizer.api.state import AppState, get_state
from artist_organizer.config import APP_VERSION
from artist_organizer.core.errors import NotLinkedError, RemoteError, StoreCorruptedError, TransportExhausted

# Import routes after state to avoid circular imports
from artist_organizer.api.routes import categories, spotify, storage

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Artist Organizer API",
    description="Categorize followed artists, stored in your own Spotify playlists",
    version=APP_VERSION,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotLinkedError)
async def _not_linked(request: Request, exc: NotLinkedError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(TransportExhausted)
async def _throttled(request: Request, exc: TransportExhausted):
    logger.warning("Request %s failed: %s", request.url.path, exc)
    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after is not None else None
    return JSONResponse(status_code=429, content={"detail": str(exc)}, headers=headers)


@app.exception_handler(RemoteError)
async def _remote_error(request: Request, exc: RemoteError):
    logger.warning("Request %s failed: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "spotify_status": exc.status_code})


@app.exception_handler(StoreCorruptedError)
async def _corrupted(request: Request, exc: StoreCorruptedError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(storage.router, prefix="/api/storage", tags=["storage"])
app.include_router(spotify.router, prefix="/api/spotify", tags=["spotify"])
