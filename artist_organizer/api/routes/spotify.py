"""Spotify OAuth: auth URL, callback and logout."""
from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse

from artist_organizer.config import ORGANIZER_WEB_ORIGIN, SPOTIFY_CLIENT_ID
from artist_organizer.core.credentials import (
    exchange_code_and_save_token,
    get_auth_url,
    get_bearer_token,
    logout as forget_token,
)

router = APIRouter()


@router.get("/auth-url")
def auth_url():
    """Return Spotify OAuth authorization URL and whether the user is logged in."""
    if not SPOTIFY_CLIENT_ID:
        return {"auth_url": None, "error": "SPOTIFY_CLIENT_ID not set", "logged_in": False}
    return {"auth_url": get_auth_url(), "logged_in": get_bearer_token() is not None}


@router.get("/callback")
def spotify_callback(code: str | None = None):
    """Exchange code for tokens, store them, then redirect to the web app or show success."""
    if not code:
        return HTMLResponse(
            "<body><p>Missing authorization code. Try logging in again.</p></body>",
            status_code=400,
        )
    if not exchange_code_and_save_token(code):
        return HTMLResponse(
            "<body><p>Failed to link Spotify. Check backend logs and try again.</p></body>",
            status_code=500,
        )
    if ORGANIZER_WEB_ORIGIN:
        return RedirectResponse(url=f"{ORGANIZER_WEB_ORIGIN.rstrip('/')}/?spotify=success", status_code=302)
    return HTMLResponse("<body><p>Spotify linked successfully. You can close this window.</p></body>")


@router.post("/logout")
def logout():
    """Clear the Spotify token so the user is logged out."""
    forget_token()
    return {"ok": True}
