"""Category CRUD: stored as chunked JSON in hidden playlists, mirrored by category playlists."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from artist_organizer.api.state import StorageSession, get_session
from artist_organizer.core.organizer import OrganizerView
from artist_organizer.models.categories import Migration

router = APIRouter()


class CreateCategoryBody(BaseModel):
    name: str


class MoveArtistBody(BaseModel):
    artist_id: str
    source: str
    target: str


def migration_to_dict(migration: Optional[Migration]):
    if migration is None:
        return None
    return {
        "categories": migration.categories,
        "legacy_playlists": [{"id": p.id, "name": p.name} for p in migration.legacy_playlists],
        "artist_count": migration.artist_count,
    }


def view_to_dict(view: OrganizerView):
    return {
        "categories": view.categories,
        "category_playlists": view.category_playlists,
        "artists": [
            {"id": a.get("id"), "name": a.get("name") or ""}
            for a in view.followed_artists
            if a and a.get("id")
        ],
        "corrupted": view.corrupted,
        "recovered": view.recovered,
        "migration": migration_to_dict(view.migration),
    }


@router.get("")
async def get_categories(session: StorageSession = Depends(get_session)):
    """Load categories. If legacy playlists exist, returns a migration offer instead."""
    owner_id = await session.resolve_owner()
    return view_to_dict(await session.organizer.start(owner_id))


@router.post("")
async def create_category(body: CreateCategoryBody, session: StorageSession = Depends(get_session)):
    owner_id = await session.resolve_owner()
    try:
        categories = await session.organizer.create_category(owner_id, body.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"categories": categories}


@router.delete("/{name}")
async def delete_category(name: str, session: StorageSession = Depends(get_session)):
    """Delete a category; its artists move to the default category."""
    owner_id = await session.resolve_owner()
    try:
        categories = await session.organizer.delete_category(owner_id, name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Category {name!r} not found")
    return {"categories": categories}


@router.post("/move")
async def move_artist(body: MoveArtistBody, session: StorageSession = Depends(get_session)):
    owner_id = await session.resolve_owner()
    try:
        categories = await session.organizer.move(owner_id, body.artist_id, body.source, body.target)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Category {e.args[0]!r} not found")
    return {"categories": categories}
