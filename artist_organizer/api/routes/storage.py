"""Legacy migration and full reset of the organizer's playlists."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from artist_organizer.api.routes.categories import migration_to_dict, view_to_dict
from artist_organizer.api.state import StorageSession, get_session

router = APIRouter()


class MigrationBody(BaseModel):
    accept: bool


class ResetBody(BaseModel):
    confirm: bool = False


@router.get("/migration")
async def get_migration(session: StorageSession = Depends(get_session)):
    """Return the pending legacy migration, or null if there is none."""
    owner_id = await session.resolve_owner()
    return {"migration": migration_to_dict(await session.migrator.detect(owner_id))}


@router.post("/migration")
async def resolve_migration(body: MigrationBody, session: StorageSession = Depends(get_session)):
    """Accept (convert, then delete legacy playlists) or decline (start fresh) the migration."""
    owner_id = await session.resolve_owner()
    return view_to_dict(await session.organizer.resolve_migration(owner_id, body.accept))


@router.post("/reset")
async def reset(body: ResetBody, session: StorageSession = Depends(get_session)):
    """Delete all data and category playlists. Requires {"confirm": true}."""
    if not body.confirm:
        raise HTTPException(
            status_code=400,
            detail="Reset deletes every Artist Organizer playlist. Send {\"confirm\": true} to proceed.",
        )
    owner_id = await session.resolve_owner()
    counts, view = await session.organizer.reset(owner_id)
    return {
        "deleted_data": counts.deleted_data,
        "deleted_categories": counts.deleted_categories,
        **view_to_dict(view),
    }
