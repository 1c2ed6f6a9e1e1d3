"""Spotify playlist as seen by the storage layer."""
from dataclasses import dataclass


@dataclass
class Playlist:
    """A playlist reduced to the fields used for storage and classification."""
    id: str
    owner_id: str
    name: str
    description: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Playlist":
        return cls(
            id=data["id"],
            owner_id=(data.get("owner") or {}).get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
        )
