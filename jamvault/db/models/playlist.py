# ============================================================================
# FILE: jamvault/db/models/playlist.py
# ============================================================================
from pydantic import Field
from typing import List, Optional
from datetime import datetime
from jamvault.schemas.base import CamelModel

class Playlist(CamelModel):
    """Playlist owned by a user, optionally shared with collaborators"""
    id: int
    name: str
    description: Optional[str] = None
    cover: Optional[str] = None
    user_id: int
    is_collaborative: bool = False
    collaborators: List[int] = Field(default_factory=list)
    created_at: datetime

class PlaylistSong(CamelModel):
    """Junction row for playlist songs, unique per (playlist_id, song_id)"""
    id: int
    playlist_id: int
    song_id: int
    added_by: Optional[int] = None
    added_at: datetime
