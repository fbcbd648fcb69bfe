# ============================================================================
# FILE: jamvault/schemas/playlist.py
# ============================================================================
from pydantic import Field
from typing import Optional
from jamvault.schemas.base import CamelModel

class PlaylistCreate(CamelModel):
    """Schema for creating a playlist"""
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    cover: Optional[str] = None
    is_collaborative: bool = False

class PlaylistUpdate(CamelModel):
    """Schema for updating a playlist"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    cover: Optional[str] = None
    is_collaborative: Optional[bool] = None

class PlaylistSongAdd(CamelModel):
    """Schema for adding a song to playlist"""
    song_id: int

class CollaboratorAdd(CamelModel):
    user_id: int
