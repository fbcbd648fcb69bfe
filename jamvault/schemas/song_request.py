# ============================================================================
# FILE: jamvault/schemas/song_request.py
# ============================================================================
from pydantic import Field
from typing import List, Optional
from jamvault.db.models.song_request import SongRequestStatus
from jamvault.schemas.base import CamelModel

class SongRequestCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    artist_name: str = Field(min_length=1, max_length=200)
    artist_id: Optional[int] = None
    featured_artists: List[str] = []
    album: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1000, le=9999)
    cover: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

class SongRequestStatusUpdate(CamelModel):
    status: SongRequestStatus
    admin_message: Optional[str] = Field(default=None, max_length=1000)
