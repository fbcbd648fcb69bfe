# ============================================================================
# FILE: jamvault/db/models/music.py
# ============================================================================
from pydantic import Field
from typing import List, Optional
from datetime import datetime
from jamvault.schemas.base import CamelModel

class Artist(CamelModel):
    """Artist managed by administrators"""
    id: int
    name: str
    bio: Optional[str] = None
    image: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    created_at: datetime

class Album(CamelModel):
    """Album belonging to one artist; track_count is kept in sync with songs"""
    id: int
    title: str
    artist_id: int
    cover: Optional[str] = None
    release_year: Optional[int] = None
    genre: Optional[str] = None
    track_count: int = 0
    created_at: datetime

class Song(CamelModel):
    """Uploaded song with its audio file on local disk"""
    id: int
    title: str
    artist: str
    artist_id: Optional[int] = None
    featured_artist_ids: List[int] = Field(default_factory=list)
    album: Optional[str] = None
    album_id: Optional[int] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    duration: int  # seconds
    cover: Optional[str] = None
    file_path: str
    lyrics: Optional[str] = None
    user_id: int
    play_count: int = 0
    uploaded_at: datetime
    barcode: str
