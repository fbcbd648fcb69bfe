# ============================================================================
# FILE: jamvault/schemas/history.py
# ============================================================================
from pydantic import Field
from typing import List
from jamvault.schemas.base import CamelModel

class ListenCreate(CamelModel):
    """Seconds of the track the user actually listened to"""
    duration: int = Field(default=0, ge=0)

class TopSong(CamelModel):
    song_id: int
    title: str
    artist: str
    play_count: int

class TopArtist(CamelModel):
    artist: str
    play_count: int

class TopGenre(CamelModel):
    genre: str
    play_count: int

class UserListeningStats(CamelModel):
    total_time: int = 0
    total_plays: int = 0
    top_songs: List[TopSong] = []
    top_artists: List[TopArtist] = []
    top_genres: List[TopGenre] = []
