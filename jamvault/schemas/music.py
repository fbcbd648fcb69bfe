# ============================================================================
# FILE: jamvault/schemas/music.py
# ============================================================================
from pydantic import Field
from typing import List, Optional
from jamvault.db.models.music import Album, Artist, Song
from jamvault.schemas.base import CamelModel

class SongCreate(CamelModel):
    """Metadata accepted alongside an uploaded audio file"""
    title: str = Field(min_length=1, max_length=200)
    artist: str = Field(min_length=1, max_length=200)
    duration: int = Field(ge=0)
    artist_id: Optional[int] = None
    featured_artist_ids: List[int] = []
    album: Optional[str] = None
    album_id: Optional[int] = None
    genre: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1000, le=9999)
    cover: Optional[str] = None
    lyrics: Optional[str] = None

class SongUpdate(CamelModel):
    """Editable song metadata; owner, file, counters and barcode are fixed"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    artist: Optional[str] = Field(default=None, min_length=1, max_length=200)
    artist_id: Optional[int] = None
    featured_artist_ids: Optional[List[int]] = None
    album: Optional[str] = None
    album_id: Optional[int] = None
    genre: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1000, le=9999)
    duration: Optional[int] = Field(default=None, ge=0)
    cover: Optional[str] = None

class LyricsUpdate(CamelModel):
    lyrics: str

class ArtistCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    bio: Optional[str] = None
    image: Optional[str] = None
    genres: List[str] = []

class ArtistUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    bio: Optional[str] = None
    image: Optional[str] = None
    genres: Optional[List[str]] = None

class AlbumCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    artist_id: int
    cover: Optional[str] = None
    release_year: Optional[int] = Field(default=None, ge=1000, le=9999)
    genre: Optional[str] = None

class AlbumUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    cover: Optional[str] = None
    release_year: Optional[int] = Field(default=None, ge=1000, le=9999)
    genre: Optional[str] = None

class AlbumGroup(CamelModel):
    name: str
    songs: List[Song] = []

class SearchResults(CamelModel):
    songs: List[Song] = []
    artists: List[Artist] = []
    albums: List[AlbumGroup] = []

class ImageUploadResponse(CamelModel):
    url: str
