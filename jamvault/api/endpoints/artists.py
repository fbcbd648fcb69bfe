# ============================================================================
# FILE: jamvault/api/endpoints/artists.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from jamvault.api.dependencies import get_storage, require_admin, require_current_user
from jamvault.db.models.music import Album, Artist, Song
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.music import AlbumCreate, AlbumUpdate, ArtistCreate, ArtistUpdate

router = APIRouter()

def _get_artist_or_404(storage: BaseStorage, artist_id: int) -> Artist:
    artist = storage.get_artist(artist_id)
    if not artist:
        raise HTTPException(status_code=404, detail="Artist not found")
    return artist

# Artists

@router.get("/artists", response_model=List[Artist])
async def list_artists(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_all_artists()

@router.get("/artists/{artist_id}", response_model=Artist)
async def get_artist(
    artist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return _get_artist_or_404(storage, artist_id)

@router.get("/artists/{artist_id}/songs", response_model=List[Song])
async def get_artist_songs(
    artist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Songs by the artist, including features"""
    _get_artist_or_404(storage, artist_id)
    return storage.get_songs_by_artist(artist_id)

@router.get("/artists/{artist_id}/albums", response_model=List[Album])
async def get_artist_albums(
    artist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    _get_artist_or_404(storage, artist_id)
    return storage.get_albums_by_artist(artist_id)

@router.post("/artists", response_model=Artist, status_code=status.HTTP_201_CREATED)
async def create_artist(
    artist_data: ArtistCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    if storage.get_artist_by_name(artist_data.name):
        raise HTTPException(status_code=400, detail="Artist already exists")
    return storage.create_artist(artist_data)

@router.patch("/artists/{artist_id}", response_model=Artist)
async def update_artist(
    artist_id: int,
    update_data: ArtistUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    artist = storage.update_artist(artist_id, update_data)
    if not artist:
        raise HTTPException(status_code=404, detail="Artist not found")
    return artist

# Albums

@router.get("/albums", response_model=List[Album])
async def list_albums(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_all_albums()

@router.get("/albums/{album_id}", response_model=Album)
async def get_album(
    album_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    album = storage.get_album(album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")
    return album

@router.post("/albums", response_model=Album, status_code=status.HTTP_201_CREATED)
async def create_album(
    album_data: AlbumCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    _get_artist_or_404(storage, album_data.artist_id)
    return storage.create_album(album_data)

@router.patch("/albums/{album_id}", response_model=Album)
async def update_album(
    album_id: int,
    update_data: AlbumUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    album = storage.update_album(album_id, update_data)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")
    return album
