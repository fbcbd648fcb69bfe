# ============================================================================
# FILE: jamvault/api/endpoints/favorites.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from jamvault.api.dependencies import get_storage, require_current_user
from jamvault.db.models.activity import Favorite, LibraryEntry
from jamvault.db.models.music import Song
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.social import FavoriteStatus, LibraryStatus

router = APIRouter()

def _require_song(storage: BaseStorage, song_id: int) -> None:
    if not storage.get_song(song_id):
        raise HTTPException(status_code=404, detail="Song not found")

# Favorites

@router.get("/favorites", response_model=List[Song])
async def get_favorites(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_favorites_by_user(current_user.id)

@router.get("/favorites/{song_id}", response_model=FavoriteStatus)
async def check_favorite(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return FavoriteStatus(is_favorite=storage.is_favorite(current_user.id, song_id))

@router.post("/favorites/{song_id}", response_model=Favorite, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    _require_song(storage, song_id)
    return storage.add_to_favorites(current_user.id, song_id)

@router.delete("/favorites/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    if not storage.remove_from_favorites(current_user.id, song_id):
        raise HTTPException(status_code=404, detail="Song not in favorites")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Library

@router.get("/library", response_model=List[Song])
async def get_library(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_library_songs(current_user.id)

@router.get("/library/{song_id}", response_model=LibraryStatus)
async def check_library(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return LibraryStatus(is_in_library=storage.is_in_library(current_user.id, song_id))

@router.post("/library/{song_id}", response_model=LibraryEntry, status_code=status.HTTP_201_CREATED)
async def add_to_library(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    _require_song(storage, song_id)
    return storage.add_to_library(current_user.id, song_id)

@router.delete("/library/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_library(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    if not storage.remove_from_library(current_user.id, song_id):
        raise HTTPException(status_code=404, detail="Song not in library")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
