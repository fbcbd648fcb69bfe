# ============================================================================
# FILE: jamvault/api/endpoints/playlists.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from jamvault.api.dependencies import get_storage, require_current_user
from jamvault.db.models.music import Song
from jamvault.db.models.playlist import Playlist, PlaylistSong
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.playlist import (
    CollaboratorAdd,
    PlaylistCreate,
    PlaylistSongAdd,
    PlaylistUpdate,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _get_playlist(storage: BaseStorage, playlist_id: int, user: User, owner_only: bool = False) -> Playlist:
    """
    Load a playlist the user may act on.
    Owners may do anything; collaborators may read and edit the track list.
    """
    playlist = storage.get_playlist(playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    is_owner = playlist.user_id == user.id
    is_collaborator = playlist.is_collaborative and user.id in playlist.collaborators
    if not is_owner and (owner_only or not is_collaborator):
        raise HTTPException(status_code=403, detail="Forbidden")
    return playlist

@router.get("", response_model=List[Playlist])
async def get_my_playlists(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Get all playlists the current user owns or collaborates on
    Requires authentication
    """
    return storage.get_playlists_by_user(current_user.id)

@router.post("", response_model=Playlist, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    playlist_data: PlaylistCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Create a new playlist
    Requires authentication
    """
    return storage.create_playlist(current_user.id, playlist_data)

@router.get("/{playlist_id}", response_model=Playlist)
async def get_playlist(
    playlist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Get a specific playlist
    Requires ownership or collaboration
    """
    return _get_playlist(storage, playlist_id, current_user)

@router.patch("/{playlist_id}", response_model=Playlist)
async def update_playlist(
    playlist_id: int,
    update_data: PlaylistUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Update playlist details (name, description, cover, collaborative flag)
    Requires ownership
    """
    _get_playlist(storage, playlist_id, current_user, owner_only=True)
    playlist = storage.update_playlist(playlist_id, update_data)
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist

@router.delete("/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_playlist(
    playlist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Delete a playlist
    Requires ownership
    """
    _get_playlist(storage, playlist_id, current_user, owner_only=True)
    if not storage.delete_playlist(playlist_id):
        raise HTTPException(status_code=404, detail="Playlist not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{playlist_id}/songs", response_model=List[Song])
async def get_playlist_songs(
    playlist_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    _get_playlist(storage, playlist_id, current_user)
    return storage.get_playlist_songs(playlist_id)

@router.post("/{playlist_id}/songs", response_model=PlaylistSong, status_code=status.HTTP_201_CREATED)
async def add_song_to_playlist(
    playlist_id: int,
    song_data: PlaylistSongAdd,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Add a song to a playlist
    Any existing song may be added; only access to the playlist is checked
    """
    _get_playlist(storage, playlist_id, current_user)
    if not storage.get_song(song_data.song_id):
        raise HTTPException(status_code=404, detail="Song not found")
    return storage.add_song_to_playlist(playlist_id, song_data.song_id, current_user.id)

@router.delete("/{playlist_id}/songs/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_song_from_playlist(
    playlist_id: int,
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Remove a song from a playlist
    """
    _get_playlist(storage, playlist_id, current_user)
    if not storage.remove_song_from_playlist(playlist_id, song_id):
        raise HTTPException(status_code=404, detail="Song not in playlist")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{playlist_id}/collaborators", response_model=Playlist)
async def add_collaborator(
    playlist_id: int,
    collaborator: CollaboratorAdd,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Share the playlist with another user (owner only)"""
    _get_playlist(storage, playlist_id, current_user, owner_only=True)
    if not storage.get_user(collaborator.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return storage.add_collaborator(playlist_id, collaborator.user_id)

@router.delete("/{playlist_id}/collaborators/{user_id}", response_model=Playlist)
async def remove_collaborator(
    playlist_id: int,
    user_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Stop sharing the playlist with a user (owner only)"""
    _get_playlist(storage, playlist_id, current_user, owner_only=True)
    return storage.remove_collaborator(playlist_id, user_id)
