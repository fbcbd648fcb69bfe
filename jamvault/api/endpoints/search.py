# ============================================================================
# FILE: jamvault/api/endpoints/search.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from jamvault.api.dependencies import get_storage, require_current_user
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.music import AlbumGroup, SearchResults

router = APIRouter()

@router.get("/search", response_model=SearchResults)
async def search(
    q: str = Query("", description="Search query"),
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Search songs and artists; albums are matching songs grouped by album name
    """
    needle = q.strip().lower()
    if not needle:
        return SearchResults()

    songs = storage.search_songs(needle)
    artists = [a for a in storage.get_all_artists() if needle in a.name.lower()]

    grouped = {}
    for song in songs:
        if song.album:
            grouped.setdefault(song.album, []).append(song)
    albums = [AlbumGroup(name=name, songs=album_songs) for name, album_songs in grouped.items()]

    return SearchResults(songs=songs, artists=artists, albums=albums)
