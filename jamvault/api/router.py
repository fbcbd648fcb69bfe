# ============================================================================
# FILE: jamvault/api/router.py
# ============================================================================
from fastapi import APIRouter
from jamvault.api.endpoints import (
    artists,
    auth,
    favorites,
    games,
    playlists,
    profile,
    remote,
    search,
    short_links,
    song_requests,
    songs,
    uploads,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(songs.router, tags=["songs"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(favorites.router, tags=["favorites"])
api_router.include_router(profile.router, tags=["profile"])
api_router.include_router(song_requests.router, prefix="/song-requests", tags=["song-requests"])
api_router.include_router(short_links.router, prefix="/shortlinks", tags=["shortlinks"])
api_router.include_router(artists.router, tags=["artists"])
api_router.include_router(search.router, tags=["search"])
api_router.include_router(games.router, prefix="/games", tags=["games"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(remote.router, tags=["remote-control"])
