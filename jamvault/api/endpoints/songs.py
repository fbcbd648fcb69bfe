# ============================================================================
# FILE: jamvault/api/endpoints/songs.py
# ============================================================================
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile, status
from fastapi.responses import FileResponse, StreamingResponse
from pydantic import ValidationError
from typing import List, Optional
from jamvault.api.dependencies import get_settings, get_stats_cache, get_storage, require_admin, require_current_user
from jamvault.api.errors import validation_failed
from jamvault.config import Settings
from jamvault.core.cache import StatsCache
from jamvault.db.models.activity import SongComment, UserListeningHistory
from jamvault.db.models.music import Song
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.history import ListenCreate
from jamvault.schemas.music import LyricsUpdate, SongCreate, SongUpdate
from jamvault.schemas.social import CommentCreate
from jamvault.services.file_service import AUDIO, file_service
from jamvault.services.stream_service import AUDIO_MEDIA_TYPE, iter_file_range, parse_range_header
import logging
import os

logger = logging.getLogger(__name__)
router = APIRouter()

def _get_song_or_404(storage: BaseStorage, song_id: int) -> Song:
    song = storage.get_song(song_id)
    if not song:
        raise HTTPException(status_code=404, detail="Song not found")
    return song

def _check_references(storage: BaseStorage, artist_id: Optional[int], album_id: Optional[int]) -> None:
    """404 when a referenced artist or album does not exist"""
    if artist_id is not None and not storage.get_artist(artist_id):
        raise HTTPException(status_code=404, detail="Artist not found")
    if album_id is not None and not storage.get_album(album_id):
        raise HTTPException(status_code=404, detail="Album not found")

@router.get("/songs", response_model=List[Song])
async def list_songs(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Administrators see the songs they uploaded, everyone else the whole catalogue
    """
    if current_user.is_admin:
        return storage.get_songs_by_user(current_user.id)
    return storage.get_all_songs()

@router.get("/songs/recent", response_model=List[Song])
async def recent_songs(
    limit: int = Query(10, ge=1, le=50, description="Number of songs"),
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Most recently uploaded songs, newest first"""
    return storage.get_recent_songs(limit)

@router.get("/songs/{song_id}", response_model=Song)
async def get_song(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return _get_song_or_404(storage, song_id)

@router.post("/songs", response_model=Song, status_code=status.HTTP_201_CREATED)
async def upload_song(
    file: UploadFile = File(...),
    title: str = Form(...),
    artist: str = Form(...),
    duration: int = Form(...),
    album: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    year: Optional[int] = Form(None),
    cover: Optional[str] = Form(None),
    lyrics: Optional[str] = Form(None),
    artist_id: Optional[int] = Form(None, alias="artistId"),
    album_id: Optional[int] = Form(None, alias="albumId"),
    storage: BaseStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_admin)
):
    """
    Upload an audio file with its metadata
    Requires an administrator
    """
    try:
        song_data = SongCreate(
            title=title,
            artist=artist,
            duration=duration,
            album=album or None,
            genre=genre or None,
            year=year,
            cover=cover or None,
            lyrics=lyrics or None,
            artist_id=artist_id,
            album_id=album_id,
        )
    except ValidationError as e:
        raise validation_failed(e)

    _check_references(storage, song_data.artist_id, song_data.album_id)

    file_path = await file_service.save_upload(file, AUDIO, app_settings)
    return storage.create_song(current_user.id, song_data, file_path)

@router.patch("/songs/{song_id}", response_model=Song)
async def update_song(
    song_id: int,
    update_data: SongUpdate,
    storage: BaseStorage = Depends(get_storage),
    stats_cache: StatsCache = Depends(get_stats_cache),
    current_user: User = Depends(require_admin)
):
    """Edit song metadata (administrators)"""
    _get_song_or_404(storage, song_id)
    _check_references(storage, update_data.artist_id, update_data.album_id)
    song = storage.update_song(song_id, update_data)
    stats_cache.invalidate_all()
    return song

@router.put("/songs/{song_id}/lyrics", response_model=Song)
async def update_lyrics(
    song_id: int,
    lyrics_data: LyricsUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    song = storage.update_song_lyrics(song_id, lyrics_data.lyrics)
    if not song:
        raise HTTPException(status_code=404, detail="Song not found")
    return song

@router.delete("/songs/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    stats_cache: StatsCache = Depends(get_stats_cache),
    current_user: User = Depends(require_admin)
):
    """
    Delete a song, its playlist entries, favorites, comments and audio file
    Requires an administrator
    """
    if not storage.delete_song(song_id):
        raise HTTPException(status_code=404, detail="Song not found")
    stats_cache.invalidate_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/songs/{song_id}/stream")
async def stream_song(
    song_id: int,
    request: Request,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Stream the audio file with Range request support for seeking
    """
    song = _get_song_or_404(storage, song_id)
    if not os.path.exists(song.file_path):
        raise HTTPException(status_code=404, detail="File not found")

    file_size = os.path.getsize(song.file_path)
    range_header = request.headers.get("Range")
    if range_header:
        byte_range = parse_range_header(range_header, file_size)
        if not byte_range:
            return Response(
                status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
                headers={"Content-Range": f"bytes */{file_size}"},
            )
        start, end = byte_range
        headers = {
            "Content-Range": f"bytes {start}-{end}/{file_size}",
            "Accept-Ranges": "bytes",
            "Content-Length": str(end - start + 1),
        }
        return StreamingResponse(
            iter_file_range(song.file_path, start, end),
            status_code=status.HTTP_206_PARTIAL_CONTENT,
            media_type=AUDIO_MEDIA_TYPE,
            headers=headers,
        )

    return FileResponse(
        song.file_path,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Accept-Ranges": "bytes"},
    )

@router.post("/songs/{song_id}/play", response_model=UserListeningHistory, status_code=status.HTTP_201_CREATED)
async def record_play(
    song_id: int,
    listen: Optional[ListenCreate] = None,
    storage: BaseStorage = Depends(get_storage),
    stats_cache: StatsCache = Depends(get_stats_cache),
    current_user: User = Depends(require_current_user)
):
    """
    Track song play in history and bump its play count
    """
    _get_song_or_404(storage, song_id)
    duration = listen.duration if listen else 0
    entry = storage.record_listen(current_user.id, song_id, duration)
    stats_cache.invalidate(current_user.id)
    return entry

@router.get("/songs/{song_id}/comments", response_model=List[SongComment])
async def list_comments(
    song_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Comments on a song, oldest first"""
    _get_song_or_404(storage, song_id)
    return storage.get_song_comments(song_id)

@router.post("/songs/{song_id}/comments", response_model=SongComment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    song_id: int,
    comment_data: CommentCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    _get_song_or_404(storage, song_id)
    return storage.create_comment(song_id, current_user.id, comment_data)

@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Delete a comment (its author or an administrator)"""
    comment = storage.get_comment(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    storage.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
