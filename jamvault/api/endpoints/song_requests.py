# ============================================================================
# FILE: jamvault/api/endpoints/song_requests.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from jamvault.api.dependencies import get_storage, require_admin, require_current_user
from jamvault.db.models.song_request import SongRequest
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.song_request import SongRequestCreate, SongRequestStatusUpdate

router = APIRouter()

@router.get("", response_model=List[SongRequest])
async def list_song_requests(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Own requests; administrators see every request"""
    if current_user.is_admin:
        return storage.get_all_song_requests()
    return storage.get_song_requests_by_user(current_user.id)

@router.get("/pending", response_model=List[SongRequest])
async def list_pending_requests(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    return storage.get_pending_song_requests()

@router.post("", response_model=SongRequest, status_code=status.HTTP_201_CREATED)
async def create_song_request(
    request_data: SongRequestCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.create_song_request(current_user.id, request_data)

@router.patch("/{request_id}/status", response_model=SongRequest)
async def update_request_status(
    request_id: int,
    status_update: SongRequestStatusUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_admin)
):
    """
    Approve, reject or reopen a request (administrators)
    Leaving out adminMessage keeps the previous message
    """
    song_request = storage.update_song_request_status(
        request_id, status_update.status, status_update.admin_message
    )
    if not song_request:
        raise HTTPException(status_code=404, detail="Song request not found")
    return song_request

@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song_request(
    request_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    song_request = storage.get_song_request(request_id)
    if not song_request:
        raise HTTPException(status_code=404, detail="Song request not found")
    if song_request.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    storage.delete_song_request(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
