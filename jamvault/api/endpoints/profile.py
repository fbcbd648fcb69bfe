# ============================================================================
# FILE: jamvault/api/endpoints/profile.py
# ============================================================================
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from typing import List
from jamvault.api.dependencies import get_reset_notifier, get_settings, get_stats_cache, get_storage, require_current_user
from jamvault.config import Settings
from jamvault.core.cache import StatsCache
from jamvault.db.models.activity import UserListeningHistory
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.history import UserListeningStats
from jamvault.schemas.user import (
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdate,
    UserResponse,
    UserUpdate,
)
from jamvault.services.file_service import IMAGES, file_service
from jamvault.services.reset_notifier import ResetNotifier
from jamvault.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

RESET_REQUESTED_MESSAGE = "If the account exists, a password reset link has been sent"

@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: User = Depends(require_current_user)
):
    return current_user

@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Update profile fields; changing the password requires the current one.
    Nothing is saved unless every check passes.
    """
    changing_password = profile_data.new_password is not None
    if changing_password and not user_service.check_current_password(current_user, profile_data.current_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    update_data = profile_data.user_update()
    if user_service.email_taken(storage, update_data.email, exclude_user_id=current_user.id):
        raise HTTPException(status_code=400, detail="Email already registered")

    if changing_password:
        storage.update_password(current_user.id, profile_data.new_password)
    user = storage.update_user(current_user.id, update_data)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.post("/profile/image", response_model=UserResponse)
async def upload_profile_image(
    file: UploadFile = File(...),
    storage: BaseStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_current_user)
):
    """Replace the profile picture"""
    path = await file_service.save_upload(file, IMAGES, app_settings)
    url = file_service.public_url(path, app_settings)
    return storage.update_user(current_user.id, UserUpdate(profile_image=url))

@router.get("/user/stats", response_model=UserListeningStats)
async def get_listening_stats(
    storage: BaseStorage = Depends(get_storage),
    stats_cache: StatsCache = Depends(get_stats_cache),
    current_user: User = Depends(require_current_user)
):
    """
    Listening totals and top songs, artists and genres
    Results are cached until the user records another listen
    """
    cached = stats_cache.get(current_user.id)
    if cached is not None:
        return cached

    stats = storage.get_user_listening_stats(current_user.id)
    stats_cache.store(current_user.id, stats)
    return stats

@router.get("/user/history", response_model=List[UserListeningHistory])
async def get_history(
    limit: int = Query(50, ge=1, le=500),
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """
    Get user's playback history, newest first
    """
    return storage.get_user_history(current_user.id, limit)

@router.post("/password-reset/request")
async def request_password_reset(
    reset_request: PasswordResetRequest,
    storage: BaseStorage = Depends(get_storage),
    notifier: ResetNotifier = Depends(get_reset_notifier),
):
    """
    Issue a reset token and hand it to the reset notifier. The response is
    the same whether or not the account exists.
    """
    user_service.request_password_reset(storage, notifier, reset_request.username, reset_request.email)
    return {"message": RESET_REQUESTED_MESSAGE}

@router.post("/password-reset/reset")
async def reset_password(
    reset_data: PasswordResetConfirm,
    storage: BaseStorage = Depends(get_storage),
):
    user = user_service.reset_password(storage, reset_data.token, reset_data.new_password)
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")
    return {"message": "Password has been reset"}
