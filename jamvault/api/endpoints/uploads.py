# ============================================================================
# FILE: jamvault/api/endpoints/uploads.py
# ============================================================================
from fastapi import APIRouter, Depends, File, UploadFile, status
from jamvault.api.dependencies import get_settings, require_current_user
from jamvault.config import Settings
from jamvault.db.models.user import User
from jamvault.schemas.music import ImageUploadResponse
from jamvault.services.file_service import IMAGES, file_service

router = APIRouter()

@router.post("/upload/image", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    app_settings: Settings = Depends(get_settings),
    current_user: User = Depends(require_current_user)
):
    """Store a cover or artist image and return its public URL"""
    path = await file_service.save_upload(file, IMAGES, app_settings)
    return ImageUploadResponse(url=file_service.public_url(path, app_settings))
