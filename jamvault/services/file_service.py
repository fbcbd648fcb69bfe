# ============================================================================
# FILE: jamvault/services/file_service.py
# ============================================================================
from fastapi import HTTPException, UploadFile, status
from typing import List
from jamvault.config import Settings
import logging
import os
import re
import uuid

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
AUDIO = "audio"
IMAGES = "images"

class FileService:
    """Stores uploaded audio and image files under the upload directory"""

    def safe_filename(self, original_name: str) -> str:
        """Build '<sanitized-stem>-<uuid4><ext>' from a client filename"""
        stem, extension = os.path.splitext(os.path.basename(original_name or "upload"))
        safe_stem = re.sub(r"[^a-z0-9]", "_", stem, flags=re.IGNORECASE).lower() or "upload"
        return f"{safe_stem}-{uuid.uuid4()}{extension.lower()}"

    def _check_extension(self, filename: str, allowed: List[str], kind: str) -> None:
        extension = os.path.splitext(filename or "")[1].lower()
        if extension not in allowed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Only {kind} files are allowed ({', '.join(allowed)})",
            )

    async def save_upload(self, upload: UploadFile, kind: str, app_settings: Settings) -> str:
        """
        Validate and write an upload to disk, returning the stored path.

        Raises 400 for a disallowed extension and 413 when the file is
        larger than the configured limit; a partial file is removed.
        """
        if kind == AUDIO:
            allowed, max_size = app_settings.ALLOWED_AUDIO_EXTENSIONS, app_settings.MAX_AUDIO_SIZE
        else:
            allowed, max_size = app_settings.ALLOWED_IMAGE_EXTENSIONS, app_settings.MAX_IMAGE_SIZE
        self._check_extension(upload.filename, allowed, kind)

        target_dir = os.path.join(app_settings.UPLOAD_DIR, kind)
        os.makedirs(target_dir, exist_ok=True)
        path = os.path.join(target_dir, self.safe_filename(upload.filename))

        written = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_size:
                        raise HTTPException(
                            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                            detail=f"File exceeds the {max_size // (1024 * 1024)}MB limit",
                        )
                    out.write(chunk)
        except HTTPException:
            self.delete_file(path)
            raise
        finally:
            await upload.close()

        logger.info(f"Stored {kind} upload: {path} ({written} bytes)")
        return path

    def delete_file(self, path: str) -> bool:
        try:
            if path and os.path.exists(path):
                os.remove(path)
                return True
        except OSError as e:
            logger.error(f"Error deleting file {path}: {e}")
        return False

    def public_url(self, path: str, app_settings: Settings) -> str:
        """Map a stored path to its URL under the /uploads mount"""
        relative = os.path.relpath(path, app_settings.UPLOAD_DIR).replace(os.sep, "/")
        return f"/uploads/{relative}"

# Create singleton instance
file_service = FileService()
