# ============================================================================
# FILE: jamvault/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "JamVault"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Redis cache (listening stats)
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_EXPIRE_SECONDS: int = 300

    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    AUTH_COOKIE_NAME: str = "access_token"
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Seed accounts recreated on every boot
    SEED_DEFAULT_USERS: bool = True
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_USER_PASSWORD: str = "user123"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_AUDIO_SIZE: int = 50 * 1024 * 1024
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024
    ALLOWED_AUDIO_EXTENSIONS: List[str] = [".mp3", ".wav", ".ogg", ".aac", ".flac"]
    ALLOWED_IMAGE_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

    # Remote control
    REMOTE_WS_PATH: str = "/ws/remote"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
