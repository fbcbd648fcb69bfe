# ============================================================================
# FILE: jamvault/schemas/short_link.py
# ============================================================================
from pydantic import Field, field_validator
from typing import Optional
from jamvault.schemas.base import CamelModel

class ShortLinkCreate(CamelModel):
    """Short links only ever point at pages of this app"""
    target_url: str = Field(min_length=1, max_length=2048)
    type: str = "song"
    reference_id: Optional[int] = None

    @field_validator("target_url")
    @classmethod
    def check_app_path(cls, value: str) -> str:
        # '//host' and '/\host' are treated as absolute URLs by browsers
        if not value.startswith("/") or value[1:2] in ("/", "\\"):
            raise ValueError("Target must be a path within the app, e.g. /songs/1")
        if any(ch.isspace() or ord(ch) < 32 for ch in value):
            raise ValueError("Target must not contain whitespace or control characters")
        return value
