# ============================================================================
# FILE: jamvault/db/models/song_request.py
# ============================================================================
from pydantic import Field
from typing import List, Optional
from datetime import datetime
from enum import Enum
from jamvault.schemas.base import CamelModel

class SongRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class SongRequest(CamelModel):
    """A user's request for a song to be added; moderated by admins"""
    id: int
    title: str
    artist_name: str
    artist_id: Optional[int] = None
    featured_artists: List[str] = Field(default_factory=list)
    album: Optional[str] = None
    year: Optional[int] = None
    cover: Optional[str] = None
    notes: Optional[str] = None
    user_id: int
    status: SongRequestStatus = SongRequestStatus.PENDING
    admin_message: Optional[str] = None
    created_at: datetime
