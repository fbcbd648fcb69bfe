# ============================================================================
# FILE: jamvault/db/models/activity.py
# ============================================================================
from pydantic import Field
from typing import Any, Dict, Optional
from datetime import datetime
from jamvault.schemas.base import CamelModel

class Favorite(CamelModel):
    id: int
    user_id: int
    song_id: int
    added_at: datetime

class LibraryEntry(CamelModel):
    """A song saved to a user's library (independent of favorites)"""
    id: int
    user_id: int
    song_id: int
    added_at: datetime

class SongComment(CamelModel):
    id: int
    song_id: int
    user_id: int
    comment: str
    timestamp: Optional[int] = None  # position in the track, seconds
    created_at: datetime

class UserListeningHistory(CamelModel):
    """One recorded listen; never updated or deleted"""
    id: int
    user_id: int
    song_id: int
    listen_date: datetime
    duration: int = 0

class Game(CamelModel):
    """Result of a music mini-game round"""
    id: int
    user_id: int
    game_type: str
    score: int = 0
    details: Dict[str, Any] = Field(default_factory=dict)
    played_at: datetime
