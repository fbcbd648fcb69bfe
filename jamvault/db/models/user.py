# ============================================================================
# FILE: jamvault/db/models/user.py
# ============================================================================
from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from jamvault.schemas.base import CamelModel

class User(CamelModel):
    """User record; `password` holds the scrypt hash, never plaintext"""
    id: int
    username: str
    password: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = False
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    favorite_artists: List[str] = Field(default_factory=list)
    favorite_songs: List[int] = Field(default_factory=list)
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None
    stats: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
