# ============================================================================
# FILE: jamvault/schemas/social.py
# ============================================================================
from pydantic import Field
from typing import Any, Dict, Optional
from jamvault.schemas.base import CamelModel

class CommentCreate(CamelModel):
    comment: str = Field(min_length=1, max_length=1000)
    timestamp: Optional[int] = Field(default=None, ge=0)

class FavoriteStatus(CamelModel):
    is_favorite: bool

class LibraryStatus(CamelModel):
    is_in_library: bool

class GameCreate(CamelModel):
    game_type: str = Field(min_length=1, max_length=50)
    score: int = Field(default=0, ge=0)
    details: Dict[str, Any] = {}
