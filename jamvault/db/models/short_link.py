# ============================================================================
# FILE: jamvault/db/models/short_link.py
# ============================================================================
from typing import Optional
from datetime import datetime
from jamvault.schemas.base import CamelModel

class ShortLink(CamelModel):
    """Shareable short id pointing at a target URL"""
    id: int
    short_id: str
    target_url: str
    type: str
    reference_id: Optional[int] = None
    user_id: int
    clicks: int = 0
    created_at: datetime
