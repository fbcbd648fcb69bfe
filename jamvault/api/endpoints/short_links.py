# ============================================================================
# FILE: jamvault/api/endpoints/short_links.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from typing import List
from jamvault.api.dependencies import get_storage, require_current_user
from jamvault.db.models.short_link import ShortLink
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.short_link import ShortLinkCreate
import logging

logger = logging.getLogger(__name__)
router = APIRouter()
redirect_router = APIRouter()

@router.get("", response_model=List[ShortLink])
async def list_short_links(
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    return storage.get_short_links_by_user(current_user.id)

@router.post("", response_model=ShortLink, status_code=status.HTTP_201_CREATED)
async def create_short_link(
    link_data: ShortLinkCreate,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Create a shareable short link (e.g. for a song)"""
    link = storage.create_short_link(current_user.id, link_data)
    logger.info(f"Short link created: {link.short_id} -> {link.target_url}")
    return link

@router.get("/{short_id}", response_model=ShortLink)
async def resolve_short_link(
    short_id: str,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    """Resolve a short id and count the click"""
    link = storage.increment_short_link_clicks(short_id)
    if not link:
        raise HTTPException(status_code=404, detail="Short link not found")
    return link

@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_short_link(
    link_id: int,
    storage: BaseStorage = Depends(get_storage),
    current_user: User = Depends(require_current_user)
):
    link = storage.get_short_link(link_id)
    if not link:
        raise HTTPException(status_code=404, detail="Short link not found")
    if link.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    storage.delete_short_link(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@redirect_router.get("/s/{short_id}")
async def follow_short_link(
    short_id: str,
    storage: BaseStorage = Depends(get_storage),
):
    """Public redirect for shared links"""
    link = storage.increment_short_link_clicks(short_id)
    if not link:
        raise HTTPException(status_code=404, detail="Short link not found")
    return RedirectResponse(link.target_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
