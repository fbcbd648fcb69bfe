# ============================================================================
# FILE: jamvault/api/dependencies.py
# ============================================================================
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jamvault.config import Settings
from jamvault.core.cache import StatsCache
from jamvault.core.security import decode_access_token
from jamvault.db.storage import BaseStorage
from jamvault.db.models.user import User
from jamvault.services.remote_service import RemoteControlHub
from jamvault.services.reset_notifier import ResetNotifier
from typing import Optional

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)

def get_storage(request: Request) -> BaseStorage:
    """The repository created once at startup"""
    return request.app.state.storage

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_stats_cache(request: Request) -> StatsCache:
    return request.app.state.stats_cache

def get_remote_hub(request: Request) -> RemoteControlHub:
    return request.app.state.remote_hub

def get_reset_notifier(request: Request) -> ResetNotifier:
    return request.app.state.reset_notifier

def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    storage: BaseStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
) -> Optional[User]:
    """
    Get current authenticated user from the bearer token or session cookie
    Returns None if no token or invalid token (allows anonymous access)
    """
    if not token:
        token = request.cookies.get(app_settings.AUTH_COOKIE_NAME)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
        username: str = payload.get("sub")
        if username is None:
            return None
    except HTTPException:
        return None

    return storage.get_user_by_username(username)

def require_current_user(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    """
    Require authenticated user (raises 401 if not authenticated)
    Use this dependency for protected endpoints
    """
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user

def require_admin(
    current_user: User = Depends(require_current_user)
) -> User:
    """Require an authenticated administrator (403 otherwise)"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return current_user
