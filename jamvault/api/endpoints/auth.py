# ============================================================================
# FILE: jamvault/api/endpoints/auth.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from datetime import timedelta
from jamvault.api.dependencies import get_settings, get_storage, require_current_user
from jamvault.config import Settings
from jamvault.core.security import create_access_token
from jamvault.db.models.user import User
from jamvault.db.storage import BaseStorage
from jamvault.schemas.user import Token, UserCreate, UserLogin, UserResponse
from jamvault.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _issue_token(response: Response, user: User, app_settings: Settings) -> str:
    """Create an access token and mirror it into the session cookie"""
    expires = timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": user.username}, expires_delta=expires)
    response.set_cookie(
        key=app_settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=int(expires.total_seconds()),
    )
    return access_token

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    storage: BaseStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
):
    """
    Register a new user account and log it in
    """
    if user_service.username_taken(storage, user_data.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )

    if user_service.email_taken(storage, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = user_service.register_user(storage, user_data)
    _issue_token(response, user, app_settings)
    return user

@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    response: Response,
    storage: BaseStorage = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
):
    """
    Login with username and password
    Returns JWT access token (also set as a cookie)
    """
    user = user_service.authenticate_user(storage, credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = _issue_token(response, user, app_settings)
    logger.info(f"User logged in: {user.username}")
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/logout")
async def logout(
    response: Response,
    app_settings: Settings = Depends(get_settings),
):
    """Clear the session cookie"""
    response.delete_cookie(app_settings.AUTH_COOKIE_NAME)
    return {"message": "Logged out"}

@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(require_current_user)
):
    """
    Get current user information
    Requires authentication
    """
    return current_user
