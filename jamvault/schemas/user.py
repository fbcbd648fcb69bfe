# ============================================================================
# FILE: jamvault/schemas/user.py
# ============================================================================
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime
from jamvault.core.security import validate_password_strength
from jamvault.schemas.base import CamelModel

class UserCreate(CamelModel):
    """Schema for user registration"""
    username: str = Field(min_length=3, max_length=32)
    password: str
    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(default=None, max_length=64)
    first_name: Optional[str] = Field(default=None, max_length=64)
    last_name: Optional[str] = Field(default=None, max_length=64)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return validate_password_strength(value)

class UserLogin(CamelModel):
    """Schema for user login"""
    username: str
    password: str

class UserUpdate(CamelModel):
    """Fields of a user record that may be changed after registration"""
    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(default=None, max_length=64)
    first_name: Optional[str] = Field(default=None, max_length=64)
    last_name: Optional[str] = Field(default=None, max_length=64)
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_image: Optional[str] = None
    favorite_artists: Optional[List[str]] = None
    favorite_songs: Optional[List[int]] = None

class ProfileUpdate(UserUpdate):
    """Schema for PATCH /profile; a password change needs the current password"""
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_password_strength(value)

    @model_validator(mode="after")
    def require_current_password(self):
        if self.new_password is not None and not self.current_password:
            raise ValueError("Current password is required to set a new password")
        return self

    def user_update(self) -> UserUpdate:
        fields = self.model_dump(exclude_unset=True, exclude={"current_password", "new_password"})
        return UserUpdate(**fields)

class UserResponse(CamelModel):
    """Schema for user response (credentials never included)"""
    id: int
    username: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = False
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    favorite_artists: List[str] = []
    favorite_songs: List[int] = []
    created_at: datetime

class Token(BaseModel):
    """Schema for JWT token response"""
    access_token: str
    token_type: str = "bearer"

class PasswordResetRequest(CamelModel):
    """Identify the account by username or email"""
    username: Optional[str] = None
    email: Optional[EmailStr] = None

    @model_validator(mode="after")
    def require_identifier(self):
        if not self.username and not self.email:
            raise ValueError("Username or email is required")
        return self

class PasswordResetConfirm(CamelModel):
    token: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        return validate_password_strength(value)
