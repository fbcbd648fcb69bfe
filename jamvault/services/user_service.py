# ============================================================================
# FILE: jamvault/services/user_service.py
# ============================================================================
from typing import Optional
from jamvault.db.storage import BaseStorage
from jamvault.db.models.user import User
from jamvault.schemas.user import UserCreate
from jamvault.core.security import verify_password
from jamvault.services.reset_notifier import ResetNotifier
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for user operations"""

    def authenticate_user(self, storage: BaseStorage, username: str, password: str) -> Optional[User]:
        """Authenticate user with username and password"""
        user = storage.get_user_by_username(username)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    def username_taken(self, storage: BaseStorage, username: str) -> bool:
        return storage.get_user_by_username(username) is not None

    def email_taken(self, storage: BaseStorage, email: Optional[str], exclude_user_id: Optional[int] = None) -> bool:
        if not email:
            return False
        existing = storage.get_user_by_email(str(email))
        return existing is not None and existing.id != exclude_user_id

    def register_user(self, storage: BaseStorage, user_data: UserCreate) -> User:
        """Create a regular (non-admin) account"""
        user = storage.create_user(user_data, is_admin=False)
        logger.info(f"User registered: {user.username}")
        return user

    def check_current_password(self, user: User, current_password: Optional[str]) -> bool:
        """Confirm the current password before a change is allowed"""
        if not current_password or not verify_password(current_password, user.password):
            logger.info(f"Password change rejected for user {user.id}: wrong current password")
            return False
        return True

    def request_password_reset(
        self,
        storage: BaseStorage,
        notifier: ResetNotifier,
        username: Optional[str],
        email: Optional[str],
    ) -> bool:
        """Issue a reset token for the matching account, if any, and hand it to the notifier"""
        user = None
        if username:
            user = storage.get_user_by_username(username)
        if user is None and email:
            user = storage.get_user_by_email(str(email))
        if user is None:
            logger.info("Password reset requested for unknown account")
            return False
        token = storage.create_password_reset_token(user.id)
        notifier.send_reset(user, token)
        return True

    def reset_password(self, storage: BaseStorage, token: str, new_password: str) -> Optional[User]:
        user = storage.validate_password_reset_token(token)
        if user is None:
            return None
        return storage.update_password(user.id, new_password)

# Create singleton instance
user_service = UserService()
