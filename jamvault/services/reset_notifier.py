# ============================================================================
# FILE: jamvault/services/reset_notifier.py
# ============================================================================
"""
Delivery of password reset tokens.

The API never returns a reset token to the caller. Whatever notifier sits on
app.state.reset_notifier hands it to the account owner instead. The default
keeps an in-process outbox that an operator (or a mail relay) drains.
"""
from datetime import datetime
from typing import List, Optional
from jamvault.db.models.user import User
import logging

logger = logging.getLogger(__name__)

class ResetMessage:
    """A reset token waiting to be delivered"""

    def __init__(self, user_id: int, username: str, email: Optional[str], token: str):
        self.user_id = user_id
        self.username = username
        self.email = email
        self.token = token
        self.created_at = datetime.utcnow()

class ResetNotifier:
    def send_reset(self, user: User, token: str) -> None:
        raise NotImplementedError

class OutboxResetNotifier(ResetNotifier):
    """Queue reset messages in memory and log that one is pending"""

    def __init__(self):
        self.outbox: List[ResetMessage] = []

    def send_reset(self, user: User, token: str) -> None:
        self.outbox.append(ResetMessage(user.id, user.username, user.email, token))
        # Never log the token itself
        logger.info(f"Password reset message queued for user {user.id} ({user.email or 'no email on file'})")
