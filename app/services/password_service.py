import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.core.security import verify_password
from app.models import User
from app.services.password_reset_store import PasswordResetStore
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = "Invalid or expired reset token"


class PasswordService:
    """Forgot/reset, change and admin force-change password flows."""

    @staticmethod
    def forgot_password(db: Session, resets: PasswordResetStore, email: str) -> Optional[str]:
        """
        Issue a reset token when email belongs to a user.
        Returns None for unknown emails; callers must not reveal the difference.
        """
        if not UserService.user_exists_by_email(db, email):
            logger.info(f"Password reset requested for unknown email: {email}")
            return None

        token = resets.issue(email)
        # TODO: deliver the token by email once an outbound mail service exists
        logger.info(f"Password reset token generated for {email}")
        return token

    @staticmethod
    def validate_reset_token(resets: PasswordResetStore, token: Optional[str]) -> bool:
        return resets.is_valid(token)

    @staticmethod
    def reset_password(
        db: Session,
        resets: PasswordResetStore,
        token: str,
        new_password: str,
    ) -> None:
        """
        Set a new password for the account bound to a reset token.
        Every failure raises the same InvalidArgumentError.
        """
        email = resets.consume(token)
        if email is None:
            raise InvalidArgumentError(INVALID_RESET_TOKEN)

        user = UserService.find_by_email(db, email)
        if user is None:
            logger.warning(f"Reset token issued for {email} points at a missing account")
            raise InvalidArgumentError(INVALID_RESET_TOKEN)

        UserService.update_password(db, user, new_password)
        logger.info(f"Password reset successful for email: {email}")

    @staticmethod
    def change_password(
        db: Session,
        user: User,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change user's password after verifying current password."""
        if not verify_password(current_password, user.password_hash):
            raise InvalidArgumentError("Current password is incorrect")

        UserService.update_password(db, user, new_password)
        logger.info(f"Password changed successfully for user: {user.username}")

    @staticmethod
    def force_change_password(db: Session, username: str, new_password: str) -> None:
        """Set any user's password without the current one (admin only)."""
        user = UserService.find_by_username(db, username)
        if user is None:
            raise NotFoundError(detail="User not found")

        UserService.update_password(db, user, new_password)
        logger.info(f"Password force changed for user: {username} by admin")
