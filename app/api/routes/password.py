import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, get_password_reset_store, require_admin
from app.core.config import settings
from app.core.rate_limit import limiter, FORGOT_PASSWORD_LIMIT, RESET_PASSWORD_LIMIT
from app.core.sanitization import sanitize_email
from app.models import User
from app.schemas.password import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    ChangePasswordRequest,
    ForcePasswordChangeRequest,
    MessageResponse,
    ResetTokenValidationResponse,
)
from app.services.password_reset_store import PasswordResetStore
from app.services.password_service import PasswordService

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If the email exists, a reset token has been generated"

router = APIRouter(prefix="/v1/password", tags=["Password Management"])


@router.post("/forgot", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
@limiter.limit(FORGOT_PASSWORD_LIMIT)
def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    resets: PasswordResetStore = Depends(get_password_reset_store),
):
    """
    Request a password reset token.
    The response is the same whether or not the email is registered.
    """
    email = sanitize_email(data.email)
    try:
        token = PasswordService.forgot_password(db, resets, email)
    except Exception as e:
        logger.error(f"Error processing forgot password request for email {email}: {e}", exc_info=True)
        return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)

    if token and settings.EXPOSE_RESET_TOKEN:
        return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE, token=token)
    return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset", response_model=MessageResponse)
@limiter.limit(RESET_PASSWORD_LIMIT)
def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    db: Session = Depends(get_db),
    resets: PasswordResetStore = Depends(get_password_reset_store),
):
    """Reset a password using a reset token."""
    PasswordService.reset_password(db, resets, data.reset_token, data.new_password)
    return MessageResponse(message="Password reset successfully")


@router.post("/change", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Change the current user's password.
    Requires current password verification.
    """
    PasswordService.change_password(db, current_user, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/force-change", response_model=MessageResponse)
def force_password_change(
    data: ForcePasswordChangeRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Set any user's password without knowing the current one. Admin only."""
    PasswordService.force_change_password(db, data.username.strip(), data.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/reset-token/validate", response_model=ResetTokenValidationResponse)
def validate_reset_token(
    token: str = Query(...),
    resets: PasswordResetStore = Depends(get_password_reset_store),
):
    """Check whether a reset token is valid."""
    if PasswordService.validate_reset_token(resets, token):
        return ResetTokenValidationResponse(valid=True, message="Token is valid")
    return ResetTokenValidationResponse(valid=False, message="Token is invalid or expired")
