from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import ForbiddenError, InvalidTokenError
from app.models import User, Role
from app.services.jwt_service import JWTService
from app.services.password_reset_store import PasswordResetStore
from app.services.user_service import UserService


# HTTP Bearer token scheme; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)


def get_jwt_service(request: Request) -> JWTService:
    """Token issuer created by the application lifespan."""
    return request.app.state.jwt_service


def get_password_reset_store(request: Request) -> PasswordResetStore:
    return request.app.state.password_resets


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.
    Raises InvalidTokenError if the token is missing, invalid, revoked,
    or the user no longer exists.
    """
    if credentials is None:
        raise InvalidTokenError("Could not validate credentials")

    token = credentials.credentials
    username = jwt_service.extract_subject(token)

    user = UserService.find_by_username(db, username)
    if user is None or not jwt_service.is_valid(token, user):
        raise InvalidTokenError("Could not validate credentials")

    return user


def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency to require admin role.
    Raises ForbiddenError if user is not an admin.
    """
    if current_user.role != Role.ADMIN:
        raise ForbiddenError("Admin access required")
    return current_user
