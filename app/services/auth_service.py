import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationError, ConflictError, InvalidTokenError, ParseError
from app.core.security import verify_password
from app.models import User, Role
from app.schemas.auth import RegisterRequest, AuthResponse
from app.services.jwt_service import JWTService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthService:
    """Service for handling authentication business logic."""

    @staticmethod
    def authenticate_user(db: Session, username: str, password: str) -> User:
        """
        Check a username/password pair.
        Raises AuthenticationError on unknown user or wrong password.
        """
        user = UserService.find_by_username(db, username)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError()
        return user

    @staticmethod
    def _token_response(jwt_service: JWTService, user: User) -> AuthResponse:
        return AuthResponse(
            access_token=jwt_service.issue_access_token(user),
            refresh_token=jwt_service.issue_refresh_token(user),
            username=user.username,
            email=user.email,
            role=user.role,
            expires_in=jwt_service.access_token_expiration_ms // 1000,
        )

    @staticmethod
    def register(db: Session, jwt_service: JWTService, data: RegisterRequest) -> AuthResponse:
        """
        Register a new USER account and return its first token pair.
        Raises ConflictError if the username or email is taken.
        """
        if UserService.user_exists(db, data.username):
            raise ConflictError("Username already exists")

        if UserService.user_exists_by_email(db, data.email):
            raise ConflictError("Email already exists")

        user = UserService.create_user(
            db,
            username=data.username,
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            role=Role.USER,
        )
        logger.info(f"Registered user {user.username}")

        return AuthService._token_response(jwt_service, user)

    @staticmethod
    def login(db: Session, jwt_service: JWTService, username: str, password: str) -> AuthResponse:
        user = AuthService.authenticate_user(db, username, password)
        return AuthService._token_response(jwt_service, user)

    @staticmethod
    def refresh(db: Session, jwt_service: JWTService, refresh_token: str) -> AuthResponse:
        """
        Exchange a refresh token for a brand-new access/refresh pair.

        The presented refresh token stays usable until it expires or is
        revoked through logout.
        """
        username = jwt_service.extract_subject(refresh_token)
        user = UserService.get_user_by_username(db, username)

        if not jwt_service.is_valid(refresh_token, user):
            raise InvalidTokenError("Invalid refresh token")

        return AuthService._token_response(jwt_service, user)

    @staticmethod
    def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
        if authorization_header and authorization_header.startswith(BEARER_PREFIX):
            return authorization_header[len(BEARER_PREFIX):].strip() or None
        return None

    @staticmethod
    def logout(jwt_service: JWTService, authorization_header: Optional[str]) -> None:
        """Revoke the bearer token, if any. Never fails from the caller's view."""
        token = AuthService.extract_bearer_token(authorization_header)
        if token is None:
            return
        try:
            jwt_service.revoke(token)
        except ParseError:
            # Unparseable or expired tokens are already unusable
            logger.info("Logout called with an invalid token; nothing to revoke")
