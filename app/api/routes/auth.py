from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, get_jwt_service
from app.core.exceptions import InvalidArgumentError
from app.core.rate_limit import limiter, REGISTER_LIMIT, LOGIN_LIMIT, REFRESH_LIMIT
from app.core.sanitization import (
    sanitize_email,
    sanitize_name,
    validate_email,
    validate_username,
)
from app.models import User
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    AuthResponse,
    LogoutResponse,
    UserProfileResponse,
)
from app.services.auth_service import AuthService
from app.services.jwt_service import JWTService
from app.services.user_service import UserService


router = APIRouter(prefix="/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
def register(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """
    Register a new user with the USER role.
    Returns access and refresh tokens.
    """
    data.username = data.username.strip()
    data.email = sanitize_email(data.email)
    data.first_name = sanitize_name(data.first_name)
    data.last_name = sanitize_name(data.last_name)

    if not validate_username(data.username):
        raise InvalidArgumentError(
            "Username must be 3-50 characters of letters, digits, '.', '_' or '-'"
        )
    if not validate_email(data.email):
        raise InvalidArgumentError("Email must be valid")
    if not data.first_name or not data.last_name:
        raise InvalidArgumentError("First name and last name are required")

    return AuthService.register(db, jwt_service, data)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """Authenticate user credentials and return JWT tokens."""
    return AuthService.login(db, jwt_service, data.username.strip(), data.password)


@router.post("/refresh", response_model=AuthResponse)
@limiter.limit(REFRESH_LIMIT)
def refresh_token(
    request: Request,
    data: RefreshTokenRequest,
    db: Session = Depends(get_db),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """Issue a new access/refresh pair from a valid refresh token."""
    return AuthService.refresh(db, jwt_service, data.refresh_token)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    authorization: Optional[str] = Header(default=None),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """Revoke the bearer token sent in the Authorization header, if any."""
    AuthService.logout(jwt_service, authorization)
    return LogoutResponse(message="Logout successful")


@router.get("/profile", response_model=UserProfileResponse)
def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return the profile of the authenticated user."""
    return UserService.get_user_profile(db, current_user.username)
