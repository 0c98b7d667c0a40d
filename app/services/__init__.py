from app.services.auth_service import AuthService
from app.services.jwt_service import JWTService
from app.services.password_reset_store import PasswordResetStore
from app.services.password_service import PasswordService
from app.services.token_blacklist import TokenBlacklist
from app.services.user_service import UserService

__all__ = [
    "AuthService",
    "JWTService",
    "PasswordResetStore",
    "PasswordService",
    "TokenBlacklist",
    "UserService",
]
