import logging
import time
from datetime import timedelta
from typing import Any, Callable, Optional, TypeVar
from uuid import uuid4

from jose import JWTError

from app.core.config import settings
from app.core.exceptions import ParseError
from app.core.security import encode_token, decode_token
from app.models import User
from app.services.token_blacklist import TokenBlacklist

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JWTService:
    """Issues, parses, validates and revokes signed session tokens."""

    def __init__(
        self,
        token_blacklist: TokenBlacklist,
        access_token_expiration_ms: Optional[int] = None,
        refresh_token_expiration_ms: Optional[int] = None,
    ):
        self.token_blacklist = token_blacklist
        self.access_token_expiration_ms = (
            access_token_expiration_ms
            if access_token_expiration_ms is not None
            else settings.JWT_EXPIRATION_MS
        )
        self.refresh_token_expiration_ms = (
            refresh_token_expiration_ms
            if refresh_token_expiration_ms is not None
            else settings.JWT_REFRESH_EXPIRATION_MS
        )

    @staticmethod
    def _user_claims(user: User) -> dict[str, Any]:
        role = user.role.value if hasattr(user.role, "value") else user.role
        return {
            "sub": user.username,
            "role": role,
            "email": user.email,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "jti": str(uuid4()),
        }

    def _build_token(
        self,
        user: User,
        expiration_ms: int,
        extra_claims: Optional[dict[str, Any]] = None,
    ) -> str:
        claims = dict(extra_claims or {})
        claims.update(self._user_claims(user))
        return encode_token(claims, timedelta(milliseconds=expiration_ms))

    def issue_access_token(
        self, user: User, extra_claims: Optional[dict[str, Any]] = None
    ) -> str:
        """Create a short-lived access token for user."""
        return self._build_token(user, self.access_token_expiration_ms, extra_claims)

    def issue_refresh_token(self, user: User) -> str:
        """Create a long-lived refresh token for user."""
        return self._build_token(user, self.refresh_token_expiration_ms)

    def extract_claims(self, token: str) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Raises ParseError if the signature, structure, issuer, audience or
        expiry check fails.
        """
        if not token:
            raise ParseError("Token is missing")
        try:
            return decode_token(token)
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise ParseError() from e

    def extract_claim(self, token: str, selector: Callable[[dict[str, Any]], T]) -> T:
        return selector(self.extract_claims(token))

    def extract_subject(self, token: str) -> str:
        return self.extract_claim(token, lambda claims: claims["sub"])

    def is_valid(self, token: str, user: User) -> bool:
        """True iff token is not revoked, belongs to user and has not expired."""
        if self.token_blacklist.is_revoked(token):
            return False
        try:
            claims = self.extract_claims(token)
        except ParseError:
            return False
        return claims.get("sub") == user.username and not self._is_expired(claims)

    @staticmethod
    def _is_expired(claims: dict[str, Any]) -> bool:
        return claims["exp"] < time.time()

    def revoke(self, token: str) -> None:
        """Blacklist a token until its own expiry."""
        expires_at_ms = self.extract_claim(token, lambda claims: int(claims["exp"]) * 1000)
        self.token_blacklist.revoke(token, expires_at_ms)
