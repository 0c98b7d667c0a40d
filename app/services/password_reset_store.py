"""In-memory store of outstanding password reset tokens."""

import secrets
import string
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

TOKEN_LENGTH = 32
TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
TOKEN_EXPIRY = timedelta(hours=1)


@dataclass
class PasswordResetToken:
    email: str
    token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class PasswordResetStore:
    """
    Reset token -> (email, expiry) mapping.

    Several live tokens may exist for the same email. Expired entries are
    dropped on read and by sweep().
    """

    def __init__(self) -> None:
        self._tokens: dict[str, PasswordResetToken] = {}
        self._lock = threading.Lock()

    @staticmethod
    def generate_token(length: int = TOKEN_LENGTH) -> str:
        """Generate a secure random alphanumeric token."""
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))

    def issue(self, email: str) -> str:
        """Create a reset token for email, valid for one hour."""
        token = self.generate_token()
        entry = PasswordResetToken(
            email=email,
            token=token,
            expires_at=datetime.now(timezone.utc) + TOKEN_EXPIRY,
        )
        with self._lock:
            self._tokens[token] = entry
        return token

    def _live_entry(self, token: Optional[str]) -> Optional[PasswordResetToken]:
        if token is None:
            return None
        with self._lock:
            entry = self._tokens.get(token)
            if entry is None:
                return None
            if entry.is_expired(datetime.now(timezone.utc)):
                del self._tokens[token]
                return None
            return entry

    def is_valid(self, token: Optional[str]) -> bool:
        return self._live_entry(token) is not None

    def email_for(self, token: Optional[str]) -> Optional[str]:
        """Email bound to a live token, or None if the token is unknown or expired."""
        entry = self._live_entry(token)
        return entry.email if entry else None

    def consume(self, token: Optional[str]) -> Optional[str]:
        """
        Remove a live token and return its email.
        Only one caller can consume a given token; the rest get None.
        """
        if token is None:
            return None
        with self._lock:
            entry = self._tokens.pop(token, None)
        if entry is None or entry.is_expired(datetime.now(timezone.utc)):
            return None
        return entry.email

    def invalidate(self, token: Optional[str]) -> None:
        if token is None:
            return
        with self._lock:
            self._tokens.pop(token, None)

    def sweep(self) -> int:
        """Remove expired reset tokens. Returns count removed."""
        now = datetime.now(timezone.utc)
        with self._lock:
            expired = [token for token, entry in self._tokens.items() if entry.is_expired(now)]
            for token in expired:
                del self._tokens[token]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
