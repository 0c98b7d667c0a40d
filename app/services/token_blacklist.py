"""In-memory revocation store for signed session tokens."""

import threading
import time
from typing import Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenBlacklist:
    """
    Maps a revoked token to the epoch-millis instant it expires.

    Entries are evicted lazily when a lookup finds them expired, and in bulk
    by sweep(). A token absent from the store is not revoked.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, int] = {}  # token -> expiry (epoch millis)
        self._lock = threading.Lock()

    def revoke(self, token: Optional[str], expires_at_ms: int) -> None:
        """Blacklist a token until expires_at_ms. Re-revoking overwrites the expiry."""
        if not token or not token.strip():
            return
        with self._lock:
            self._tokens[token] = expires_at_ms

    def is_revoked(self, token: Optional[str]) -> bool:
        """Check if a token is blacklisted, evicting it if its expiry has passed."""
        if not token or not token.strip():
            return False
        with self._lock:
            expires_at_ms = self._tokens.get(token)
            if expires_at_ms is None:
                return False
            if _now_ms() > expires_at_ms:
                del self._tokens[token]
                return False
            return True

    def sweep(self) -> int:
        """Remove expired entries. Returns count removed."""
        now = _now_ms()
        with self._lock:
            expired = [token for token, exp in self._tokens.items() if exp < now]
            for token in expired:
                del self._tokens[token]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
