"""Cache key construction utilities.

Centralized key construction for the session fast tier. All keys follow the
pattern: {prefix}:{resource}:{id}

Usage:
    from src.core.config import get_settings
    from src.infrastructure.cache.cache_keys import CacheKeys

    keys = CacheKeys(prefix=get_settings().cache_key_prefix)
    session_key = keys.session(session_id)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheKeys:
    """Centralized cache key construction.

    Attributes:
        prefix: Cache key prefix (typically "sessions").

    Example:
        keys = CacheKeys(prefix="sessions")
        keys.session("ab12...")  # "sessions:session:ab12..."
    """

    prefix: str = "sessions"

    def session(self, session_id: str) -> str:
        """Session record key.

        Pattern: {prefix}:session:{session_id}
        """
        return f"{self.prefix}:session:{session_id}"

    def user_sessions(self, user_id: str) -> str:
        """Per-user session index (Redis set of session ids).

        Pattern: {prefix}:user:{user_id}:sessions
        """
        return f"{self.prefix}:user:{user_id}:sessions"

    def remember_me(self, token_hash: str) -> str:
        """Remember-me token record key.

        Pattern: {prefix}:remember_me:{token_hash}
        """
        return f"{self.prefix}:remember_me:{token_hash}"

    def user_remember_me(self, user_id: str) -> str:
        """Per-user remember-me index (Redis set of token hashes).

        Pattern: {prefix}:user:{user_id}:remember_me
        """
        return f"{self.prefix}:user:{user_id}:remember_me"

    def user_sessions_pattern(self) -> str:
        """SCAN pattern matching every per-user session index."""
        return f"{self.prefix}:user:*:sessions"

    def user_remember_me_pattern(self) -> str:
        """SCAN pattern matching every per-user remember-me index."""
        return f"{self.prefix}:user:*:remember_me"
