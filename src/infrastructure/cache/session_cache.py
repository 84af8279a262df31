"""Redis implementation of SessionCacheProtocol.

Fast tier of the session store. Records expire on their own through PX
TTLs equal to the remaining lifetime; per-user index sets are kept in step
with every write and delete through atomic pipelines.

Key Patterns:
    - {prefix}:session:{session_id} -> JSON serialized Session
    - {prefix}:user:{user_id}:sessions -> Redis Set of session ids
    - {prefix}:remember_me:{token_hash} -> JSON serialized RememberMeToken
    - {prefix}:user:{user_id}:remember_me -> Redis Set of token hashes

Architecture:
    - Implements SessionCacheProtocol (structural typing)
    - Uses RedisAdapter for low-level operations
    - Returns Failure on outage so the store can fall back and record it
    - Undecodable entries are treated as misses and dropped
"""

import logging
from datetime import datetime
from typing import Any

from src.core.result import Failure, Result, Success
from src.domain.entities import RememberMeToken, Session
from src.domain.enums import LoginType
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.redis_adapter import RedisAdapter
from src.infrastructure.errors import CacheError

logger = logging.getLogger(__name__)

# Index sets outlive any single member; prune_indexes() removes stragglers.
DEFAULT_INDEX_TTL_MS = 31 * 24 * 60 * 60 * 1000


def _session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "session_id": session.session_id,
        "user_id": session.user_id,
        "created_at": session.created_at.isoformat(),
        "last_activity": session.last_activity.isoformat(),
        "expires_at": session.expires_at.isoformat(),
        "max_age_ms": session.max_age_ms,
        "ip_address": session.ip_address,
        "user_agent": session.user_agent,
        "device_fingerprint": session.device_fingerprint,
        "login_type": session.login_type.value,
        "persistent": session.persistent,
    }


def _session_from_dict(data: dict[str, Any]) -> Session:
    return Session(
        session_id=data["session_id"],
        user_id=data["user_id"],
        created_at=datetime.fromisoformat(data["created_at"]),
        last_activity=datetime.fromisoformat(data["last_activity"]),
        expires_at=datetime.fromisoformat(data["expires_at"]),
        max_age_ms=int(data["max_age_ms"]),
        ip_address=data["ip_address"],
        user_agent=data["user_agent"],
        device_fingerprint=data["device_fingerprint"],
        login_type=LoginType(data["login_type"]),
        persistent=bool(data["persistent"]),
    )


def _token_to_dict(token: RememberMeToken) -> dict[str, Any]:
    return {
        "token_hash": token.token_hash,
        "user_id": token.user_id,
        "device_fingerprint": token.device_fingerprint,
        "created_at": token.created_at.isoformat(),
        "expires_at": token.expires_at.isoformat(),
    }


def _token_from_dict(data: dict[str, Any]) -> RememberMeToken:
    return RememberMeToken(
        token_hash=data["token_hash"],
        user_id=data["user_id"],
        device_fingerprint=data["device_fingerprint"],
        created_at=datetime.fromisoformat(data["created_at"]),
        expires_at=datetime.fromisoformat(data["expires_at"]),
    )


class RedisSessionCache:
    """Redis implementation of SessionCacheProtocol.

    Note: Does NOT inherit from SessionCacheProtocol (uses structural typing).

    Attributes:
        _redis: RedisAdapter instance for cache operations.
        _keys: Key layout.
        _index_ttl_ms: Time to live of per-user index sets.
    """

    def __init__(
        self,
        redis_adapter: RedisAdapter,
        keys: CacheKeys | None = None,
        *,
        index_ttl_ms: int = DEFAULT_INDEX_TTL_MS,
        sweep_timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize session cache.

        Args:
            redis_adapter: RedisAdapter instance for Redis operations.
            keys: Key layout (defaults to the "sessions" prefix).
            index_ttl_ms: Time to live of per-user index sets.
            sweep_timeout_seconds: Timeout for SCAN-based index pruning.
        """
        self._redis = redis_adapter
        self._keys = keys or CacheKeys()
        self._index_ttl_ms = index_ttl_ms
        self._sweep_timeout = sweep_timeout_seconds

    async def ping(self) -> Result[bool, CacheError]:
        """Check the cache is reachable."""
        return await self._redis.ping()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def get_session(self, session_id: str) -> Result[Session | None, CacheError]:
        """Get session from cache.

        Args:
            session_id: Session identifier.

        Returns:
            Session if cached, None on miss, or CacheError on outage.
        """
        result = await self._redis.get_json(self._keys.session(session_id))

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=data):
                try:
                    return Success(value=_session_from_dict(data))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(
                        "Failed to deserialize session from cache",
                        extra={"session": session_id[:8], "error": str(e)},
                    )
                    await self.delete_sessions(None, [session_id])
                    return Success(value=None)
            case Failure(error=err):
                return Failure(error=err)

    async def put_session(self, session: Session, *, now: datetime) -> Result[None, CacheError]:
        """Cache a session and index it under its owner.

        TTL equals the session's remaining lifetime. Already-expired
        sessions are not cached.

        Args:
            session: Session to cache.
            now: Current time used to compute the TTL.
        """
        ttl_ms = session.remaining_ms(now)
        if ttl_ms <= 0:
            return Success(value=None)

        return await self._redis.set_json_indexed(
            self._keys.session(session.session_id),
            _session_to_dict(session),
            ttl_ms=ttl_ms,
            index_key=self._keys.user_sessions(session.user_id),
            member=session.session_id,
            index_ttl_ms=self._index_ttl_ms,
        )

    async def replace_session(
        self, session: Session, *, now: datetime
    ) -> Result[bool, CacheError]:
        """Overwrite a cached session only if it is still cached.

        Returns:
            True if replaced, False if the session was not cached, or CacheError.
        """
        ttl_ms = session.remaining_ms(now)
        if ttl_ms <= 0:
            return Success(value=False)

        return await self._redis.replace_json(
            self._keys.session(session.session_id),
            _session_to_dict(session),
            ttl_ms=ttl_ms,
        )

    async def delete_sessions(
        self, user_id: str | None, session_ids: list[str]
    ) -> Result[list[str], CacheError]:
        """Delete sessions and their index entries atomically.

        Args:
            user_id: Owner whose index to update (None when unknown).
            session_ids: Sessions to delete.

        Returns:
            Ids whose cache record existed, or CacheError.
        """
        result = await self._redis.delete_indexed(
            [self._keys.session(session_id) for session_id in session_ids],
            index_key=self._keys.user_sessions(user_id) if user_id else None,
            members=session_ids,
        )

        match result:
            case Success(value=flags):
                return Success(
                    value=[sid for sid, existed in zip(session_ids, flags) if existed]
                )
            case Failure(error=err):
                return Failure(error=err)

    async def user_session_ids(self, user_id: str) -> Result[set[str], CacheError]:
        """Get session ids in a user's index."""
        return await self._redis.set_members(self._keys.user_sessions(user_id))

    # ------------------------------------------------------------------
    # Remember-me tokens
    # ------------------------------------------------------------------

    async def get_token(self, token_hash: str) -> Result[RememberMeToken | None, CacheError]:
        """Get remember-me token from cache.

        Args:
            token_hash: SHA-256 of the plaintext token.

        Returns:
            Token if cached, None on miss, or CacheError on outage.
        """
        result = await self._redis.get_json(self._keys.remember_me(token_hash))

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=data):
                try:
                    return Success(value=_token_from_dict(data))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(
                        "Failed to deserialize remember-me token from cache",
                        extra={"token": token_hash[:8], "error": str(e)},
                    )
                    await self.delete_tokens(None, [token_hash])
                    return Success(value=None)
            case Failure(error=err):
                return Failure(error=err)

    async def put_token(
        self, token: RememberMeToken, *, now: datetime
    ) -> Result[None, CacheError]:
        """Cache a remember-me token and index it under its owner."""
        ttl_ms = token.remaining_ms(now)
        if ttl_ms <= 0:
            return Success(value=None)

        return await self._redis.set_json_indexed(
            self._keys.remember_me(token.token_hash),
            _token_to_dict(token),
            ttl_ms=ttl_ms,
            index_key=self._keys.user_remember_me(token.user_id),
            member=token.token_hash,
            index_ttl_ms=self._index_ttl_ms,
        )

    async def delete_tokens(
        self, user_id: str | None, token_hashes: list[str]
    ) -> Result[list[str], CacheError]:
        """Delete tokens and their index entries atomically."""
        result = await self._redis.delete_indexed(
            [self._keys.remember_me(token_hash) for token_hash in token_hashes],
            index_key=self._keys.user_remember_me(user_id) if user_id else None,
            members=token_hashes,
        )

        match result:
            case Success(value=flags):
                return Success(
                    value=[h for h, existed in zip(token_hashes, flags) if existed]
                )
            case Failure(error=err):
                return Failure(error=err)

    async def user_token_hashes(self, user_id: str) -> Result[set[str], CacheError]:
        """Get token hashes in a user's index."""
        return await self._redis.set_members(self._keys.user_remember_me(user_id))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def prune_indexes(self) -> Result[int, CacheError]:
        """Remove index members whose record has expired or vanished.

        Records expire through Redis TTLs, which leaves their ids behind in
        the per-user sets. Runs with the sweep timeout rather than the
        per-request one.

        Returns:
            Number of index members removed, or CacheError.
        """
        pruned = 0
        for pattern, record_key in (
            (self._keys.user_sessions_pattern(), self._keys.session),
            (self._keys.user_remember_me_pattern(), self._keys.remember_me),
        ):
            scan = await self._redis.scan_keys(pattern, timeout=self._sweep_timeout)
            if isinstance(scan, Failure):
                return scan

            for index_key in scan.value:
                members = await self._redis.set_members(index_key)
                if isinstance(members, Failure):
                    return members

                ids = sorted(members.value)
                exists = await self._redis.exists_many(
                    [record_key(member) for member in ids],
                    timeout=self._sweep_timeout,
                )
                if isinstance(exists, Failure):
                    return exists

                dangling = [member for member, ok in zip(ids, exists.value) if not ok]
                removed = await self._redis.remove_members(index_key, dangling)
                if isinstance(removed, Failure):
                    return removed
                pruned += removed.value

        if pruned:
            logger.info("Pruned dangling cache index entries", extra={"pruned": pruned})
        return Success(value=pruned)
