"""Two-tier session store.

Redis is the fast tier, the relational database is the durable tier. The
store hides the split from the service layer: reads try the cache and fall
back to the database, writes go to the cache first and are mirrored to the
database according to WriteConsistency.

Failure model:
    - Cache faults are absorbed. They flip ``cache_available`` to False,
      are logged once as a warning and the durable tier answers instead.
    - Durable faults (SQLAlchemyError, OSError, timeouts) are returned as
      Failure(StorageUnavailableError). No retries happen here.

Cache deletes that fail during an outage are remembered; reads skip the
cache for those ids and retry the invalidation until it succeeds, so a
destroyed session is never served from a stale cache entry.
"""

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import RememberMeToken, Session
from src.domain.enums import WriteConsistency
from src.domain.errors import StorageUnavailableError
from src.domain.protocols import (
    ClockProtocol,
    LoggerProtocol,
    RememberMeTokenRepository,
    SessionCacheProtocol,
    SessionRepository,
)
from src.domain.value_objects import CleanupReport, SessionCounts
from src.infrastructure.enums import InfrastructureErrorCode

DEFAULT_DURABLE_TIMEOUT_SECONDS = 2.0

T = TypeVar("T")


def _group_by_owner(pairs: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """Group (record_id, user_id) pairs by user."""
    grouped: dict[str, list[str]] = defaultdict(list)
    for record_id, user_id in pairs:
        grouped[user_id].append(record_id)
    return grouped


class TieredSessionStore:
    """Session and remember-me token store over a cache and a database.

    Implements SessionStoreProtocol (structural typing).

    Attributes:
        _cache: Fast tier.
        _sessions: Durable session repository.
        _tokens: Durable remember-me token repository.
        _stale_sessions: Session ids whose cache delete failed, mapped to owner.
        _stale_tokens: Token hashes whose cache delete failed, mapped to owner.
        _pending: Background durable writes not yet finished.
    """

    def __init__(
        self,
        cache: SessionCacheProtocol,
        sessions: SessionRepository,
        tokens: RememberMeTokenRepository,
        *,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        durable_timeout_seconds: float = DEFAULT_DURABLE_TIMEOUT_SECONDS,
        write_consistency: WriteConsistency = WriteConsistency.STRICT,
    ) -> None:
        """Initialize the store.

        Args:
            cache: Fast tier (RedisSessionCache in production).
            sessions: Durable session repository.
            tokens: Durable remember-me token repository.
            clock: Time source for TTLs and expiry checks.
            logger: Structured logger.
            durable_timeout_seconds: Upper bound for one durable operation.
            write_consistency: Default mirroring mode for session writes.
        """
        self._cache = cache
        self._sessions = sessions
        self._tokens = tokens
        self._clock = clock
        self._logger = logger.bind(component="session_store")
        self._durable_timeout = durable_timeout_seconds
        self._write_consistency = write_consistency

        self._cache_available = True
        self._stale_sessions: dict[str, str | None] = {}
        self._stale_tokens: dict[str, str | None] = {}
        self._pending: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Tier plumbing
    # ------------------------------------------------------------------

    @property
    def cache_available(self) -> bool:
        """Whether the last cache interaction succeeded."""
        return self._cache_available

    async def check_cache(self) -> bool:
        """Probe the cache with PING and record the outcome."""
        self._record(await self._cache.ping(), "ping")
        return self._cache_available

    async def flush(self) -> None:
        """Wait for background durable writes to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _record(
        self, result: Result[T, DomainError], operation: str
    ) -> Result[T, DomainError]:
        """Track cache health from the outcome of a cache call."""
        match result:
            case Success():
                if not self._cache_available:
                    self._cache_available = True
                    self._logger.info("Cache tier recovered", operation=operation)
            case Failure(error=err):
                if self._cache_available:
                    self._cache_available = False
                    self._logger.warning(
                        "Cache tier unavailable, serving from durable tier",
                        operation=operation,
                        error_code=err.code.value,
                        error_message=err.message,
                    )
                else:
                    self._logger.debug("Cache call failed", operation=operation)
        return result

    async def _durable(
        self, operation: str, call: Callable[[], Awaitable[T]]
    ) -> Result[T, StorageUnavailableError]:
        """Run one durable call under the timeout and map failures."""
        try:
            value = await asyncio.wait_for(call(), timeout=self._durable_timeout)
        except TimeoutError as e:
            infrastructure_code = InfrastructureErrorCode.DATABASE_TIMEOUT
            error: Exception = e
        except (SQLAlchemyError, OSError) as e:
            infrastructure_code = InfrastructureErrorCode.DATABASE_ERROR
            error = e
        else:
            return Success(value=value)

        self._logger.error(
            "Durable tier operation failed",
            error=error,
            operation=operation,
            infrastructure_code=infrastructure_code.value,
        )
        return Failure(
            error=StorageUnavailableError(
                code=ErrorCode.STORAGE_UNAVAILABLE,
                message="Session storage unavailable",
                operation=operation,
                details={
                    "infrastructure_code": infrastructure_code.value,
                    "timeout": self._durable_timeout,
                    "error": str(error),
                },
            )
        )

    def _spawn(self, operation: str, call: Callable[[], Awaitable[object]]) -> None:
        """Mirror a write to the durable tier in the background."""

        async def mirror() -> None:
            # Failures are logged by _durable; the cache copy stays authoritative.
            await self._durable(operation, call)

        task = asyncio.create_task(mirror())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _invalidate_sessions(
        self, user_id: str | None, session_ids: list[str]
    ) -> list[str]:
        """Delete sessions from the cache, remembering ids that failed."""
        if not session_ids:
            return []
        result = self._record(
            await self._cache.delete_sessions(user_id, session_ids), "delete_sessions"
        )
        match result:
            case Success(value=removed):
                for session_id in session_ids:
                    self._stale_sessions.pop(session_id, None)
                return removed
            case Failure():
                for session_id in session_ids:
                    self._stale_sessions[session_id] = user_id
                return []

    async def _invalidate_tokens(
        self, user_id: str | None, token_hashes: list[str]
    ) -> list[str]:
        """Delete tokens from the cache, remembering hashes that failed."""
        if not token_hashes:
            return []
        result = self._record(
            await self._cache.delete_tokens(user_id, token_hashes), "delete_tokens"
        )
        match result:
            case Success(value=removed):
                for token_hash in token_hashes:
                    self._stale_tokens.pop(token_hash, None)
                return removed
            case Failure():
                for token_hash in token_hashes:
                    self._stale_tokens[token_hash] = user_id
                return []

    async def _retry_stale(self) -> None:
        """Retry cache invalidations that failed during an outage."""
        sessions: dict[str | None, list[str]] = defaultdict(list)
        for session_id, user_id in list(self._stale_sessions.items()):
            sessions[user_id].append(session_id)
        for user_id, ids in sessions.items():
            await self._invalidate_sessions(user_id, ids)

        tokens: dict[str | None, list[str]] = defaultdict(list)
        for token_hash, user_id in list(self._stale_tokens.items()):
            tokens[user_id].append(token_hash)
        for user_id, hashes in tokens.items():
            await self._invalidate_tokens(user_id, hashes)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def put(
        self, session: Session, *, consistency: WriteConsistency | None = None
    ) -> Result[None, StorageUnavailableError]:
        """Store a session in both tiers.

        Args:
            session: Session to store (insert or overwrite).
            consistency: Override of the store's default mirroring mode.

        Returns:
            Success(None), or Failure(StorageUnavailableError) when the
            durable write failed (the cache write is rolled back).
        """
        mode = consistency or self._write_consistency
        now = self._clock.now()

        cached = self._record(await self._cache.put_session(session, now=now), "put")
        cache_ok = isinstance(cached, Success)
        if cache_ok:
            self._stale_sessions.pop(session.session_id, None)

        if mode is WriteConsistency.EVENTUAL and cache_ok:
            self._spawn("put", lambda: self._sessions.save(session))
            return Success(value=None)

        saved = await self._durable("put", lambda: self._sessions.save(session))
        if isinstance(saved, Failure):
            if cache_ok:
                await self._invalidate_sessions(session.user_id, [session.session_id])
            return saved
        return Success(value=None)

    async def _locate(
        self, session_id: str, *, repopulate: bool = False
    ) -> Result[Session | None, StorageUnavailableError]:
        """Find a session in the cache, then in the durable tier.

        With repopulate, a live session read from the durable tier is
        written back to the cache.
        """
        if session_id in self._stale_sessions:
            await self._invalidate_sessions(
                self._stale_sessions[session_id], [session_id]
            )
        else:
            cached = self._record(await self._cache.get_session(session_id), "get")
            if isinstance(cached, Success) and cached.value is not None:
                self._logger.debug("Session cache hit", session=session_id[:8])
                return Success(value=cached.value)

        found = await self._durable("get", lambda: self._sessions.find_by_id(session_id))
        if isinstance(found, Failure) or not repopulate:
            return found

        session = found.value
        now = self._clock.now()
        if (
            session is not None
            and session.is_active(now)
            and session_id not in self._stale_sessions
        ):
            self._record(await self._cache.put_session(session, now=now), "repopulate")
        return found

    async def get(self, session_id: str) -> Result[Session | None, StorageUnavailableError]:
        """Fetch a session.

        Expired records are returned as stored; the caller decides what to
        do with them.

        Returns:
            Success(Session), Success(None) if neither tier has it, or
            Failure(StorageUnavailableError).
        """
        return await self._locate(session_id, repopulate=True)

    async def touch(
        self,
        session_id: str,
        *,
        last_activity: datetime,
        expires_at: datetime,
        max_age_ms: int,
    ) -> Result[Session | None, StorageUnavailableError]:
        """Move the expiry window of an existing session.

        Only updates records that still exist in each tier (SQL UPDATE and
        SET XX), so a session destroyed concurrently is never written back.
        Pending background writes are flushed first. Under eventual
        consistency the mirror writes the whole record if the durable row is
        missing while the cache still holds the session.

        Returns:
            Success(updated Session), Success(None) if it is gone, or
            Failure(StorageUnavailableError).
        """
        await self.flush()

        found = await self.get(session_id)
        if isinstance(found, Failure):
            return found
        if found.value is None:
            return Success(value=None)

        updated = found.value.with_expiry(
            last_activity=last_activity,
            expires_at=expires_at,
            max_age_ms=max_age_ms,
        )
        now = self._clock.now()

        def update_row() -> Awaitable[bool]:
            return self._sessions.update_expiry(
                session_id,
                last_activity=last_activity,
                expires_at=expires_at,
                max_age_ms=max_age_ms,
            )

        async def mirror_expiry() -> bool:
            if await update_row():
                return True
            # Row missing while the cache holds it: write the whole record.
            if session_id in self._stale_sessions:
                return False
            await self._sessions.save(updated)
            return True

        if self._write_consistency is WriteConsistency.EVENTUAL:
            replaced = self._record(
                await self._cache.replace_session(updated, now=now), "touch"
            )
            if isinstance(replaced, Success) and replaced.value:
                self._spawn("touch", mirror_expiry)
                return Success(value=updated)

        exists = await self._durable("touch", update_row)
        if isinstance(exists, Failure):
            return exists
        if not exists.value:
            await self._invalidate_sessions(updated.user_id, [session_id])
            return Success(value=None)

        if session_id not in self._stale_sessions:
            self._record(await self._cache.replace_session(updated, now=now), "touch")
        return Success(value=updated)

    async def delete(self, session_id: str) -> Result[bool, StorageUnavailableError]:
        """Delete a session from both tiers.

        Returns:
            Success(True) if it existed in either tier, Success(False) if not.
        """
        await self.flush()

        located = await self._locate(session_id)
        if isinstance(located, Failure):
            return located
        user_id = located.value.user_id if located.value is not None else None

        deleted = await self._durable(
            "delete", lambda: self._sessions.delete_many([session_id])
        )
        if isinstance(deleted, Failure):
            return deleted

        removed = await self._invalidate_sessions(user_id, [session_id])
        return Success(value=bool(deleted.value) or bool(removed))

    async def list_by_user(
        self, user_id: str
    ) -> Result[list[Session], StorageUnavailableError]:
        """All stored sessions of a user, newest first.

        Takes the union of the cache index and the durable query so that
        sessions written during a cache outage are included.
        """
        cached_ids = self._record(
            await self._cache.user_session_ids(user_id), "list_by_user"
        )
        stored = await self._durable(
            "list_by_user", lambda: self._sessions.find_by_user_id(user_id)
        )
        if isinstance(stored, Failure):
            return stored

        by_id = {session.session_id: session for session in stored.value}
        if isinstance(cached_ids, Success):
            for session_id in sorted(cached_ids.value - self._stale_sessions.keys()):
                cached = self._record(
                    await self._cache.get_session(session_id), "list_by_user"
                )
                if (
                    isinstance(cached, Success)
                    and cached.value is not None
                    and cached.value.user_id == user_id
                ):
                    by_id[session_id] = cached.value

        sessions = sorted(by_id.values(), key=lambda s: s.created_at, reverse=True)
        return Success(value=sessions)

    async def delete_all_by_user(
        self, user_id: str, *, except_session_id: str | None = None
    ) -> Result[int, StorageUnavailableError]:
        """Delete every session of a user except one.

        A session created concurrently for the same user may or may not be
        included; both outcomes are consistent.

        Returns:
            Success(number of sessions deleted).
        """
        await self.flush()

        cached_ids = self._record(
            await self._cache.user_session_ids(user_id), "delete_all_by_user"
        )
        stored_ids = await self._durable(
            "delete_all_by_user", lambda: self._sessions.find_ids_by_user_id(user_id)
        )
        if isinstance(stored_ids, Failure):
            return stored_ids

        targets = set(stored_ids.value)
        if isinstance(cached_ids, Success):
            targets |= cached_ids.value
        if except_session_id is not None:
            targets.discard(except_session_id)
        if not targets:
            return Success(value=0)

        ids = sorted(targets)
        deleted = await self._durable(
            "delete_all_by_user", lambda: self._sessions.delete_many(ids)
        )
        if isinstance(deleted, Failure):
            return deleted

        removed = await self._invalidate_sessions(user_id, ids)
        return Success(value=len(set(deleted.value) | set(removed)))

    async def count(self) -> Result[SessionCounts, StorageUnavailableError]:
        """Count stored sessions (the durable tier is authoritative)."""
        await self.flush()
        now = self._clock.now()

        counted = await self._durable("count", lambda: self._sessions.count(now=now))
        match counted:
            case Success(value=(total, active)):
                return Success(value=SessionCounts(total=total, active=active))
            case Failure(error=err):
                return Failure(error=err)

    # ------------------------------------------------------------------
    # Remember-me tokens (always mirrored synchronously)
    # ------------------------------------------------------------------

    async def put_token(
        self, token: RememberMeToken
    ) -> Result[None, StorageUnavailableError]:
        """Store a remember-me token in both tiers."""
        now = self._clock.now()
        cached = self._record(await self._cache.put_token(token, now=now), "put_token")
        cache_ok = isinstance(cached, Success)
        if cache_ok:
            self._stale_tokens.pop(token.token_hash, None)

        saved = await self._durable("put_token", lambda: self._tokens.save(token))
        if isinstance(saved, Failure):
            if cache_ok:
                await self._invalidate_tokens(token.user_id, [token.token_hash])
            return saved
        return Success(value=None)

    async def _locate_token(
        self, token_hash: str, *, repopulate: bool = False
    ) -> Result[RememberMeToken | None, StorageUnavailableError]:
        """Find a token in the cache, then in the durable tier."""
        if token_hash in self._stale_tokens:
            await self._invalidate_tokens(self._stale_tokens[token_hash], [token_hash])
        else:
            cached = self._record(await self._cache.get_token(token_hash), "get_token")
            if isinstance(cached, Success) and cached.value is not None:
                return Success(value=cached.value)

        found = await self._durable(
            "get_token", lambda: self._tokens.find_by_hash(token_hash)
        )
        if isinstance(found, Failure) or not repopulate:
            return found

        token = found.value
        now = self._clock.now()
        if (
            token is not None
            and not token.is_expired(now)
            and token_hash not in self._stale_tokens
        ):
            self._record(await self._cache.put_token(token, now=now), "repopulate_token")
        return found

    async def get_token(
        self, token_hash: str
    ) -> Result[RememberMeToken | None, StorageUnavailableError]:
        """Fetch a remember-me token by hash (expired tokens included)."""
        return await self._locate_token(token_hash, repopulate=True)

    async def delete_token(self, token_hash: str) -> Result[bool, StorageUnavailableError]:
        """Delete a remember-me token from both tiers."""
        located = await self._locate_token(token_hash)
        if isinstance(located, Failure):
            return located
        user_id = located.value.user_id if located.value is not None else None

        deleted = await self._durable(
            "delete_token", lambda: self._tokens.delete_many([token_hash])
        )
        if isinstance(deleted, Failure):
            return deleted

        removed = await self._invalidate_tokens(user_id, [token_hash])
        return Success(value=bool(deleted.value) or bool(removed))

    async def delete_tokens_by_user(
        self, user_id: str
    ) -> Result[int, StorageUnavailableError]:
        """Delete every remember-me token of a user."""
        cached = self._record(
            await self._cache.user_token_hashes(user_id), "delete_tokens_by_user"
        )
        stored = await self._durable(
            "delete_tokens_by_user",
            lambda: self._tokens.find_hashes_by_user_id(user_id),
        )
        if isinstance(stored, Failure):
            return stored

        targets = set(stored.value)
        if isinstance(cached, Success):
            targets |= cached.value
        if not targets:
            return Success(value=0)

        hashes = sorted(targets)
        deleted = await self._durable(
            "delete_tokens_by_user", lambda: self._tokens.delete_many(hashes)
        )
        if isinstance(deleted, Failure):
            return deleted

        removed = await self._invalidate_tokens(user_id, hashes)
        return Success(value=len(set(deleted.value) | set(removed)))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def purge_expired(self) -> Result[CleanupReport, StorageUnavailableError]:
        """Delete expired sessions and tokens from both tiers.

        Cache records expire through their own TTLs; this removes the
        durable rows, any cache copies of them and dangling index members.
        Safe to run concurrently with itself (deletes are idempotent).
        """
        await self.flush()
        now = self._clock.now()

        sessions = await self._durable(
            "purge_expired", lambda: self._sessions.delete_expired(before=now)
        )
        if isinstance(sessions, Failure):
            return sessions
        tokens = await self._durable(
            "purge_expired", lambda: self._tokens.delete_expired(before=now)
        )
        if isinstance(tokens, Failure):
            return tokens

        for user_id, ids in _group_by_owner(sessions.value).items():
            await self._invalidate_sessions(user_id, ids)
        for user_id, hashes in _group_by_owner(tokens.value).items():
            await self._invalidate_tokens(user_id, hashes)

        pruned = self._record(await self._cache.prune_indexes(), "prune_indexes")
        await self._retry_stale()

        return Success(
            value=CleanupReport(
                sessions_removed=len(sessions.value),
                tokens_removed=len(tokens.value),
                index_entries_pruned=pruned.value if isinstance(pruned, Success) else 0,
            )
        )
