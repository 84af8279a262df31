"""Redis adapter for the session fast tier.

Wraps the async Redis client, bounds every call with a timeout and maps
Redis exceptions to CacheError. Multi-key writes that must stay consistent
(a record plus its per-user index entry) run in a single MULTI/EXEC
pipeline.

Architecture:
- Returns Result types for all operations
- Never raises for Redis faults (callers fall back to the durable tier)
- Works with clients created with or without decode_responses
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError

DEFAULT_TIMEOUT_SECONDS = 0.25

T = TypeVar("T")


def _decode(value: Any) -> str:
    """Decode a Redis reply to str."""
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class RedisAdapter:
    """Redis operations needed by the session cache.

    Attributes:
        _redis: Async Redis client instance.
        _timeout: Upper bound for one operation, in seconds.
    """

    def __init__(
        self,
        redis_client: Redis,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance.
            timeout_seconds: Upper bound for one operation.
        """
        self._redis = redis_client
        self._timeout = timeout_seconds

    async def _execute(
        self,
        failure_code: InfrastructureErrorCode,
        description: str,
        call: Callable[[], Awaitable[T]],
        timeout: float | None = None,
        **details: Any,
    ) -> Result[T, CacheError]:
        """Run one Redis call under the timeout and map failures."""
        timeout = timeout or self._timeout
        try:
            value = await asyncio.wait_for(call(), timeout=timeout)
        except (TimeoutError, RedisTimeoutError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_TIMEOUT,
                    message=f"Cache timed out during {description}",
                    details={**details, "timeout": timeout, "error": str(e)},
                )
            )
        except RedisConnectionError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                    message=f"Cache unreachable during {description}",
                    details={**details, "error": str(e)},
                )
            )
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    infrastructure_code=failure_code,
                    message=f"Cache error during {description}",
                    details={**details, "error": str(e)},
                )
            )
        except Exception as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.STORAGE_UNAVAILABLE,
                    infrastructure_code=failure_code,
                    message=f"Unexpected error during {description}",
                    details={**details, "error": str(e), "type": type(e).__name__},
                )
            )
        return Success(value=value)

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity.

        Returns:
            Result with True if reachable, or CacheError.
        """

        async def call() -> bool:
            return bool(await self._redis.ping())  # type: ignore[misc]

        return await self._execute(
            InfrastructureErrorCode.CACHE_CONNECTION_ERROR, "ping", call
        )

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, CacheError]:
        """Get and parse a JSON value.

        Args:
            key: Cache key.

        Returns:
            Result with parsed dict, None if not found, or CacheError.
        """
        result = await self._execute(
            InfrastructureErrorCode.CACHE_GET_ERROR,
            f"get of '{key}'",
            lambda: self._redis.get(key),
            key=key,
        )

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=raw):
                try:
                    return Success(value=json.loads(_decode(raw)))
                except json.JSONDecodeError as e:
                    return Failure(
                        error=CacheError(
                            code=ErrorCode.STORAGE_UNAVAILABLE,
                            infrastructure_code=InfrastructureErrorCode.CACHE_DECODE_ERROR,
                            message=f"Failed to parse JSON for key '{key}'",
                            details={"key": key, "error": str(e)},
                        )
                    )
            case Failure(error=err):
                return Failure(error=err)

    async def set_json_indexed(
        self,
        key: str,
        data: dict[str, Any],
        *,
        ttl_ms: int,
        index_key: str,
        member: str,
        index_ttl_ms: int,
    ) -> Result[None, CacheError]:
        """Store a JSON record and add it to an index set atomically.

        Runs SET (with PX), SADD and PEXPIRE in one MULTI/EXEC so the index
        never references a record that was not written.

        Args:
            key: Record key.
            data: JSON-serializable record.
            ttl_ms: Record time to live in milliseconds.
            index_key: Index set key.
            member: Member to add to the index.
            index_ttl_ms: Index time to live in milliseconds.

        Returns:
            Result with None on success, or CacheError.
        """
        payload = json.dumps(data)

        async def call() -> None:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(key, payload, px=ttl_ms)
                pipe.sadd(index_key, member)
                pipe.pexpire(index_key, max(index_ttl_ms, ttl_ms))
                await pipe.execute()

        return await self._execute(
            InfrastructureErrorCode.CACHE_SET_ERROR,
            f"indexed set of '{key}'",
            call,
            key=key,
            ttl_ms=ttl_ms,
        )

    async def replace_json(
        self,
        key: str,
        data: dict[str, Any],
        *,
        ttl_ms: int,
    ) -> Result[bool, CacheError]:
        """Overwrite a JSON record only if it still exists (SET XX).

        Used for refreshes so a record deleted concurrently is not
        written back.

        Args:
            key: Record key.
            data: JSON-serializable record.
            ttl_ms: New time to live in milliseconds.

        Returns:
            Result with True if replaced, False if the key was absent, or CacheError.
        """
        payload = json.dumps(data)

        async def call() -> bool:
            return bool(await self._redis.set(key, payload, px=ttl_ms, xx=True))

        return await self._execute(
            InfrastructureErrorCode.CACHE_SET_ERROR,
            f"replace of '{key}'",
            call,
            key=key,
            ttl_ms=ttl_ms,
        )

    async def delete_indexed(
        self,
        keys: list[str],
        *,
        index_key: str | None,
        members: list[str],
    ) -> Result[list[bool], CacheError]:
        """Delete records and remove them from an index set atomically.

        Args:
            keys: Record keys to delete.
            index_key: Index set to update (None to skip).
            members: Members to remove from the index.

        Returns:
            Result with one flag per key (True if the key existed), or CacheError.
        """
        if not keys:
            return Success(value=[])

        async def call() -> list[bool]:
            async with self._redis.pipeline(transaction=True) as pipe:
                for key in keys:
                    pipe.delete(key)
                if index_key is not None and members:
                    pipe.srem(index_key, *members)
                replies = await pipe.execute()
            return [bool(reply) for reply in replies[: len(keys)]]

        return await self._execute(
            InfrastructureErrorCode.CACHE_DELETE_ERROR,
            f"indexed delete of {len(keys)} key(s)",
            call,
            index_key=index_key,
        )

    async def set_members(self, key: str) -> Result[set[str], CacheError]:
        """Get all members of a set.

        Args:
            key: Set key.

        Returns:
            Result with members (empty if the set does not exist), or CacheError.
        """

        async def call() -> set[str]:
            members = await self._redis.smembers(key)  # type: ignore[misc]
            return {_decode(member) for member in members}

        return await self._execute(
            InfrastructureErrorCode.CACHE_GET_ERROR,
            f"smembers of '{key}'",
            call,
            key=key,
        )

    async def remove_members(self, key: str, members: list[str]) -> Result[int, CacheError]:
        """Remove members from a set.

        Returns:
            Result with number of members removed, or CacheError.
        """
        if not members:
            return Success(value=0)

        async def call() -> int:
            return int(await self._redis.srem(key, *members))  # type: ignore[misc]

        return await self._execute(
            InfrastructureErrorCode.CACHE_DELETE_ERROR,
            f"srem on '{key}'",
            call,
            key=key,
        )

    async def exists_many(
        self, keys: list[str], *, timeout: float | None = None
    ) -> Result[list[bool], CacheError]:
        """Check existence of several keys in one round trip.

        Returns:
            Result with one flag per key, or CacheError.
        """
        if not keys:
            return Success(value=[])

        async def call() -> list[bool]:
            async with self._redis.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.exists(key)
                replies = await pipe.execute()
            return [bool(reply) for reply in replies]

        return await self._execute(
            InfrastructureErrorCode.CACHE_GET_ERROR,
            f"exists on {len(keys)} key(s)",
            call,
            timeout=timeout,
        )

    async def scan_keys(
        self, pattern: str, *, timeout: float | None = None
    ) -> Result[list[str], CacheError]:
        """Collect keys matching a pattern with SCAN (non-blocking for Redis).

        Args:
            pattern: Glob-style pattern.
            timeout: Override for the per-call timeout (sweeps take longer).

        Returns:
            Result with matching keys, or CacheError.
        """

        async def call() -> list[str]:
            return [_decode(key) async for key in self._redis.scan_iter(match=pattern)]

        return await self._execute(
            InfrastructureErrorCode.CACHE_GET_ERROR,
            f"scan for '{pattern}'",
            call,
            timeout=timeout,
            pattern=pattern,
        )
