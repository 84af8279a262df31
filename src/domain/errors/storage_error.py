"""Session storage fault.

Returned when no storage tier can give an authoritative answer: the durable
tier failed or timed out (cache faults alone are absorbed by falling back).

Usage:
    from src.domain.errors import StorageUnavailableError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=StorageUnavailableError(
        code=ErrorCode.STORAGE_UNAVAILABLE,
        message="Session storage unavailable",
        operation="get",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class StorageUnavailableError(DomainError):
    """Both storage tiers failed to serve an operation.

    Attributes:
        code: ErrorCode.STORAGE_UNAVAILABLE.
        message: Human-readable message.
        operation: Store operation that failed (e.g. "put", "get").
        details: Additional context (original error, timeout).
    """

    operation: str
