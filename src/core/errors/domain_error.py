"""Base domain error class for railway-oriented programming.

DomainError is the base class for every error that flows through a Result.
Errors are data, not exceptions: they are returned inside Failure and
inspected with ``match``.

Architecture:
- Base class for all error types (core, domain, infrastructure)
- Does NOT inherit from Exception (returned, never raised)
- Uses dataclass inheritance (NOT Protocol/ABC)

Usage:
    @dataclass(frozen=True, slots=True, kw_only=True)
    class StorageUnavailableError(DomainError):
        tier: str
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
