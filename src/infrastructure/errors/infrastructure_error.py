"""Infrastructure layer error types.

Infrastructure errors represent failures in the storage tiers.

Architecture:
- Adapters catch library exceptions and map them to these errors
- Infrastructure errors inherit from DomainError (not Exception)
- InfrastructureErrorCode records the precise failure for logs
- Used with Result types for error propagation
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Original infrastructure error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DatabaseError(InfrastructureError):
    """Durable-tier failure (wraps SQLAlchemy and driver exceptions)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Fast-tier failure (wraps Redis exceptions and timeouts)."""

    pass
