"""Result types for railway-oriented programming.

Operations that can fail because of storage faults return a Result instead
of raising. Expected outcomes (an expired session, a mismatched IP) are
carried inside Success; only faults travel as Failure.

Usage:
    result = await store.get(session_id)
    match result:
        case Success(value=None):
            ...  # not found
        case Success(value=session):
            ...
        case Failure(error=error):
            logger.error("Lookup failed", code=error.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
