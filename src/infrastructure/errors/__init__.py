"""Infrastructure errors package.

Usage:
    from src.infrastructure.errors import DatabaseError, CacheError
"""

from src.infrastructure.errors.infrastructure_error import (
    CacheError,
    DatabaseError,
    InfrastructureError,
)

__all__ = [
    "InfrastructureError",
    "DatabaseError",
    "CacheError",
]
