"""Domain errors package.

Usage:
    from src.domain.errors import StorageUnavailableError
"""

from src.domain.errors.storage_error import StorageUnavailableError

__all__ = ["StorageUnavailableError"]
