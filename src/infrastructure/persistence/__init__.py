"""Database persistence infrastructure (durable tier).

Provides:
- Base model for all database entities
- Database connection and session management
- Session and remember-me token repositories
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
