"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance
(structural typing).

Usage:
    from src.domain.protocols import SessionStoreProtocol, ClockProtocol
"""

from src.domain.protocols.clock_protocol import ClockProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.remember_me_token_repository import (
    RememberMeTokenRepository,
)
from src.domain.protocols.session_cache_protocol import SessionCacheProtocol
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.session_store_protocol import SessionStoreProtocol

__all__ = [
    "ClockProtocol",
    "LoggerProtocol",
    "RememberMeTokenRepository",
    "SessionCacheProtocol",
    "SessionRepository",
    "SessionStoreProtocol",
]
