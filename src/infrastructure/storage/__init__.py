"""Logical session store over the cache and durable tiers."""

from src.infrastructure.storage.tiered_session_store import TieredSessionStore

__all__ = ["TieredSessionStore"]
