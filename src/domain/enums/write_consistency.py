"""Durable-tier mirroring mode for store writes."""

from enum import Enum


class WriteConsistency(str, Enum):
    """When a write reaches the durable tier.

    STRICT: before the write returns.
    EVENTUAL: in a background task after the cache write.
    """

    STRICT = "strict"
    EVENTUAL = "eventual"
