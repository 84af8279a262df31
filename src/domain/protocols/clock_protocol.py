"""Clock protocol.

Every component that compares against "now" takes a clock instead of
calling ``datetime.now`` so expiry can be tested without sleeping.
"""

from datetime import datetime
from typing import Protocol


class ClockProtocol(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...
