"""System clock implementing ClockProtocol."""

from datetime import UTC, datetime


class SystemClock:
    """Wall-clock time in UTC.

    Note: Does NOT inherit from ClockProtocol (uses structural typing).
    """

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(UTC)
