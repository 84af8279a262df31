"""Request context value object.

The only view of an inbound request the session core depends on. Framework
adapters (see ``src.presentation.api.session_context``) build it from their
own request objects.

Usage:
    context = RequestContext(
        ip_address="192.168.1.100",
        user_agent="Mozilla/5.0 ...",
        accept_language="en-US,en;q=0.9",
        accept_encoding="gzip, deflate, br",
    )
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Client metadata captured from the current request.

    Attributes:
        ip_address: Client IP address as seen by the application.
        user_agent: User-Agent header ("" when absent).
        accept_language: Accept-Language header ("" when absent).
        accept_encoding: Accept-Encoding header ("" when absent).
    """

    ip_address: str
    user_agent: str
    accept_language: str = ""
    accept_encoding: str = ""
