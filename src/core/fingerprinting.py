"""Device fingerprinting for session hijacking detection.

Device fingerprints are generated from stable request headers to detect
when a session or remember-me token is used from a different device.

Fingerprint Components (in order):
- User-Agent header (browser, OS, version)
- Accept-Language header (preferred languages)
- Accept-Encoding header (supported encodings)

Security:
- SHA256 hash (64 hex characters)
- Not reversible
- Cannot identify user, only detect device changes
- A weak secondary factor: every component is client-controlled
"""

import hashlib
import logging
import re

from src.domain.value_objects import RequestContext

logger = logging.getLogger(__name__)


def fingerprint_components(
    user_agent: str | None,
    accept_language: str | None,
    accept_encoding: str | None,
) -> str:
    """Generate SHA256 fingerprint from raw header values.

    Args:
        user_agent: User-Agent header (None treated as "").
        accept_language: Accept-Language header (None treated as "").
        accept_encoding: Accept-Encoding header (None treated as "").

    Returns:
        SHA256 hash (64 hex characters).

    Examples:
        >>> len(fingerprint_components("Mozilla/5.0", "en-US", "gzip"))
        64
        >>> fingerprint_components(None, None, None) == fingerprint_components("", "", "")
        True
    """
    fingerprint_string = "|".join(
        (user_agent or "", accept_language or "", accept_encoding or "")
    )
    return hashlib.sha256(
        fingerprint_string.encode("utf-8", errors="surrogatepass")
    ).hexdigest()


def generate_device_fingerprint(context: RequestContext) -> str:
    """Generate the device fingerprint for a request.

    Same headers always produce the same fingerprint; the function has no
    side effects and never raises.

    Args:
        context: Request context carrying the header values.

    Returns:
        SHA256 hash (64 hex characters).
    """
    fingerprint = fingerprint_components(
        context.user_agent,
        context.accept_language,
        context.accept_encoding,
    )
    logger.debug(f"Generated device fingerprint: {fingerprint[:8]}...")
    return fingerprint


_BROWSERS = (
    ("Edg/", "Edge"),
    ("OPR/", "Opera"),
    ("Firefox/", "Firefox"),
    ("Chrome/", "Chrome"),
    ("Safari/", "Safari"),
)

_SYSTEMS = (
    (re.compile(r"iPhone|iPad|iPod"), "iOS"),
    (re.compile(r"Android"), "Android"),
    (re.compile(r"Windows"), "Windows"),
    (re.compile(r"Mac OS X|Macintosh"), "macOS"),
    (re.compile(r"Linux"), "Linux"),
)


def format_device_info(user_agent: str) -> str:
    """Format a short human-readable device label.

    Args:
        user_agent: User-Agent header string.

    Returns:
        Label such as "Chrome on macOS", or "Unknown device".

    Examples:
        >>> format_device_info("Mozilla/5.0 (Windows NT 10.0; rv:109.0) Firefox/121.0")
        'Firefox on Windows'
    """
    browser = next((name for marker, name in _BROWSERS if marker in user_agent), None)
    system = next((name for pattern, name in _SYSTEMS if pattern.search(user_agent)), None)

    if browser and system:
        return f"{browser} on {system}"
    return browser or system or "Unknown device"
