"""FastAPI adapter for the session core.

Turns an incoming HTTP request into the inputs the session service needs:
a RequestContext and the raw session id / remember-me token the client
presented. The core itself never reads cookies or headers.

Lookup order:
    Session id: ``Authorization: Bearer <id>``, then ``X-Session-ID``,
    then the ``session_id`` cookie.
    Remember-me token: ``X-Remember-Me-Token``, then the ``remember_me``
    cookie.
"""

from fastapi import Request

from src.domain.value_objects import RequestContext

SESSION_ID_HEADER = "X-Session-ID"
SESSION_ID_COOKIE = "session_id"
REMEMBER_ME_HEADER = "X-Remember-Me-Token"
REMEMBER_ME_COOKIE = "remember_me"


def get_client_ip(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Extract client IP address from request.

    X-Forwarded-For and X-Real-IP are only honoured behind a trusted
    reverse proxy; otherwise any client could choose its own address.

    Args:
        request: HTTP request.
        trust_forwarded_for: Read proxy headers before the socket address.

    Returns:
        Client IP address, or "" when unknown.
    """
    if trust_forwarded_for:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the client, the rest is the proxy chain
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    if request.client:
        return request.client.host

    return ""


def build_request_context(
    request: Request, *, trust_forwarded_for: bool = False
) -> RequestContext:
    """Build the request metadata used for fingerprinting and validation."""
    return RequestContext(
        ip_address=get_client_ip(request, trust_forwarded_for=trust_forwarded_for),
        user_agent=request.headers.get("User-Agent", ""),
        accept_language=request.headers.get("Accept-Language", ""),
        accept_encoding=request.headers.get("Accept-Encoding", ""),
    )


def extract_session_id(request: Request) -> str | None:
    """Find the session id the client presented, if any."""
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        token = authorization[7:].strip()  # Remove "Bearer " prefix
        if token:
            return token

    header_value = request.headers.get(SESSION_ID_HEADER)
    if header_value:
        return header_value.strip()

    return request.cookies.get(SESSION_ID_COOKIE) or None


def extract_remember_me_token(request: Request) -> str | None:
    """Find the remember-me token the client presented, if any."""
    header_value = request.headers.get(REMEMBER_ME_HEADER)
    if header_value:
        return header_value.strip()

    return request.cookies.get(REMEMBER_ME_COOKIE) or None
