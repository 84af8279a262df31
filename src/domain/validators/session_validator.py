"""Session validator.

Applies the security checks to a fetched session and returns a single
verdict. Checks run in a fixed order and the first failure wins:

    1. expiry            -> NOT_FOUND_OR_EXPIRED
    2. IP consistency    -> IP_MISMATCH
    3. user-agent match  -> USER_AGENT_MISMATCH
    4. device (optional) -> DEVICE_MISMATCH

The validator is pure: no I/O, no clock of its own.
"""

import ipaddress
from datetime import datetime
from typing import TypeAlias

from src.core.fingerprinting import generate_device_fingerprint
from src.domain.entities import Session
from src.domain.enums import IpMatchPolicy, SessionVerdict
from src.domain.value_objects import RequestContext, SessionPolicy

IPAddress: TypeAlias = ipaddress.IPv4Address | ipaddress.IPv6Address


def _parse_ip(value: str) -> IPAddress | None:
    """Parse an address, unwrapping IPv4-mapped IPv6 (``::ffff:a.b.c.d``)."""
    try:
        address = ipaddress.ip_address(value.strip())
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


def ip_addresses_match(
    recorded: str,
    current: str,
    *,
    policy: IpMatchPolicy = IpMatchPolicy.SUBNET,
    ipv4_prefix: int = 24,
    ipv6_prefix: int = 64,
) -> bool:
    """Compare a recorded and a current client IP.

    Args:
        recorded: IP captured when the session was created.
        current: IP of the current request.
        policy: STRICT (same address) or SUBNET (same network prefix).
        ipv4_prefix: Prefix length compared for IPv4 under SUBNET.
        ipv6_prefix: Prefix length compared for IPv6 under SUBNET.

    Returns:
        True if the addresses are considered consistent.

    Notes:
        - Addresses that do not parse are compared as plain strings
        - IPv4 never matches IPv6 (no cross-family tolerance)

    Examples:
        >>> ip_addresses_match("192.168.1.100", "192.168.1.200")
        True
        >>> ip_addresses_match("192.168.1.100", "10.0.0.1")
        False
    """
    recorded_ip = _parse_ip(recorded)
    current_ip = _parse_ip(current)

    if recorded_ip is None or current_ip is None:
        return recorded.strip() == current.strip()
    if recorded_ip.version != current_ip.version:
        return False
    if policy is IpMatchPolicy.STRICT:
        return recorded_ip == current_ip

    prefix = ipv4_prefix if recorded_ip.version == 4 else ipv6_prefix
    network = ipaddress.ip_network(f"{recorded_ip}/{prefix}", strict=False)
    return current_ip in network


class SessionValidator:
    """Checks a session against the current request.

    Attributes:
        _policy: Validation switches and IP tolerance.
    """

    def __init__(self, policy: SessionPolicy) -> None:
        """Initialize validator.

        Args:
            policy: Session policy (IP match mode, prefixes, device check).
        """
        self._policy = policy

    def check(
        self,
        session: Session | None,
        context: RequestContext,
        now: datetime,
    ) -> SessionVerdict:
        """Produce the verdict for a session.

        Args:
            session: Fetched session, or None when not found.
            context: Current request metadata.
            now: Current time.

        Returns:
            The first failing check's verdict, or VALID.
        """
        if session is None or session.is_expired(now):
            return SessionVerdict.NOT_FOUND_OR_EXPIRED

        if session.ip_address and not ip_addresses_match(
            session.ip_address,
            context.ip_address,
            policy=self._policy.ip_match_policy,
            ipv4_prefix=self._policy.ipv4_subnet_prefix,
            ipv6_prefix=self._policy.ipv6_subnet_prefix,
        ):
            return SessionVerdict.IP_MISMATCH

        if session.user_agent and session.user_agent != context.user_agent:
            return SessionVerdict.USER_AGENT_MISMATCH

        if self._policy.check_device_fingerprint:
            if session.device_fingerprint != generate_device_fingerprint(context):
                return SessionVerdict.DEVICE_MISMATCH

        return SessionVerdict.VALID
