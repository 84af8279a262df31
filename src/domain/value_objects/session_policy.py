"""Session policy value object.

Immutable bundle of the lifetimes and validation switches a deployment
chooses. Built from Settings in production and constructed directly in
tests.

Usage:
    policy = SessionPolicy.from_settings(get_settings())
    strict = SessionPolicy(ip_match_policy=IpMatchPolicy.STRICT)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.domain.enums import IpMatchPolicy

if TYPE_CHECKING:
    from src.core.config import Settings

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionPolicy:
    """Lifetimes and validation switches for the session core.

    Attributes:
        default_max_age_ms: Lifetime of a standard session (24h).
        remember_me_max_age_ms: Lifetime of a persistent session (7d).
        remember_me_token_ttl_ms: Lifetime of a remember-me token (30d).
        ip_match_policy: STRICT or SUBNET comparison of IP addresses.
        ipv4_subnet_prefix: IPv4 prefix compared under SUBNET.
        ipv6_subnet_prefix: IPv6 prefix compared under SUBNET.
        check_device_fingerprint: Fail sessions whose fingerprint changed.
        bind_remember_me_to_device: Require a matching fingerprint to use a token.
        destroy_on_security_failure: Delete sessions failing IP/UA/device checks.

    Raises:
        ValueError: If a lifetime is not positive or a prefix is out of range.
    """

    default_max_age_ms: int = DAY_MS
    remember_me_max_age_ms: int = 7 * DAY_MS
    remember_me_token_ttl_ms: int = 30 * DAY_MS
    ip_match_policy: IpMatchPolicy = IpMatchPolicy.SUBNET
    ipv4_subnet_prefix: int = 24
    ipv6_subnet_prefix: int = 64
    check_device_fingerprint: bool = False
    bind_remember_me_to_device: bool = True
    destroy_on_security_failure: bool = True

    def __post_init__(self) -> None:
        """Validate lifetimes and prefix lengths."""
        for name in (
            "default_max_age_ms",
            "remember_me_max_age_ms",
            "remember_me_token_ttl_ms",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0 <= self.ipv4_subnet_prefix <= 32:
            raise ValueError("ipv4_subnet_prefix must be between 0 and 32")
        if not 0 <= self.ipv6_subnet_prefix <= 128:
            raise ValueError("ipv6_subnet_prefix must be between 0 and 128")

    def max_age_for(self, *, remember_me: bool) -> int:
        """Default lifetime for a new session."""
        return self.remember_me_max_age_ms if remember_me else self.default_max_age_ms

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SessionPolicy":
        """Build the policy from application settings."""
        return cls(
            default_max_age_ms=settings.session_max_age_ms,
            remember_me_max_age_ms=settings.remember_me_session_max_age_ms,
            remember_me_token_ttl_ms=settings.remember_me_token_ttl_ms,
            ip_match_policy=IpMatchPolicy(settings.ip_match_policy),
            ipv4_subnet_prefix=settings.ipv4_subnet_prefix,
            ipv6_subnet_prefix=settings.ipv6_subnet_prefix,
            check_device_fingerprint=settings.check_device_fingerprint,
            bind_remember_me_to_device=settings.bind_remember_me_to_device,
            destroy_on_security_failure=settings.destroy_on_security_failure,
        )
