"""IP consistency policy for session validation.

STRICT requires the request to come from exactly the recorded address.
SUBNET tolerates churn inside a network prefix (/24 for IPv4 and /64 for
IPv6 by default), which keeps mobile and carrier-grade NAT users signed in
at the cost of accepting neighbours on the same prefix.
"""

from enum import Enum


class IpMatchPolicy(str, Enum):
    """How the validator compares recorded and current IP addresses."""

    STRICT = "strict"
    SUBNET = "subnet"
