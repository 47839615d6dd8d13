"""Network identifier package: IP addresses, hostnames and URLs."""

from inet.address import (
    InetAddress,
    Ipv4Address,
    Ipv6Address,
    parse_ipv4,
    parse_ipv6,
    from_string,
    from_bytes,
    render,
)
from inet import hostname
from inet import urls

__all__ = [
    "InetAddress",
    "Ipv4Address",
    "Ipv6Address",
    "parse_ipv4",
    "parse_ipv6",
    "from_string",
    "from_bytes",
    "render",
    "hostname",
    "urls",
]
