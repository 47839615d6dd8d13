"""IPv4 and IPv6 address values.

An address is one of two frozen dataclasses, ``Ipv4Address`` or
``Ipv6Address``, each wrapping its packed network-order bytes. Instances are
built through the factory functions below, which validate the textual or
binary form and raise ``AddressError`` on anything malformed.

Examples:
    >>> str(parse_ipv6("2001:db8:0:0:0:0:0:1"))
    '2001:db8::1'
    >>> from_bytes(bytes([127, 0, 0, 1]))
    Ipv4Address(packed=b'\\x7f\\x00\\x00\\x01')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

from common import AddressError

IPV4_LENGTH = 4
IPV6_LENGTH = 16
IPV6_GROUPS = 8

_DECIMAL_OCTET = re.compile(r"[0-9]+")
_HEX_GROUP = re.compile(r"[0-9A-Fa-f]{1,4}")


@dataclass(frozen=True, slots=True)
class Ipv4Address:
    """An IPv4 address stored as 4 packed bytes."""

    packed: bytes

    version = 4

    def __post_init__(self) -> None:
        if len(self.packed) != IPV4_LENGTH:
            raise AddressError(
                "Invalid IPv4 address",
                context={"length": len(self.packed)},
            )

    def __str__(self) -> str:
        return ".".join(str(octet) for octet in self.packed)


@dataclass(frozen=True, slots=True)
class Ipv6Address:
    """An IPv6 address stored as 16 packed bytes.

    Interface (zone) identifiers are not supported.
    """

    packed: bytes

    version = 6

    def __post_init__(self) -> None:
        if len(self.packed) != IPV6_LENGTH:
            raise AddressError(
                "Invalid IPv6 address",
                context={"length": len(self.packed)},
            )

    @property
    def groups(self) -> List[int]:
        """The eight 16-bit groups, most significant first."""
        return [
            int.from_bytes(self.packed[i : i + 2], "big")
            for i in range(0, IPV6_LENGTH, 2)
        ]

    def __str__(self) -> str:
        parts = [format(group, "x") for group in self.groups]

        # Find the first longest run of zero groups
        best_start, best_length = 0, 0
        index = 0
        while index < len(parts):
            if parts[index] != "0":
                index += 1
                continue
            start = index
            while index < len(parts) and parts[index] == "0":
                index += 1
            if index - start > best_length:
                best_start, best_length = start, index - start

        # A lone zero group is never compressed
        if best_length > 1:
            parts[best_start : best_start + best_length] = [""]
            if best_start == 0:
                parts.insert(0, "")
            if best_start + best_length == IPV6_GROUPS:
                parts.append("")

        return ":".join(parts)


InetAddress = Union[Ipv4Address, Ipv6Address]


def parse_ipv4(text: str) -> Ipv4Address:
    """
    Parse dotted-decimal IPv4 text.

    Args:
        text: Address such as ``192.0.2.1``

    Returns:
        Parsed Ipv4Address

    Raises:
        AddressError: If there are not exactly four decimal octets in [0, 255]
    """
    parts = text.split(".")
    if len(parts) != IPV4_LENGTH:
        raise AddressError("Invalid IPv4 address", context={"address": text})

    octets = []
    for part in parts:
        if not _DECIMAL_OCTET.fullmatch(part):
            raise AddressError("Invalid IPv4 address", context={"address": text})
        value = int(part, 10)
        if value > 0xFF:
            raise AddressError("Invalid IPv4 address", context={"address": text})
        octets.append(value)

    return Ipv4Address(bytes(octets))


def _parse_groups(text: str, section: str) -> List[int]:
    if not section:
        return []
    groups = []
    for part in section.split(":"):
        if not _HEX_GROUP.fullmatch(part):
            raise AddressError("Invalid IPv6 address", context={"address": text})
        groups.append(int(part, 16))
    return groups


def parse_ipv6(text: str) -> Ipv6Address:
    """
    Parse colon-hex IPv6 text, including ``::`` zero compression.

    Args:
        text: Address such as ``2001:db8::1`` (no brackets, no zone id)

    Returns:
        Parsed Ipv6Address

    Raises:
        AddressError: If the text is not a valid IPv6 address
    """
    if text.count("::") > 1:
        raise AddressError("Invalid IPv6 address", context={"address": text})

    if "::" in text:
        left, right = text.split("::")
        left_groups = _parse_groups(text, left)
        right_groups = _parse_groups(text, right)
        missing = IPV6_GROUPS - len(left_groups) - len(right_groups)
        if missing < 0:
            raise AddressError("Invalid IPv6 address", context={"address": text})
        groups = left_groups + [0] * missing + right_groups
    else:
        groups = _parse_groups(text, text)
        if len(groups) != IPV6_GROUPS:
            raise AddressError("Invalid IPv6 address", context={"address": text})

    return Ipv6Address(b"".join(group.to_bytes(2, "big") for group in groups))


def from_string(text: str) -> InetAddress:
    """Parse IPv6 text when it contains a colon, IPv4 text otherwise."""
    if ":" in text:
        return parse_ipv6(text)
    return parse_ipv4(text)


def from_bytes(data: bytes) -> InetAddress:
    """
    Build an address from its packed form.

    Raises:
        AddressError: If the length is neither 4 nor 16
    """
    data = bytes(data)
    if len(data) == IPV4_LENGTH:
        return Ipv4Address(data)
    if len(data) == IPV6_LENGTH:
        return Ipv6Address(data)
    raise AddressError(
        "Invalid address length",
        context={"length": len(data)},
    )


def render(address: InetAddress) -> str:
    """Canonical text form of an address."""
    return str(address)
