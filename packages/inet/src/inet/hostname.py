"""Hostname normalization, classification and ordering.

Hosts are handled the way a browser sees the authority of an ``http`` URL:
userinfo and port are dropped, IPv6 literals keep their brackets, and DNS
names are lowercased with non-ASCII labels IDNA-encoded.

All functions here are pure and safe to call from any task or thread.
"""

from __future__ import annotations

import functools
import locale
from typing import Iterable, List, Optional
from urllib.parse import unquote, urlsplit

import idna

from common import AddressError, InvalidHostError
from common.constants import LOCAL_IP_ADDRESSES, LOCALHOST_LABEL
from inet.address import InetAddress, from_string, parse_ipv4, parse_ipv6

# WHATWG forbidden host code points (after percent-decoding)
FORBIDDEN_HOST_CHARACTERS = frozenset(
    "\x00\t\n\r #%/:<>?@[\\]^|"
)


PUNYCODE_PREFIX = "xn--"


def _remap(host: str, original: str) -> str:
    # Non-strict UTS #46: symbols and emoji are allowed, as in URL hosts
    try:
        return idna.uts46_remap(host, std3_rules=False, transitional=False)
    except (idna.IDNAError, UnicodeError) as e:
        raise InvalidHostError(
            "Cannot map host for IDNA",
            context={"host": original},
            original_error=e,
        )


def _encode_label(label: str, host: str) -> str:
    if label.isascii():
        return label.lower()
    try:
        return PUNYCODE_PREFIX + label.encode("punycode").decode("ascii")
    except UnicodeError as e:
        raise InvalidHostError(
            "Cannot IDNA-encode host label",
            context={"host": host, "label": label},
            original_error=e,
        )


def _normalize_authority(netloc: str, original: str) -> str:
    host = netloc.rpartition("@")[2]

    if host.startswith("["):
        end = host.find("]")
        remainder = host[end + 1 :] if end != -1 else ""
        if end == -1 or (remainder and not remainder.startswith(":")):
            raise InvalidHostError("Unterminated IPv6 literal", context={"host": original})
        try:
            address = parse_ipv6(host[1:end])
        except AddressError as e:
            raise InvalidHostError(
                "Invalid IPv6 literal", context={"host": original}, original_error=e
            )
        return f"[{address}]"

    host, _, port = host.partition(":")
    if port and not port.isdigit():
        raise InvalidHostError("Invalid port", context={"host": original})

    try:
        host = unquote(host, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidHostError(
            "Invalid percent-encoding in host",
            context={"host": original},
            original_error=e,
        )

    if not host.isascii():
        host = _remap(host, original)

    if not host:
        raise InvalidHostError("Empty host", context={"host": original})
    if any(char in FORBIDDEN_HOST_CHARACTERS for char in host):
        raise InvalidHostError("Forbidden character in host", context={"host": original})

    encoded = ".".join(_encode_label(label, original) for label in host.split("."))

    # A host ending in a numeric label is an IPv4 address or nothing
    last_label = encoded.rstrip(".").rpartition(".")[2]
    if last_label.isdigit():
        try:
            return str(parse_ipv4(encoded[:-1] if encoded.endswith(".") else encoded))
        except AddressError as e:
            raise InvalidHostError(
                "Invalid IPv4 host", context={"host": original}, original_error=e
            )

    return encoded


def _netloc(url: str) -> str:
    try:
        return urlsplit(url).netloc
    except ValueError as e:
        raise InvalidHostError("Cannot parse URL", context={"url": url}, original_error=e)


def encode(domain: str) -> str:
    """
    Get the ASCII form of a domain or host.

    Args:
        domain: Domain, host or ``host:port`` (optionally with a path)

    Returns:
        Lowercased, IDNA-encoded host; IPv6 literals as canonical ``[...]``

    Raises:
        InvalidHostError: If the input is not a valid URL authority

    Examples:
        >>> encode("Bücher.Example")
        'xn--bcher-kva.example'
        >>> encode("[0:0::1]:8080")
        '[::1]'
    """
    return _normalize_authority(_netloc(f"http://{domain}"), domain)


def decode(domain: str) -> str:
    """
    Get the Unicode form of a domain, decoding punycode labels.

    Raises:
        InvalidHostError: If the domain cannot be encoded or decoded
    """
    encoded = encode(domain)
    if encoded.startswith("["):
        return encoded

    labels = []
    for label in encoded.split("."):
        if label.startswith(PUNYCODE_PREFIX):
            try:
                label = label[len(PUNYCODE_PREFIX) :].encode("ascii").decode("punycode")
            except UnicodeError as e:
                raise InvalidHostError(
                    "Cannot decode punycode label",
                    context={"host": domain, "label": label},
                    original_error=e,
                )
        labels.append(label)
    return ".".join(labels)


def get_host(url_or_host: str) -> str:
    """Encoded host of a URL, or of a bare host when there is no scheme."""
    if "://" in url_or_host:
        return _normalize_authority(_netloc(url_or_host), url_or_host)
    return encode(url_or_host)


def get_ip_address(url_or_host: str) -> Optional[InetAddress]:
    """The address a URL or host names literally, or None for DNS names."""
    if "://" not in url_or_host and ":" in url_or_host:
        # Bare IPv6 text without brackets
        try:
            return parse_ipv6(url_or_host)
        except AddressError:
            pass

    try:
        host = get_host(url_or_host)
    except InvalidHostError:
        return None

    if host.startswith("[") and host.endswith("]"):
        return parse_ipv6(host[1:-1])
    try:
        return parse_ipv4(host)
    except AddressError:
        return None


def is_ip_literal(url_or_host: str) -> bool:
    """
    Check whether a URL's host (or a bare host) is an IP address.

    Never raises; anything unparseable is simply not an IP literal.

    Examples:
        >>> is_ip_literal("http://[::1]:8080/")
        True
        >>> is_ip_literal("192.0.2.1")
        True
        >>> is_ip_literal("example.com")
        False
    """
    return get_ip_address(url_or_host) is not None


def is_localhost(hostname: str) -> bool:
    """True for loopback literals and for ``localhost`` or ``*.localhost``."""
    address = get_ip_address(hostname)
    if address is not None:
        return str(address) in LOCAL_IP_ADDRESSES
    return hostname.split(".")[-1].lower() == LOCALHOST_LABEL


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _labels(domain: str) -> List[str]:
    try:
        return encode(domain).split(".")
    except InvalidHostError:
        return domain.split(".")


def compare(domain1: str, domain2: str) -> int:
    """
    Total order for displaying domains.

    Empty strings come first, then IP literals (compared as plain strings),
    then DNS names compared label by label starting from the TLD. When one
    name is a label suffix of the other, the shorter one comes first.

    Labels are collated with ``locale.strcoll``, so the order follows the
    process LC_COLLATE setting; under the default C locale that is code
    point order. The netident CLI sets LC_COLLATE from the environment.

    Returns:
        -1, 0 or 1
    """
    if domain1 == domain2:
        return 0
    if domain1 == "":
        return -1
    if domain2 == "":
        return 1

    is_ip1 = is_ip_literal(domain1)
    is_ip2 = is_ip_literal(domain2)
    if is_ip1 and is_ip2:
        return _sign((domain1 > domain2) - (domain1 < domain2))
    if is_ip1:
        return -1
    if is_ip2:
        return 1

    labels1 = _labels(domain1)
    labels2 = _labels(domain2)
    for part1, part2 in zip(reversed(labels1), reversed(labels2)):
        if part1 != part2:
            result = _sign(locale.strcoll(part1, part2))
            if result:
                return result
            return _sign((part1 > part2) - (part1 < part2))
    return _sign(len(labels1) - len(labels2))


def sort(domains: Iterable[str]) -> List[str]:
    """Stable sort of domains using ``compare``."""
    return sorted(domains, key=functools.cmp_to_key(compare))
