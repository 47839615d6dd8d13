"""URL helpers: validity, scheme classification and host encoding."""

from __future__ import annotations

from urllib.parse import SplitResult, unquote, urlsplit, urlunsplit

from common import InvalidHostError
from common.constants import HTTP_SCHEMES, PRIVILEGED_SCHEMES
from inet import hostname


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidHostError("Cannot parse URL", context={"url": url}, original_error=e)
    return parts


def get_scheme(url: str) -> str:
    """Lowercased scheme of a URL, or "" when it has none or cannot be parsed."""
    try:
        return _split(url).scheme.lower()
    except InvalidHostError:
        return ""


def is_valid_url(url: str) -> bool:
    """
    Check whether a string is an absolute URL.

    http and https URLs must also carry a valid host.
    """
    scheme = get_scheme(url)
    if not scheme:
        return False
    if scheme in HTTP_SCHEMES:
        try:
            hostname.get_host(url)
        except InvalidHostError:
            return False
    return True


def is_http_scheme(url: str) -> bool:
    return get_scheme(url) in HTTP_SCHEMES


def is_privileged_scheme(url: str) -> bool:
    """Schemes that web content cannot navigate to (about:, file:, ...)."""
    return get_scheme(url) in PRIVILEGED_SCHEMES


def _netloc_with_host(parts: SplitResult, host: str) -> str:
    userinfo, at, _ = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{host}"
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return netloc


def get_encoded_url(url: str) -> str:
    """
    Get a URL with its host in ASCII form.

    Raises:
        InvalidHostError: If the URL or its host cannot be parsed
    """
    parts = _split(url)
    if not parts.netloc:
        return url

    scheme = parts.scheme.lower()
    path = parts.path
    if scheme in HTTP_SCHEMES and not path:
        path = "/"
    netloc = _netloc_with_host(parts, hostname.get_host(url))
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def get_decoded_url(url: str) -> str:
    """
    Get a human-readable form of an http(s) URL.

    The host is punycode-decoded and the path, query and fragment are
    percent-decoded. URLs with other schemes are returned unchanged.
    """
    parts = _split(url)
    if parts.scheme.lower() not in HTTP_SCHEMES:
        return url

    host = hostname.decode(hostname.get_host(url))
    netloc = host if parts.port is None else f"{host}:{parts.port}"
    decoded = f"{parts.scheme.lower()}://{netloc}{unquote(parts.path) or '/'}"
    if parts.query:
        decoded = f"{decoded}?{unquote(parts.query)}"
    if parts.fragment:
        decoded = f"{decoded}#{unquote(parts.fragment)}"
    return decoded
