"""Configuration constants for the resolver."""

from typing import Final

# Public Suffix List
PUBLIC_SUFFIX_LIST_URL: Final[str] = (
    "https://publicsuffix.org/list/public_suffix_list.dat"
)
PSL_STORAGE_KEY: Final[str] = "netident.dns.publicSuffixList"
PSL_UPDATE_INTERVAL_HOURS: Final[int] = 24
PSL_PRIVATE_SECTION_MARKER: Final[str] = "===BEGIN PRIVATE DOMAINS==="

# HTTP Fetcher Defaults
DEFAULT_HTTP_TIMEOUT: Final[int] = 30
DEFAULT_HTTP_RETRIES: Final[int] = 3
DEFAULT_HTTP_BACKOFF: Final[float] = 5.0
MAX_HTTP_TIMEOUT: Final[int] = 300  # 5 minutes
MIN_HTTP_TIMEOUT: Final[int] = 5

# Cache store
DEFAULT_CACHE_DIR: Final[str] = "~/.cache/netident"

# URL schemes
HTTP_SCHEMES: Final[frozenset] = frozenset({"http", "https"})
PRIVILEGED_SCHEMES: Final[frozenset] = frozenset(
    {"about", "chrome", "javascript", "data", "file"}
)

# Hosts that always count as the local machine
LOCALHOST_LABEL: Final[str] = "localhost"
LOCAL_IP_ADDRESSES: Final[tuple] = ("127.0.0.1", "::1")

# Service Defaults
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_METRICS_NAMESPACE: Final[str] = "netident"
