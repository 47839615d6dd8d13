"""Prometheus metrics for the registrable domain resolver."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from datetime import datetime
from typing import MutableMapping, Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway

from common import get_env
from common.constants import DEFAULT_METRICS_NAMESPACE

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class ResolverMetrics:
    """Counters and gauges describing rule refreshes and resolutions.

    Each instance owns its own registry so several resolvers (and tests) do
    not collide on metric names. Pushing to a Pushgateway is optional and
    only happens when a URL is configured.
    """

    namespace: str = DEFAULT_METRICS_NAMESPACE
    subsystem: str = "resolver"
    pushgateway_url: Optional[str] = None
    job_name: str = "netident_resolver"
    default_labels: MutableMapping[str, str] = field(default_factory=dict)
    timeout_seconds: int = 5
    registry: CollectorRegistry = field(default_factory=CollectorRegistry)
    _hostname: str = field(init=False, repr=False)
    _refreshes: Counter = field(init=False, repr=False)
    _refresh_failures: Counter = field(init=False, repr=False)
    _resolved_urls: Counter = field(init=False, repr=False)
    _rule_count: Gauge = field(init=False, repr=False)
    _last_refresh: Gauge = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.pushgateway_url is None:
            self.pushgateway_url = get_env("PROMETHEUS_PUSHGATEWAY_URL") or None
        if not self.default_labels:
            self.default_labels = {
                "environment": get_env("ENVIRONMENT", "development"),
            }
        self._hostname = socket.gethostname()

        labelnames = sorted(self.default_labels)
        prefix = self._metric_prefix
        self._refreshes = Counter(
            f"{prefix}_rule_refreshes",
            "Public suffix list fetches that replaced the cached rule set",
            labelnames=labelnames,
            registry=self.registry,
        )
        self._refresh_failures = Counter(
            f"{prefix}_rule_refresh_failures",
            "Public suffix list refresh attempts that failed",
            labelnames=["error_type", *labelnames],
            registry=self.registry,
        )
        self._resolved_urls = Counter(
            f"{prefix}_resolved_urls",
            "URLs passed through registrable domain resolution",
            labelnames=labelnames,
            registry=self.registry,
        )
        self._rule_count = Gauge(
            f"{prefix}_rules",
            "Rules in the active rule set by kind (rule, exception)",
            labelnames=["kind", *labelnames],
            registry=self.registry,
        )
        self._last_refresh = Gauge(
            f"{prefix}_last_refresh_timestamp",
            "UTC timestamp of the active rule set's fetch",
            labelnames=labelnames,
            registry=self.registry,
        )

    @property
    def _metric_prefix(self) -> str:
        return f"{self.namespace}_{self.subsystem}".replace("-", "_")

    def record_rule_set(self, rules: int, exception_rules: int, fetched_at: datetime) -> None:
        """Record the size and age of the rule set now in use."""
        self._rule_count.labels(kind="rule", **self.default_labels).set(rules)
        self._rule_count.labels(kind="exception", **self.default_labels).set(
            exception_rules
        )
        self._last_refresh.labels(**self.default_labels).set(fetched_at.timestamp())

    def record_refresh(self) -> None:
        self._refreshes.labels(**self.default_labels).inc()

    def record_refresh_failure(self, error: BaseException) -> None:
        self._refresh_failures.labels(
            error_type=type(error).__name__, **self.default_labels
        ).inc()

    def record_resolved(self, count: int) -> None:
        self._resolved_urls.labels(**self.default_labels).inc(count)

    def push(self) -> None:
        """Push the registry to the Pushgateway, if one is configured."""
        if not self.pushgateway_url:
            return

        try:
            push_to_gateway(
                self.pushgateway_url,
                job=self.job_name,
                registry=self.registry,
                grouping_key={"instance": self._hostname},
                timeout=self.timeout_seconds,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Failed to push metrics to Prometheus Pushgateway",
                pushgateway_url=self.pushgateway_url,
                error=str(exc),
            )
