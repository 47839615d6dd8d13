"""Monitoring package."""

from monitoring.metrics import ResolverMetrics

__all__ = ["ResolverMetrics"]
