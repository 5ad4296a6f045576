"""
Prometheus metrics for parser operations.

Defines metrics for:
- Operation counts per source and outcome
- Operation latency
- Structural parse failures
- Authorization-required signals

Exposing them (HTTP endpoint, push gateway) is left to the embedding
application; everything is registered on the default registry unless a
dedicated one is passed in.
"""

import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from catalog_parsers.config.settings import get_settings
from catalog_parsers.sources.schemas import ContentSource

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class ParserMetrics:
    """
    Prometheus metrics collector for parser operations.

    Usage:
        metrics = get_metrics()
        metrics.record_operation(ContentSource.COMICK_FUN, "list", "success", 0.42)
    """

    def __init__(
        self,
        registry: CollectorRegistry = REGISTRY,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self.registry = registry

        self.operations = Counter(
            "catalog_parsers_operations_total",
            "Total number of parser operations",
            ["source", "operation", "status"],  # status: success, parse_error, auth_required, cancelled, error
            registry=registry,
        )

        self.operation_latency = Histogram(
            "catalog_parsers_operation_latency_seconds",
            "Time spent in a parser operation, transport included",
            ["source", "operation"],
            buckets=LATENCY_BUCKETS,
            registry=registry,
        )

        self.parse_failures = Counter(
            "catalog_parsers_parse_failures_total",
            "Expected markup or structure missing in fetched content",
            ["source"],
            registry=registry,
        )

        self.auth_required = Counter(
            "catalog_parsers_auth_required_total",
            "Operations that needed a logged-in session",
            ["source"],
            registry=registry,
        )

    def record_operation(
        self,
        source: ContentSource | str,
        operation: str,
        status: str,
        latency: float,
    ) -> None:
        """
        Record the outcome of a single parser operation.

        Args:
            source: Source the operation ran against
            operation: Operation name (list, details, pages, tags, page_url, favicons)
            status: Outcome label
            latency: Wall time in seconds
        """
        if not self.enabled:
            return
        source_str = source.name if isinstance(source, ContentSource) else source
        self.operations.labels(source=source_str, operation=operation, status=status).inc()
        self.operation_latency.labels(source=source_str, operation=operation).observe(latency)
        if status == "parse_error":
            self.parse_failures.labels(source=source_str).inc()
        elif status == "auth_required":
            self.auth_required.labels(source=source_str).inc()


# Global metrics instance
_metrics: ParserMetrics | None = None


def get_metrics() -> ParserMetrics:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = ParserMetrics(enabled=get_settings().metrics_enabled)
    return _metrics
