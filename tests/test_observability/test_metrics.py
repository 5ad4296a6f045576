"""Tests for parser metrics."""

from prometheus_client import CollectorRegistry

from catalog_parsers.observability.metrics import ParserMetrics, get_metrics
from catalog_parsers.sources.schemas import ContentSource


def _count(metrics: ParserMetrics, name: str, **labels) -> float:
    return metrics.registry.get_sample_value(name, labels) or 0.0


class TestParserMetrics:
    """Tests for ParserMetrics.record_operation()."""

    def test_success(self, metrics: ParserMetrics):
        metrics.record_operation(ContentSource.COMICK_FUN, "list", "success", 0.2)

        assert _count(
            metrics, "catalog_parsers_operations_total", source="COMICK_FUN", operation="list", status="success"
        ) == 1.0
        assert _count(
            metrics, "catalog_parsers_operation_latency_seconds_count", source="COMICK_FUN", operation="list"
        ) == 1.0
        assert _count(
            metrics, "catalog_parsers_operation_latency_seconds_sum", source="COMICK_FUN", operation="list"
        ) == 0.2

    def test_parse_error_counted_separately(self, metrics: ParserMetrics):
        metrics.record_operation(ContentSource.MANGACHAN, "details", "parse_error", 0.1)

        assert _count(metrics, "catalog_parsers_parse_failures_total", source="MANGACHAN") == 1.0
        assert _count(metrics, "catalog_parsers_auth_required_total", source="MANGACHAN") == 0.0

    def test_auth_required_counted_separately(self, metrics: ParserMetrics):
        metrics.record_operation(ContentSource.MANGACHAN, "pages", "auth_required", 0.1)

        assert _count(metrics, "catalog_parsers_auth_required_total", source="MANGACHAN") == 1.0
        assert _count(metrics, "catalog_parsers_parse_failures_total", source="MANGACHAN") == 0.0

    def test_string_source(self, metrics: ParserMetrics):
        metrics.record_operation("YAOICHAN", "tags", "error", 1.0)

        assert _count(
            metrics, "catalog_parsers_operations_total", source="YAOICHAN", operation="tags", status="error"
        ) == 1.0

    def test_disabled_records_nothing(self):
        metrics = ParserMetrics(registry=CollectorRegistry(), enabled=False)
        metrics.record_operation(ContentSource.COMICK_FUN, "list", "success", 0.2)

        assert _count(
            metrics, "catalog_parsers_operations_total", source="COMICK_FUN", operation="list", status="success"
        ) == 0.0


def test_global_metrics_singleton():
    assert get_metrics() is get_metrics()
