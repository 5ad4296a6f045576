"""Observability layer - logging and metrics."""

from catalog_parsers.observability.logging import setup_logging
from catalog_parsers.observability.metrics import ParserMetrics, get_metrics

__all__ = ["setup_logging", "ParserMetrics", "get_metrics"]
