"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from workitem_search.observability.context import get_trace_context, set_trace_context, trace_context
from workitem_search.observability.logging import JsonFormatter, configure_logging
from workitem_search.observability.metrics import (
    QUERIES_COMPILED,
    URL_CLASSIFICATIONS,
    build_metric_readers,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
)
from workitem_search.observability.tracing import configure_trace_exporter, create_span, get_tracer, init_tracing


__all__ = [
    "QUERIES_COMPILED",
    "URL_CLASSIFICATIONS",
    "JsonFormatter",
    "build_metric_readers",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
]
