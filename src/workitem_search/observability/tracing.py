"""OpenTelemetry tracing with optional OTLP export."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter as GrpcOTLPSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as HttpOTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from workitem_search.observability.context import update_span_id


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

    from workitem_search.config import Settings

logger = logging.getLogger(__name__)

# Module-level tracer storage
_tracer_holder: dict[str, Any] = {"tracer": None, "provider": None}


def init_tracing(
    service_name: str = "workitem-search",
    resource_attributes: dict[str, str] | None = None,
    span_processors: Sequence[SpanProcessor] | None = None,
) -> TracerProvider:
    """Initialize OpenTelemetry tracing.

    Spans from :func:`create_span` go to the returned provider and reach
    whatever processors are attached to it.
    """
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    resource = Resource.create(attributes)
    provider = TracerProvider(resource=resource)
    for processor in span_processors or []:
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    _tracer_holder["provider"] = provider
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def configure_trace_exporter(settings: Settings, provider: TracerProvider | None = None) -> None:
    """Attach an OTLP span exporter when collector export is enabled."""
    if not settings.otel_collector_enabled:
        return

    active_provider = provider or _tracer_holder.get("provider")
    if not isinstance(active_provider, TracerProvider):
        active_provider = init_tracing()

    if settings.otel_otlp_protocol == "grpc":
        exporter = GrpcOTLPSpanExporter(
            endpoint=settings.otel_collector_endpoint,
            headers=settings.otel_headers,
            timeout=settings.otel_timeout_seconds,
            insecure=settings.otel_grpc_insecure,
        )
    else:
        exporter = HttpOTLPSpanExporter(
            endpoint=settings.otel_collector_endpoint,
            headers=settings.otel_headers,
            timeout=settings.otel_timeout_seconds,
        )

    active_provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info(
        "OTLP trace export enabled (%s) to %s",
        settings.otel_otlp_protocol,
        settings.otel_collector_endpoint,
    )


def get_tracer() -> Tracer:
    """Get the configured tracer, falling back to the global provider."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span with context propagation."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        # Update context with new span_id
        ctx = span.get_span_context()
        if ctx.is_valid:
            update_span_id(format(ctx.span_id, "016x"))

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
