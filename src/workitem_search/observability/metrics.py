"""Prometheus metrics for search compilation, mirrored to OpenTelemetry instruments."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
    OTLPMetricExporter as GrpcOTLPMetricExporter,
)
from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
    OTLPMetricExporter as HttpOTLPMetricExporter,
)
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest


if TYPE_CHECKING:
    from workitem_search.config import Settings


_meter_holder: dict[str, Any] = {"meter": None, "provider": None}


def init_metrics(
    service_name: str = "workitem-search",
    resource_attributes: dict[str, str] | None = None,
    metric_readers: Sequence[MetricReader] | None = None,
) -> MeterProvider:
    """Initialize OpenTelemetry metrics.

    Readers are fixed when a MeterProvider is built, so passing readers after
    initialization replaces the active provider.
    """
    provider = _meter_holder.get("provider")
    if isinstance(provider, MeterProvider) and not metric_readers:
        return provider

    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    resource = Resource.create(attributes)
    provider = MeterProvider(resource=resource, metric_readers=list(metric_readers or []))
    otel_metrics.set_meter_provider(provider)
    _meter_holder["provider"] = provider
    _meter_holder["meter"] = provider.get_meter(__name__)
    return provider


def build_metric_readers(settings: Settings) -> list[MetricReader]:
    """OTLP metric readers for the configured collector, empty when export is off."""
    if not settings.otel_collector_enabled:
        return []

    endpoint = settings.otel_collector_endpoint
    if settings.otel_otlp_protocol == "http" and endpoint.endswith("/v1/traces"):
        endpoint = endpoint.removesuffix("/v1/traces") + "/v1/metrics"

    if settings.otel_otlp_protocol == "grpc":
        exporter = GrpcOTLPMetricExporter(
            endpoint=endpoint,
            headers=settings.otel_headers,
            timeout=settings.otel_timeout_seconds,
            insecure=settings.otel_grpc_insecure,
        )
    else:
        exporter = HttpOTLPMetricExporter(
            endpoint=endpoint,
            headers=settings.otel_headers,
            timeout=settings.otel_timeout_seconds,
        )
    return [PeriodicExportingMetricReader(exporter)]


def _get_meter():
    meter = _meter_holder.get("meter")
    if meter is None:
        init_metrics()
        meter = _meter_holder.get("meter")
    return meter


class _BoundCounter:
    def __init__(self, wrapper: CounterBridge, labels: dict[str, str]) -> None:
        self._wrapper = wrapper
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._wrapper.inc(self._labels, amount)


class CounterBridge:
    """Bridge a Prometheus counter to an OTel counter of the same name."""

    def __init__(self, prom_metric: Counter, *, otel_name: str, otel_description: str) -> None:
        self._prom_metric = prom_metric
        self._otel_name = otel_name
        self._otel_description = otel_description
        self._otel_meter = None
        self._otel_instrument = None

    def labels(self, **labels: str) -> _BoundCounter:
        return _BoundCounter(self, labels)

    def _ensure_otel_instrument(self):
        # Re-create the instrument when init_metrics swapped the provider
        meter = _get_meter()
        if self._otel_instrument is None or self._otel_meter is not meter:
            self._otel_instrument = meter.create_counter(self._otel_name, description=self._otel_description)
            self._otel_meter = meter
        return self._otel_instrument

    def inc(self, labels: dict[str, str], amount: float = 1.0) -> None:
        if labels:
            self._prom_metric.labels(**labels).inc(amount)
        else:
            self._prom_metric.inc(amount)
        self._ensure_otel_instrument().add(amount, labels)


_QUERIES_COMPILED_PROM = Counter(
    "workitem_search_queries_compiled",
    "Search inputs compiled into keyword queries",
)

_URL_CLASSIFICATIONS_PROM = Counter(
    "workitem_search_url_classifications",
    "URL tokens classified against the known-URL registry",
    ["outcome"],
)

QUERIES_COMPILED = CounterBridge(
    _QUERIES_COMPILED_PROM,
    otel_name="workitem_search_queries_compiled",
    otel_description="Search inputs compiled into keyword queries",
)

URL_CLASSIFICATIONS = CounterBridge(
    _URL_CLASSIFICATIONS_PROM,
    otel_name="workitem_search_url_classifications",
    otel_description="URL tokens classified against the known-URL registry",
)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST
