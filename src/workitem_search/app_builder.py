"""Startup wiring for the search query compiler."""

from __future__ import annotations

import logging

from workitem_search.config import Settings
from workitem_search.observability import (
    build_metric_readers,
    configure_logging,
    configure_trace_exporter,
    init_metrics,
    init_tracing,
)
from workitem_search.search.classifier import UrlClassifier
from workitem_search.search.known_urls import KnownURLRegistry, register_patterns, register_work_item_routes
from workitem_search.search.query_compiler import SearchQueryCompiler


logger = logging.getLogger(__name__)


class AppBuilder:
    """Builds a ready-to-use compiler from settings.

    The registry is populated and frozen here, before any search input is
    compiled, so request handlers can share it without locking.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()  # type: ignore[call-arg]
        self.registry = KnownURLRegistry()

    def build_registry(self) -> KnownURLRegistry:
        if self.settings.register_work_item_routes:
            register_work_item_routes(self.registry, self.settings.app_host)
        register_patterns(self.registry, self.settings.extra_url_patterns)
        self.registry.freeze()
        logger.info("Known URL registry ready", extra={"patterns": self.registry.names()})
        return self.registry

    def build(self, *, configure_observability: bool = True) -> SearchQueryCompiler:
        """Configure logging/telemetry, build the registry and return the compiler.

        Raises:
            ConfigurationError: If a configured pattern is not a valid regular expression.
        """
        if configure_observability:
            configure_logging(level=self.settings.log_level, json_output=self.settings.log_json)
            provider = init_tracing()
            configure_trace_exporter(self.settings, provider)
            init_metrics(metric_readers=build_metric_readers(self.settings))
        registry = self.build_registry()
        return SearchQueryCompiler(UrlClassifier(registry))


def build_search_compiler(settings: Settings | None = None) -> SearchQueryCompiler:
    """Build a compiler without touching global logging or telemetry setup."""
    return AppBuilder(settings).build(configure_observability=False)
