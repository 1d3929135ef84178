"""Unit tests for startup wiring."""

import logging

import pytest

from workitem_search.app_builder import AppBuilder, build_search_compiler
from workitem_search.config import Settings
from workitem_search.observability import JsonFormatter
from workitem_search.search.known_urls import BOARD_DETAIL_PATTERN, LIST_DETAIL_PATTERN, ConfigurationError


pytestmark = pytest.mark.unit


def make_settings(**overrides: object) -> Settings:
    return Settings(**overrides)  # type: ignore[arg-type]


class TestBuildSearchCompiler:
    def test_default_settings_register_work_item_routes(self):
        compiler = build_search_compiler()
        registry = compiler.classifier.registry

        assert registry.names() == [LIST_DETAIL_PATTERN, BOARD_DETAIL_PATTERN]
        assert registry.frozen is True

        query = compiler.compile("demo.openshift.io/acme/demo/plan/detail/12 number:3 docs")
        assert query.numbers == ["3:*A"]
        assert query.words == ["(12:*A | demo.openshift.io/acme/demo/plan/detail/12:*)", "docs:*"]

    def test_extra_patterns_are_registered(self):
        settings = make_settings(
            register_work_item_routes=False,
            extra_url_patterns={"tickets": r"(?P<domain>tickets\.io)/(?P<number>\d+)"},
        )
        compiler = build_search_compiler(settings)

        assert compiler.classifier.registry.names() == ["tickets"]
        assert compiler.compile("https://tickets.io/55").words == ["(55:*A | tickets.io/55:*)"]

    def test_invalid_extra_pattern_fails_at_startup(self):
        settings = make_settings(extra_url_patterns={"broken": "(?P<domain>"})
        with pytest.raises(ConfigurationError, match="broken"):
            build_search_compiler(settings)

    def test_registry_cannot_change_after_build(self):
        compiler = build_search_compiler()
        with pytest.raises(ConfigurationError):
            compiler.classifier.registry.register("late", r"(?P<domain>late\.io)")


class TestAppBuilder:
    def test_build_configures_logging(self, monkeypatch):
        calls: dict[str, object] = {}

        def fake_configure_logging(level: str, json_output: bool) -> None:
            calls["level"] = level
            calls["json_output"] = json_output

        monkeypatch.setattr("workitem_search.app_builder.configure_logging", fake_configure_logging)
        monkeypatch.setattr("workitem_search.app_builder.init_tracing", lambda: None)
        monkeypatch.setattr("workitem_search.app_builder.configure_trace_exporter", lambda settings, provider: None)
        monkeypatch.setattr("workitem_search.app_builder.init_metrics", lambda metric_readers: None)

        builder = AppBuilder(make_settings(log_level="warning", log_json=False))
        compiler = builder.build()

        assert calls == {"level": "warning", "json_output": False}
        assert compiler.classifier.registry is builder.registry

    def test_build_wires_exporters_from_settings(self, monkeypatch):
        provider = object()
        calls: dict[str, object] = {}

        def fake_configure_trace_exporter(settings, active_provider):
            calls["trace"] = (settings.otel_collector_enabled, active_provider)

        def fake_init_metrics(metric_readers):
            calls["readers"] = metric_readers

        monkeypatch.setattr("workitem_search.app_builder.configure_logging", lambda level, json_output: None)
        monkeypatch.setattr("workitem_search.app_builder.init_tracing", lambda: provider)
        monkeypatch.setattr("workitem_search.app_builder.configure_trace_exporter", fake_configure_trace_exporter)
        monkeypatch.setattr("workitem_search.app_builder.init_metrics", fake_init_metrics)

        AppBuilder(make_settings(otel_collector_enabled=False)).build()

        assert calls["trace"] == (False, provider)
        assert calls["readers"] == []

    def test_build_registry_logs_pattern_names(self, caplog):
        caplog.set_level(logging.INFO, logger="workitem_search.app_builder")
        AppBuilder(make_settings()).build_registry()

        record = next(r for r in caplog.records if r.message == "Known URL registry ready")
        assert record.patterns == [LIST_DETAIL_PATTERN, BOARD_DETAIL_PATTERN]
        assert "patterns" in JsonFormatter().format(record)
