"""Shared test fixtures and configuration."""

import os

import pytest


# Complete test environment that overrides ALL possible config values
TEST_ENV = {
    "APP_HOST": "demo.openshift.io",
    "REGISTER_WORK_ITEM_ROUTES": "true",
    "EXTRA_URL_PATTERNS": "{}",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    "OTEL_COLLECTOR_ENABLED": "false",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

from workitem_search.search.known_urls import KnownURLRegistry, register_work_item_routes  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset environment variables to test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def registry() -> KnownURLRegistry:
    """Fresh, empty registry; tests never share registrations."""
    return KnownURLRegistry()


@pytest.fixture
def work_item_registry(registry: KnownURLRegistry) -> KnownURLRegistry:
    """Registry with the list and board detail routes of demo.openshift.io."""
    register_work_item_routes(registry, "demo.openshift.io")
    return registry
