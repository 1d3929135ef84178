"""Centralized configuration for workitem-search using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    All environment variables are validated at startup with proper types.
    Known-URL patterns are built from these values once, before the first
    search request is compiled.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Known-URL registration
    app_host: str = Field(
        default="openshift.io",
        description="Host serving the work-item UI; its detail routes are registered as known URLs",
    )
    register_work_item_routes: bool = Field(
        default=True,
        description="Register the work-item list and board detail routes at startup",
    )
    extra_url_patterns: dict[str, str] = Field(
        default_factory=dict,
        description="Additional known-URL patterns as a JSON object of name -> regular expression",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # OTLP export (spans and mirrored counters)
    otel_collector_enabled: bool = Field(
        default=False, description="Enable OTLP trace and metric export to an external collector"
    )
    otel_otlp_protocol: Literal["http", "grpc"] = Field(default="http", description="OTLP transport protocol")
    otel_collector_endpoint: str = Field(
        default="http://localhost:4318/v1/traces",
        description="OTLP collector endpoint (HTTP uses /v1/traces)",
    )
    otel_timeout_seconds: int = Field(default=10, ge=1, description="OTLP export timeout in seconds")
    otel_grpc_insecure: bool = Field(default=True, description="Use an insecure gRPC channel")
    otel_headers: dict[str, str] = Field(
        default_factory=dict, description="Extra OTLP request headers as a JSON object"
    )

    @field_validator("app_host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        # Patterns are matched against URLs that already lost their protocol
        host = value.strip().removeprefix("https://").removeprefix("http://").rstrip("/")
        if not host:
            raise ValueError("APP_HOST must not be empty")
        return host

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {value}")
        return value.lower()
