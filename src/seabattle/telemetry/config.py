"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}

_BOOL_ENV: dict[str, tuple[str, ...]] = {
    "enable_tracing": ("SEABATTLE_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
    "enable_metrics": ("SEABATTLE_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
    "enable_logging": ("SEABATTLE_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
}

_ENDPOINT_ENV: dict[str, tuple[str, str]] = {
    "otlp_traces_endpoint": ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces"),
    "otlp_metrics_endpoint": ("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics"),
    "otlp_logs_endpoint": ("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs"),
}

_EXPORTER_FLAGS = {
    "otlp_traces_endpoint": "enable_tracing",
    "otlp_metrics_endpoint": "enable_metrics",
    "otlp_logs_endpoint": "enable_logging",
}


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "seabattle"
    service_namespace: str = "game"
    resource_attributes: dict[str, str] = Field(default_factory=dict)
    console_traces: bool = False
    metrics_export_interval_ms: int = Field(default=5000, gt=0)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`SEABATTLE_*` + `OTEL_*`).

        Explicit ``overrides`` win over the environment. Any configured OTLP
        endpoint switches its exporter on.
        """

        data: Dict[str, Any] = cls().model_dump()

        for field, env_names in _BOOL_ENV.items():
            env_value = _bool_from_env(*env_names)
            if env_value is not None:
                data[field] = env_value

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for field, (env_name, suffix) in _ENDPOINT_ENV.items():
            data[field] = os.getenv(env_name) or _with_suffix(base_endpoint, suffix)

        service_name = os.getenv("OTEL_SERVICE_NAME")
        service_namespace = os.getenv("OTEL_SERVICE_NAMESPACE")
        if service_name:
            data["service_name"] = service_name
        if service_namespace:
            data["service_namespace"] = service_namespace

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            data["resource_attributes"] = _parse_resource_attributes(resource_env)

        data.update(overrides)

        for endpoint_field, flag in _EXPORTER_FLAGS.items():
            if data.get(endpoint_field):
                data[flag] = True

        return cls(**data)


def _bool_from_env(*names: str) -> bool | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            return value.strip().lower() in _TRUTHY
    return None


def _with_suffix(base: str | None, suffix: str) -> str | None:
    if not base:
        return None
    return f"{base.rstrip('/')}/{suffix}"


def _parse_resource_attributes(raw: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for part in raw.split(","):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        attrs[key.strip()] = value.strip()
    return attrs


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise telemetry subsystems lazily."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved

