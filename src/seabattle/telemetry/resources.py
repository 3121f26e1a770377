"""OpenTelemetry resource shared by every telemetry signal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry.sdk.resources import Resource

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .config import TelemetryConfig


def build_resource(config: TelemetryConfig) -> Resource:
    """Describe this service using the configured name, namespace and extras."""
    attributes = {
        "service.name": config.service_name,
        "service.namespace": config.service_namespace,
    }
    attributes.update(config.resource_attributes)
    return Resource.create(attributes)
