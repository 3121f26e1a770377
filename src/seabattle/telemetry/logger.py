"""Logging helpers with optional OpenTelemetry export."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .resources import build_resource

if TYPE_CHECKING:
    from .config import TelemetryConfig

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s "
    "| trace_id=%(otelTraceID)s span_id=%(otelSpanID)s"
)

_LOGGER: logging.Logger | None = None
_HANDLER_INSTALLED = False
_FILTER_INSTALLED = False


class _OtelContextFilter(logging.Filter):
    """Ensures trace/span placeholders exist even when no context is active."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not hasattr(record, "otelTraceID"):
            record.otelTraceID = "-"
        if not hasattr(record, "otelSpanID"):
            record.otelSpanID = "-"
        return True


def get_logger(name: str = "seabattle") -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(name)
        _LOGGER.setLevel(logging.INFO)
    return _LOGGER


def configure_console_logging(level: int | str = logging.WARNING) -> None:
    """Install the console handler used by the terminal front-end."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        for existing in root_logger.handlers:
            existing.addFilter(_OtelContextFilter())
    else:
        root_logger.setLevel(level)
    _install_context_filter(root_logger)


def init_logging(config: TelemetryConfig) -> logging.Logger:
    logger = get_logger(config.service_name)
    try:
        from opentelemetry._logs import set_logger_provider
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
        from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
        from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
    except ImportError:  # pragma: no cover
        return logger

    provider = LoggerProvider(resource=build_resource(config))

    if config.otlp_logs_endpoint:
        exporter = OTLPLogExporter(endpoint=config.otlp_logs_endpoint, insecure=True)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

    set_logger_provider(provider)
    handler = LoggingHandler(level=logging.INFO, logger_provider=provider)

    _install_root_handler(handler)
    return logger


def _install_context_filter(root_logger: logging.Logger) -> None:
    global _FILTER_INSTALLED
    if not _FILTER_INSTALLED:
        root_logger.addFilter(_OtelContextFilter())
        _FILTER_INSTALLED = True


def _install_root_handler(handler: logging.Handler) -> None:
    """Attach the OTLP logging handler to the root logger once."""
    global _HANDLER_INSTALLED
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        configure_console_logging(logging.INFO)
    _install_context_filter(root_logger)

    if not _HANDLER_INSTALLED:
        handler.addFilter(_OtelContextFilter())
        root_logger.addHandler(handler)
        _HANDLER_INSTALLED = True
