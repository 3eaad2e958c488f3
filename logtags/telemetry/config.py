"""OTel provider configuration for tag loggers.

Provides :func:`configure_logging` (logger provider),
:func:`get_default_provider` (lazy singleton with console output) and
:func:`otel_tag_logger` (a ready :class:`OTelTagLogger`).
"""

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from ..levels import Level
from .exporters import ConsoleLogRecordExporter
from .logger import OTelTagLogger


def configure_logging(
    service_name: str = "logtags",
    service_version: str = "",
    log_exporter: LogRecordExporter | None = None,
    batch_logs: bool = True,
) -> LoggerProvider:
    """
    Configure an OTel LoggerProvider.

    Returns the provider for explicit injection -- does NOT set the global
    provider.

    Args:
        service_name: Service identifier for resource attributes.
        service_version: Service version for resource attributes.
        log_exporter: Optional log exporter
            (e.g., OTLPLogExporter, ConsoleLogRecordExporter).
        batch_logs: If True, use BatchLogRecordProcessor
            (better for network exporters). If False, use
            SimpleLogRecordProcessor (immediate, better for console).

    Returns:
        The configured LoggerProvider.

    Example:
        >>> provider = configure_logging(
        ...     service_name="billing",
        ...     log_exporter=ConsoleLogRecordExporter(),
        ...     batch_logs=False,
        ... )
        >>> log = with_context(OTelTagLogger(provider.get_logger("billing"), "Billing"), tenant="acme")
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
        }
    )

    logger_provider = LoggerProvider(resource=resource)
    if log_exporter:
        if batch_logs:
            logger_provider.add_log_record_processor(
                BatchLogRecordProcessor(log_exporter)
            )
        else:
            logger_provider.add_log_record_processor(
                SimpleLogRecordProcessor(log_exporter)
            )

    return logger_provider


_default_logger_provider: LoggerProvider | None = None


def get_default_provider(service_name: str = "logtags") -> LoggerProvider:
    """Get or create the default provider with console output.

    Lazily initializes on first call and returns the same provider on
    subsequent calls. Records are exported immediately (no batching).

    Args:
        service_name: Service name for the default provider (only used on first call).
    """
    global _default_logger_provider

    if _default_logger_provider is None:
        _default_logger_provider = configure_logging(
            service_name=service_name,
            log_exporter=ConsoleLogRecordExporter(),
            batch_logs=False,
        )
    return _default_logger_provider


def otel_tag_logger(
    name: str,
    source: str | None = None,
    provider: LoggerProvider | None = None,
    min_level: Level | str | int | None = None,
) -> OTelTagLogger:
    """Build an :class:`OTelTagLogger` on ``provider`` (the default one if omitted)."""
    provider = provider or get_default_provider()
    return OTelTagLogger(provider.get_logger(name), source=source or name, min_level=min_level)
