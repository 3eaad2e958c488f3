"""OpenTelemetry backend for tag loggers.

This package provides provider configuration, the event-aware
:class:`OTelTagLogger` and a console log-record exporter.
"""

from .config import (
    configure_logging,
    get_default_provider,
    otel_tag_logger,
)
from .exporters import (
    LOG_FORMAT,
    ConsoleLogRecordExporter,
)
from .logger import (
    OTelTagLogger,
    event_attributes,
    format_log_record,
    format_log_record_json,
)

__all__ = [
    # config
    "configure_logging",
    "get_default_provider",
    "otel_tag_logger",
    # logger
    "OTelTagLogger",
    "event_attributes",
    "format_log_record",
    "format_log_record_json",
    # exporters
    "ConsoleLogRecordExporter",
    "LOG_FORMAT",
]
