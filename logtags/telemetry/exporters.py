"""OTel log-record exporter for console output.

Provides :class:`ConsoleLogRecordExporter`, which prints records with their
tags and context to stderr.
"""

import sys
from collections.abc import Sequence
from typing import Literal

from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from .logger import format_log_record, format_log_record_json

LOG_FORMAT = Literal["text", "json"]


class ConsoleLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes CLI-friendly output to stderr.

    Example output:
        2026-02-03T10:30:00Z [INFO] Billing\t: SLACK tenant=acme charged 12
        2026-02-03T10:30:01Z [DEBUG] Billing\t: tenant=acme retrying
    """

    def __init__(self, format: LOG_FORMAT = "text"):
        self._formatter = (
            format_log_record_json if format == "json" else format_log_record
        )

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Export log records to stderr.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success.
        """
        try:
            for readable_record in batch:
                record = readable_record.log_record
                sys.stderr.write(self._formatter(record))
            sys.stderr.flush()
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Shutdown the exporter (no-op for console)."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush any buffered data.

        Returns:
            True always, as stderr is line-buffered.
        """
        sys.stderr.flush()
        return True
