"""OTel-backed tag logger and log record formatting.

Provides :class:`OTelTagLogger`, a tag logger that turns each call into an
OpenTelemetry ``LogRecord``. Tag trees become attributes: the decoded
context as ``context.<key>``, the other tag names as ``log.tags``.

Also contains :func:`format_log_record` and :func:`format_log_record_json`
helper functions used by the console exporter.
"""

import json
import sys
import traceback
from datetime import UTC, datetime
from typing import Any, Optional

from opentelemetry._logs import LogRecord

from ..backend import EventAwareLogger, ExcInfo, LocationAwareLogger, TagLogger
from ..events import DEFAULT_BOUNDARY, LogEvent, find_caller
from ..formatting import format_message
from ..levels import Level, to_severity
from ..tags import Tag, TagName, decode_context

CONTEXT_ATTRIBUTE_PREFIX = "context."
KEY_VALUE_ATTRIBUTE_PREFIX = "kv."

# =============================================================================
# Attribute mapping
# =============================================================================


def _tag_names(tag: Tag, names: list[str]) -> None:
    if tag.name == TagName.CONTEXT.value:
        return
    if tag.name == TagName.WRAPPER.value:
        for child in tag:
            _tag_names(child, names)
        return
    if tag.name not in names:
        names.append(tag.name)


def _attribute_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def _exception_of(exc_info: ExcInfo) -> Optional[BaseException]:
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1]
    if exc_info:
        return sys.exc_info()[1]
    return None


def event_attributes(event: LogEvent, source: str) -> dict[str, Any]:
    """
    Flatten an event's tags, key/value pairs and exception into attributes.

    Earlier tags win when two of them carry the same context key.

    Args:
        event: The event to describe.
        source: Value of the ``log.source`` attribute.

    Returns:
        Attribute dict for an OTel ``LogRecord``.
    """
    attrs: dict[str, Any] = {"log.source": source}

    names: list[str] = []
    for tag in event.tags:
        _tag_names(tag, names)
        for key, value in decode_context(tag).items():
            if value is not None:
                attrs.setdefault(CONTEXT_ATTRIBUTE_PREFIX + key, value)
    if names:
        attrs["log.tags"] = names

    for key, value in event.key_values:
        attrs[KEY_VALUE_ATTRIBUTE_PREFIX + key] = _attribute_value(value)

    error = _exception_of(event.exc_info)
    if error is not None:
        attrs["exception.type"] = type(error).__name__
        attrs["exception.message"] = str(error)
        attrs["exception.stacktrace"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return attrs


def _code_attributes(boundary: str) -> dict[str, Any]:
    frame = find_caller(boundary)
    if frame is None:
        return {}
    return {
        "code.function": frame.f_code.co_name,
        "code.filepath": frame.f_code.co_filename,
        "code.lineno": frame.f_lineno,
    }


# =============================================================================
# Log Record Formatting
# =============================================================================


def format_log_record(record: LogRecord) -> str:
    """
    Format a LogRecord as a human-readable string for console output.

    Format: YYYY-MM-DDTHH:MM:SSZ [LEVEL] [trace:span] source\\t: key=value ... body\\n

    Args:
        record: OpenTelemetry LogRecord to format.

    Returns:
        Formatted string suitable for console output.
    """
    timestamp_ns = record.timestamp or 0
    timestamp_str = datetime.fromtimestamp(timestamp_ns / 1e9, tz=UTC).strftime(
        "%Y-%m-%dT%H:%M:%SZ"
    )
    attrs = record.attributes or {}
    source = attrs.get("log.source", "Unknown")

    segments = [str(t) for t in attrs.get("log.tags", ())]
    segments.extend(
        f"{key[len(CONTEXT_ATTRIBUTE_PREFIX):]}={value}"
        for key, value in attrs.items()
        if key.startswith(CONTEXT_ATTRIBUTE_PREFIX)
    )
    prefix = " ".join(segments) + " " if segments else ""

    trace_part = ""
    if record.trace_id and record.span_id:
        trace_id_hex = f"{record.trace_id:032x}"
        span_id_hex = f"{record.span_id:016x}"
        trace_part = f" [{trace_id_hex[:8]}:{span_id_hex[:8]}]"

    return (
        f"{timestamp_str} [{record.severity_text}]{trace_part} "
        f"{source}\t: {prefix}{record.body}\n"
    )


def _strip_prefix(attrs: dict[str, Any], prefix: str) -> dict[str, Any]:
    return {key[len(prefix):]: value for key, value in attrs.items() if key.startswith(prefix)}


def format_log_record_json(record: LogRecord) -> str:
    """
    Format a LogRecord as a JSON line with the tag data lifted out.

    ``log.source``, ``log.tags``, the ``context.*`` and the ``kv.*``
    attributes become the top-level ``source``, ``tags``, ``context`` and
    ``key_values`` fields. Whatever else the record carries stays under
    ``attributes``.

    Args:
        record: OpenTelemetry LogRecord to format.

    Returns:
        JSON string (single line) with newline terminator.
    """
    timestamp_ns = record.timestamp or 0
    attrs = dict(record.attributes) if record.attributes else {}

    data: dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(timestamp_ns / 1e9, tz=UTC).isoformat(),
        "timestamp_ns": timestamp_ns,
        "level": record.severity_text,
        "severity_number": record.severity_number.value if record.severity_number else None,
        "source": attrs.pop("log.source", None),
        "tags": list(attrs.pop("log.tags", ())),
        "context": _strip_prefix(attrs, CONTEXT_ATTRIBUTE_PREFIX),
        "key_values": _strip_prefix(attrs, KEY_VALUE_ATTRIBUTE_PREFIX),
        "body": record.body,
    }
    data["attributes"] = {
        key: value
        for key, value in attrs.items()
        if not key.startswith((CONTEXT_ATTRIBUTE_PREFIX, KEY_VALUE_ATTRIBUTE_PREFIX))
    }

    if record.trace_id:
        data["trace_id"] = f"{record.trace_id:032x}"
    if record.span_id:
        data["span_id"] = f"{record.span_id:016x}"

    return json.dumps(data, default=str) + "\n"


# =============================================================================
# OTel Tag Logger
# =============================================================================


class OTelTagLogger(TagLogger, LocationAwareLogger, EventAwareLogger):
    """Event- and location-aware tag logger that emits OTel log records.

    The calling site, found by skipping frames inside the event's boundary,
    is recorded as ``code.function`` / ``code.filepath`` / ``code.lineno``.

    Example:
        >>> provider = configure_logging(log_exporter=ConsoleLogRecordExporter(), batch_logs=False)
        >>> base = OTelTagLogger(provider.get_logger("billing"), source="Billing")
        >>> log = with_context(base, tenant="acme")
        >>> log.at_info().add_key_value("amount", 12).log("charged")
    """

    def __init__(self, logger, source: str, min_level: Level | str | int | None = None):
        """Initialize OTel tag logger.

        Args:
            logger: OTel Logger instance from LoggerProvider.get_logger()
            source: Source identifier for log.source attribute
            min_level: Optional minimum level -- records below it are
                dropped.
        """
        self._logger = logger
        self._source = source
        self._min_level = None if min_level is None else Level.coerce(min_level)

    @property
    def source(self) -> str:
        return self._source

    def is_enabled_for(self, level: Level, tag: Optional[Tag] = None) -> bool:
        return self._min_level is None or level >= self._min_level

    def log_event(self, event: LogEvent) -> None:
        """Emit one log record for ``event``.

        Args:
            event: The event; its message is formatted with its args here.
        """
        if not self.is_enabled_for(event.level):
            return
        record = LogRecord(
            timestamp=event.timestamp,
            body=format_message(event.message, event.args),
            severity_text=event.level.name,
            severity_number=to_severity(event.level),
            attributes={**event_attributes(event, self._source), **_code_attributes(event.boundary)},
        )
        self._logger.emit(record)

    def log_at(
        self,
        tag: Optional[Tag],
        boundary: str,
        level: Level | int,
        msg: str,
        args: tuple,
        exc_info: ExcInfo = None,
    ) -> None:
        self.log_event(
            LogEvent(
                level=Level.coerce(level),
                message=msg,
                args=args,
                exc_info=exc_info,
                boundary=boundary,
                tags=() if tag is None else (tag,),
            )
        )

    def _emit(self, level: Level, msg: str, args: tuple, tag: Optional[Tag], exc_info: ExcInfo):
        self.log_at(tag, DEFAULT_BOUNDARY, level, msg, args, exc_info)

    def trace(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.TRACE, msg, args, tag, exc_info)

    def debug(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.DEBUG, msg, args, tag, exc_info)

    def info(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.INFO, msg, args, tag, exc_info)

    def warn(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.WARN, msg, args, tag, exc_info)

    def error(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.ERROR, msg, args, tag, exc_info)
