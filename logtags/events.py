"""Immutable log events and the fluent builder that produces them."""

import inspect
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Optional

from .levels import Level
from .tags import Tag

if TYPE_CHECKING:
    from .backend import EventAwareLogger, ExcInfo

DEFAULT_BOUNDARY = "logtags"
"""Frames from this package are skipped when looking for the calling site."""


def in_boundary(frame, boundary: str = DEFAULT_BOUNDARY) -> bool:
    """Whether ``frame`` runs code of a module at or below ``boundary`` or this package."""
    name = frame.f_globals.get("__name__", "")
    for prefix in (boundary, DEFAULT_BOUNDARY):
        if name == prefix or name.startswith(prefix + "."):
            return True
    return False


def find_caller(boundary: str = DEFAULT_BOUNDARY):
    """The innermost frame outside ``boundary``, or ``None``."""
    frame = inspect.currentframe()
    while frame is not None and in_boundary(frame, boundary):
        frame = frame.f_back
    return frame


@dataclass(frozen=True)
class LogEvent:
    """
    A log record built before it is submitted.

    ``args`` are the raw, unformatted template arguments. ``key_values`` and
    ``tags`` are kept apart from the message so event-aware loggers can
    store them as structured fields.
    """

    level: Level
    message: str
    args: tuple = ()
    exc_info: "ExcInfo" = None
    timestamp: int = field(default_factory=time.time_ns)
    boundary: str = DEFAULT_BOUNDARY
    key_values: tuple[tuple[str, Any], ...] = ()
    tags: tuple[Tag, ...] = ()

    def with_tag(self, tag: Tag) -> "LogEvent":
        """Copy of this event with ``tag`` appended to its tags."""
        return replace(self, tags=self.tags + (tag,))


class EventBuilder:
    """
    Collects the parts of a :class:`LogEvent` and submits it on :meth:`log`.

    Example:
        >>> logger.at_info().add_key_value("user", "bob").add_tag(IMPORTANT).log("login from %s", ip)
    """

    def __init__(self, logger: "EventAwareLogger", level: Level, boundary: str = DEFAULT_BOUNDARY):
        self._logger = logger
        self._level = level
        self._boundary = boundary
        self._args: list[Any] = []
        self._key_values: list[tuple[str, Any]] = []
        self._tags: list[Tag] = []
        self._exc_info: "ExcInfo" = None
        self._message: Optional[str] = None

    def add_tag(self, tag: Tag) -> "EventBuilder":
        self._tags.append(tag)
        return self

    def add_key_value(self, key: str, value: Any) -> "EventBuilder":
        self._key_values.append((key, value))
        return self

    def add_argument(self, arg: Any) -> "EventBuilder":
        self._args.append(arg)
        return self

    def set_message(self, message: str) -> "EventBuilder":
        self._message = message
        return self

    def set_exc_info(self, exc_info: "ExcInfo") -> "EventBuilder":
        self._exc_info = exc_info
        return self

    def set_boundary(self, boundary: str) -> "EventBuilder":
        self._boundary = boundary
        return self

    def build(self) -> LogEvent:
        return LogEvent(
            level=self._level,
            message=self._message or "",
            args=tuple(self._args),
            exc_info=self._exc_info,
            boundary=self._boundary,
            key_values=tuple(self._key_values),
            tags=tuple(self._tags),
        )

    def log(self, msg: Optional[str] = None, *args: Any) -> None:
        """Submit the event. ``msg`` and ``args`` extend what was set before."""
        if msg is not None:
            self._message = msg
        self._args.extend(args)
        self._logger.log_event(self.build())
