"""
The contract a wrapped logger has to offer.

:class:`TagLogger` is the minimum: a level check that may look at the tag,
and one logging method per level. Two optional capabilities let the
decorator hand over more of the work:

* :class:`LocationAwareLogger` takes an explicit call boundary and numeric
  level, and formats the message itself.
* :class:`EventAwareLogger` takes a finished :class:`~logtags.events.LogEvent`.

:class:`Capabilities` records which of these a logger has. It is computed
once, when a decorator is built.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from .levels import Level
from .mechanism import LevelMappingError
from .tags import Tag

if TYPE_CHECKING:
    from .events import LogEvent


ExcInfo = Any
"""Whatever ``logging`` accepts as ``exc_info``: an exception, a tuple or ``True``."""

_METHOD_NAMES: dict[Level, str] = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warn",
    Level.ERROR: "error",
}


def method_name(level: Level | int, source: str = "Unknown") -> str:
    """Name of the per-level logging method for ``level``."""
    try:
        return _METHOD_NAMES[level]  # type: ignore[index]
    except KeyError:
        raise LevelMappingError(level, source=source) from None


class TagLogger(ABC):
    """
    The abstract class for a logger that accepts a tag per call.
    """

    @abstractmethod
    def is_enabled_for(self, level: Level, tag: Optional[Tag] = None) -> bool: ...

    @abstractmethod
    def trace(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None): ...

    @abstractmethod
    def debug(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None): ...

    @abstractmethod
    def info(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None): ...

    @abstractmethod
    def warn(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None): ...

    @abstractmethod
    def error(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None): ...

    def warning(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self.warn(msg, *args, tag=tag, exc_info=exc_info)

    def level_method(self, level: Level | int) -> Callable[..., Any]:
        """
        The logging method for ``level``.

        Raises:
            LevelMappingError: ``level`` is not one of the five levels.
        """
        return getattr(self, method_name(level, source=type(self).__name__))

    def log(self, level: Level | int, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self.level_method(level)(msg, *args, tag=tag, exc_info=exc_info)


class LocationAwareLogger(ABC):
    """A logger that can attribute a record to the caller of ``boundary``."""

    @abstractmethod
    def log_at(
        self,
        tag: Optional[Tag],
        boundary: str,
        level: Level | int,
        msg: str,
        args: tuple,
        exc_info: ExcInfo = None,
    ) -> None: ...


class EventAwareLogger(ABC):
    """A logger that accepts pre-built :class:`~logtags.events.LogEvent` records."""

    @abstractmethod
    def log_event(self, event: "LogEvent") -> None: ...


@dataclass(frozen=True)
class Capabilities:
    location_aware: bool = False
    event_aware: bool = False

    @classmethod
    def probe(cls, logger: object) -> "Capabilities":
        return cls(
            location_aware=isinstance(logger, LocationAwareLogger),
            event_aware=isinstance(logger, EventAwareLogger),
        )
