"""Logger decorator that attaches a tag to every log call.

:class:`AugmentedLogger` wraps any :class:`~logtags.backend.TagLogger` and
merges its own tag into each call before passing it on. Its tag comes from
a tag source, a zero-argument callable asked once per call that is not
filtered out. A fixed tag and a per-call generator are both just tag
sources.

Example:
    >>> log = with_context(logging.getLogger("billing"), tenant="acme")
    >>> log.info("charged %s", amount)
    >>> log.error("refund failed", tag=encode_context({"order": order_id}))

    >>> log = with_event_context(base, lambda: {"request": current_request_id()})
"""

import logging
from typing import Any, Callable, Mapping, Optional

from .backend import (
    Capabilities,
    EventAwareLogger,
    ExcInfo,
    LocationAwareLogger,
    TagLogger,
    method_name,
)
from .backends.stdlib import StdlibTagLogger
from .events import DEFAULT_BOUNDARY, EventBuilder, LogEvent
from .formatting import format_message, merge_message
from .levels import Level
from .tags import Tag, combine, combine_context, encode_context

TagSource = Callable[[], Optional[Tag]]


def _fixed(tag: Optional[Tag]) -> TagSource:
    # a fresh copy per call, so consumers stripping context never reach the original
    if tag is None:
        return lambda: None
    return tag.copy


class AugmentedLogger(TagLogger, LocationAwareLogger, EventAwareLogger):
    """
    Decorator that merges its own tag into every call of a wrapped logger.

    Each call first resolves the merged tag, then asks the wrapped logger
    whether the level is enabled for it, and only then dispatches. Context
    passed by the caller wins over context of the decorator. When the
    wrapped logger is itself a decorator the check is left to it, so it
    sees the tag of the whole stack.

    Dispatch depends on what the wrapped logger can do, probed once here:

    - location aware: raw template and arguments go to ``log_at`` together
      with the call boundary, the wrapped logger formats.
    - otherwise: the message is formatted here, the rendered tag is put in
      front of it and the text goes to the per-level method.

    Parameters
    - logger: TagLogger | logging.Logger
        The logger to decorate. A plain ``logging.Logger`` is wrapped in
        :class:`StdlibTagLogger`.
    - tag_source: Callable[[], Optional[Tag]]
        Produces this decorator's tag. Exceptions it raises propagate.
    - boundary: str
        Module prefix whose frames are skipped when attributing a record to
        its calling site.
    """

    def __init__(
        self,
        logger: TagLogger | logging.Logger,
        tag_source: TagSource,
        boundary: str = DEFAULT_BOUNDARY,
    ):
        if isinstance(logger, logging.Logger):
            logger = StdlibTagLogger(logger)
        self._logger = logger
        self._tag_source = tag_source
        self._boundary = boundary
        self._capabilities = Capabilities.probe(logger)
        # an inner decorator filters again once its own tag is merged in
        self._stacked = isinstance(logger, AugmentedLogger)

    @classmethod
    def with_tag(
        cls, logger: TagLogger | logging.Logger, tag: Optional[Tag], boundary: str = DEFAULT_BOUNDARY
    ) -> "AugmentedLogger":
        """Decorator that always adds the same ``tag``."""
        return cls(logger, _fixed(tag), boundary)

    @classmethod
    def with_generator(
        cls, logger: TagLogger | logging.Logger, generate: TagSource, boundary: str = DEFAULT_BOUNDARY
    ) -> "AugmentedLogger":
        """Decorator that asks ``generate`` for a new tag on every call."""
        return cls(logger, generate, boundary)

    @property
    def logger(self) -> TagLogger:
        return self._logger

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    @property
    def boundary(self) -> str:
        return self._boundary

    def child(self, context: Optional[Mapping[str, Any]] = None, **kv: Any) -> "AugmentedLogger":
        """Stack a decorator with additional fixed context on top of this one."""
        return AugmentedLogger.with_tag(self, encode_context({**(context or {}), **kv}), self._boundary)

    # -------------------------------------------------------------------------
    # augment and dispatch
    # -------------------------------------------------------------------------

    def _augment(self, tag: Optional[Tag]) -> Optional[Tag]:
        return combine_context(self._tag_source(), tag)

    def _enabled(self, level: Level | int, tag: Optional[Tag]) -> bool:
        return self._stacked or self._logger.is_enabled_for(level, tag)  # type: ignore[arg-type]

    def _log(self, level: Level, msg: str, args: tuple, tag: Optional[Tag], exc_info: ExcInfo) -> None:
        tag = self._augment(tag)
        if not self._enabled(level, tag):
            return
        self._dispatch(tag, self._boundary, level, msg, args, exc_info)

    def _dispatch(
        self,
        tag: Optional[Tag],
        boundary: str,
        level: Level | int,
        msg: str,
        args: tuple,
        exc_info: ExcInfo,
    ) -> None:
        if self._capabilities.location_aware:
            self._logger.log_at(tag, boundary, level, msg, args, exc_info)  # type: ignore[attr-defined]
            return
        method = getattr(self._logger, method_name(level, source=type(self).__name__))
        method(merge_message(format_message(msg, args), [tag]), tag=tag, exc_info=exc_info)

    def log_at(
        self,
        tag: Optional[Tag],
        boundary: str,
        level: Level | int,
        msg: str,
        args: tuple,
        exc_info: ExcInfo = None,
    ) -> None:
        """Location-aware entry point, used when another decorator wraps this one."""
        tag = self._augment(tag)
        if not self._enabled(level, tag):
            return
        self._dispatch(tag, boundary, level, msg, args, exc_info)

    def log_event(self, event: LogEvent) -> None:
        """
        Submit a pre-built event with this decorator's tag appended.

        Event-aware loggers get the event itself. Other loggers get a single
        line: tags, then key/value pairs, then the formatted message.
        """
        tag = self._augment(None)
        if not self._enabled(event.level, combine(*event.tags, tag)):
            return
        if tag is not None:
            event = event.with_tag(tag)

        if self._capabilities.event_aware:
            self._logger.log_event(event)  # type: ignore[attr-defined]
            return

        message = merge_message(format_message(event.message, event.args), event.tags, event.key_values)
        merged_tag = combine(*event.tags)
        if self._capabilities.location_aware:
            self._logger.log_at(merged_tag, event.boundary, event.level, message, (), event.exc_info)  # type: ignore[attr-defined]
        else:
            method = getattr(self._logger, method_name(event.level, source=type(self).__name__))
            method(message, tag=merged_tag, exc_info=event.exc_info)

    # -------------------------------------------------------------------------
    # logger surface
    # -------------------------------------------------------------------------

    def is_enabled_for(self, level: Level, tag: Optional[Tag] = None) -> bool:
        """Ask the wrapped logger with ``tag`` as given. The tag source is not called."""
        return self._logger.is_enabled_for(level, tag)

    def log(self, level: Level | str | int, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.coerce(level), msg, args, tag, exc_info)

    def trace(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.TRACE, msg, args, tag, exc_info)

    def debug(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.DEBUG, msg, args, tag, exc_info)

    def info(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.INFO, msg, args, tag, exc_info)

    def warn(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.WARN, msg, args, tag, exc_info)

    def error(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._log(Level.ERROR, msg, args, tag, exc_info)

    def exception(self, msg: str, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = True):
        """ERROR with the exception currently being handled attached."""
        self._log(Level.ERROR, msg, args, tag, exc_info)

    def at_level(self, level: Level | str | int) -> EventBuilder:
        return EventBuilder(self, Level.coerce(level), self._boundary)

    def at_trace(self) -> EventBuilder:
        return self.at_level(Level.TRACE)

    def at_debug(self) -> EventBuilder:
        return self.at_level(Level.DEBUG)

    def at_info(self) -> EventBuilder:
        return self.at_level(Level.INFO)

    def at_warn(self) -> EventBuilder:
        return self.at_level(Level.WARN)

    def at_error(self) -> EventBuilder:
        return self.at_level(Level.ERROR)

    def __repr__(self) -> str:
        return f"AugmentedLogger({self._logger!r})"


def _as_strings(context: Mapping[str, Any]) -> dict[str, Optional[str]]:
    return {str(k): None if v is None else str(v) for k, v in context.items()}


def with_context(
    logger: TagLogger | logging.Logger, context: Optional[Mapping[str, Any]] = None, **kv: Any
) -> AugmentedLogger:
    """Decorate ``logger`` with fixed context, given as a mapping and/or keywords."""
    return AugmentedLogger.with_tag(logger, encode_context(_as_strings({**(context or {}), **kv})))


def with_event_context(
    logger: TagLogger | logging.Logger, supplier: Callable[[], Optional[Mapping[str, Any]]]
) -> AugmentedLogger:
    """Decorate ``logger`` with context that ``supplier`` builds anew for every call."""

    def generate() -> Optional[Tag]:
        context = supplier()
        return encode_context(_as_strings(context)) if context else None

    return AugmentedLogger.with_generator(logger, generate)
