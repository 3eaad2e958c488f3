"""
Reactive log sink: log calls become :class:`LogItem` values on an Rx stream.

:class:`RxTagLogger` is a plain tag logger. It has no location or event
support, so a decorator in front of it renders tags into the message text
itself. The tag tree still rides along on every item, and the operators
below filter and decode it downstream.
"""

import time
from typing import Any, Callable, Iterable, Optional

import reactivex as rx
from reactivex import Observable, Observer, Subject
from reactivex import operators as ops

from .backend import ExcInfo, TagLogger
from .formatting import format_message
from .levels import Level
from .notification import wants_notification
from .tags import Tag, TagName, decode_context, has_tag, render_tag


class LogItem:
    """
    Use this term to represent the emitted log information.
    """

    def __init__(
        self,
        msg: Any,
        level: Level = Level.INFO,
        source: str = "Unknown",
        tag: Optional[Tag] = None,
        exc_info: ExcInfo = None,
    ):
        self.level = level
        self.timestamp_str = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        self.source = source
        self.msg = msg
        self.tag = tag
        self.exc_info = exc_info

    @property
    def context(self) -> dict[str, Optional[str]]:
        return decode_context(self.tag)

    def __str__(self) -> str:
        return f"[{self.level.name}] {self.timestamp_str} {self.source}\t: {self.msg}\n"


class RxTagLogger(TagLogger):
    """
    Tag logger that pushes :class:`LogItem` values to an observer.

    Items go to ``stream`` (a :class:`~reactivex.Subject`) unless a super
    observer or callable has been set with :meth:`set_super`.
    """

    def __init__(self, name: str = "LogSource", min_level: Level | str | int = Level.TRACE):
        self.name = name
        self.min_level = Level.coerce(min_level)
        self.stream: Subject = Subject()
        self.super_obs: Optional[rx.abc.ObserverBase | Callable] = None

    def set_super(self, obs: rx.abc.ObserverBase | Callable):
        """
        Set the super observer to redirect the log items.
        """
        self.super_obs = obs

    def is_enabled_for(self, level: Level, tag: Optional[Tag] = None) -> bool:
        return level >= self.min_level

    def _emit(self, level: Level, msg: Any, args: tuple, tag: Optional[Tag], exc_info: ExcInfo):
        if not self.is_enabled_for(level, tag):
            return
        if args:
            msg = format_message(msg, args)
        item = LogItem(msg, level, self.name, tag=tag, exc_info=exc_info)
        target = self.super_obs if self.super_obs is not None else self.stream
        if hasattr(target, "on_next"):
            target.on_next(item)
        else:
            target(item)  # type: ignore[operator]

    def trace(self, msg: Any, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.TRACE, msg, args, tag, exc_info)

    def debug(self, msg: Any, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.DEBUG, msg, args, tag, exc_info)

    def info(self, msg: Any, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.INFO, msg, args, tag, exc_info)

    def warn(self, msg: Any, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.WARN, msg, args, tag, exc_info)

    def error(self, msg: Any, *args: Any, tag: Optional[Tag] = None, exc_info: ExcInfo = None):
        self._emit(Level.ERROR, msg, args, tag, exc_info)


# =============================================================================
# Operators
# =============================================================================


def log_filter(levels: Iterable[Level | str | int] = tuple(Level)):
    """
    The operator to filter the log items by the level.
    """
    wanted = {Level.coerce(level) for level in levels}
    return ops.filter(lambda log: isinstance(log, LogItem) and log.level in wanted)


def drop_log():
    return ops.filter(lambda log: not isinstance(log, LogItem))


def tag_filter(name: str | TagName | Tag):
    """Keep log items whose tag tree contains ``name``. Drops everything else."""
    return ops.filter(lambda log: isinstance(log, LogItem) and has_tag(log.tag, name))


def context_pairs():
    """Map log items to ``(item, context)`` pairs, context being the decoded tag."""
    return ops.map(lambda log: (log, decode_context(log.tag)))


def _render_line(log: LogItem) -> str:
    prefix, msg = render_tag(log.tag), str(log.msg)
    # a decorator in front of the logger has already put the tag in the text
    if not prefix or msg == prefix or msg.startswith(prefix + " "):
        return msg
    return f"{prefix} {msg}"


def render_tags():
    """Map log items to one text line, rendered tag in front of the message."""
    return ops.map(_render_line)


def notifications(default: bool = False):
    """Keep log items that should be delivered as notifications."""
    return ops.filter(lambda log: isinstance(log, LogItem) and wants_notification(log.tag, default))


def log_redirect_to(
    log_observer: Observer | Callable,
    levels: Iterable[Level | str | int] = tuple(Level),
):
    """
    The operator redirect the log items to the specified observer (or function), and forward other items.
    The log items outside the specifed levels are ignored.
    """
    wanted = {Level.coerce(level) for level in levels}

    def _log_redirect_to(source):
        def subscribe(observer, scheduler=None):

            if hasattr(log_observer, "on_next"):
                redirect_fun = log_observer.on_next
            else:
                redirect_fun = log_observer

            def on_next(value: Any) -> None:
                if isinstance(value, LogItem):
                    if value.level in wanted:
                        redirect_fun(value)  # type: ignore

                else:
                    observer.on_next(value)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _log_redirect_to
