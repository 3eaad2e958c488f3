"""Adapter that lets a :class:`logging.Logger` receive tags.

Tags travel in ``extra``: every record gets a ``tag`` attribute with the
tag tree and a ``context`` attribute with its decoded context map.
:class:`TagRenderFilter` adds a ``tag_text`` attribute for format strings.
"""

import logging
from typing import Any, Mapping, Optional

from ..backend import ExcInfo, LocationAwareLogger, TagLogger
from ..events import DEFAULT_BOUNDARY, in_boundary
from ..levels import Level, to_stdlib
from ..tags import Tag, TagName, decode_context, has_tag, render_tag


def _caller_stacklevel(boundary: str) -> int:
    """``stacklevel`` that points ``logging`` at the first frame outside ``boundary``."""
    # depth 0 is this function, depth 1 the log_at that called it
    frame, depth = logging.currentframe(), 0
    while frame is not None and in_boundary(frame, boundary):
        frame = frame.f_back
        depth += 1
    return max(depth, 1)


class StdlibTagLogger(TagLogger, LocationAwareLogger):
    """
    Location-aware tag logger backed by the standard :mod:`logging` module.

    Parameters
    - logger: logging.Logger | str
        The logger to write to, or the name passed to ``logging.getLogger``.
    - tag_thresholds: Optional[Mapping[str, Level]]
        Minimum levels for records carrying a given tag name. They apply on
        top of the logger's own level, so they can only drop records.
    """

    def __init__(
        self,
        logger: logging.Logger | str,
        tag_thresholds: Optional[Mapping[str | TagName, Level | str | int]] = None,
    ):
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self._logger = logger
        self._thresholds = {
            (k.value if isinstance(k, TagName) else k): Level.coerce(v)
            for k, v in (tag_thresholds or {}).items()
        }

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def is_enabled_for(self, level: Level, tag: Optional[Tag] = None) -> bool:
        if not self._logger.isEnabledFor(to_stdlib(level)):
            return False
        for name, threshold in self._thresholds.items():
            if level < threshold and has_tag(tag, name):
                return False
        return True

    def log_at(
        self,
        tag: Optional[Tag],
        boundary: str,
        level: Level | int,
        msg: str,
        args: tuple,
        exc_info: ExcInfo = None,
    ) -> None:
        self._logger.log(
            to_stdlib(level),
            msg,
            *args,
            exc_info=exc_info,
            extra={"tag": tag, "context": decode_context(tag)},
            stacklevel=_caller_stacklevel(boundary),
        )

    def _log(self, level: Level, msg: str, args: tuple, tag: Optional[Tag], exc_info: ExcInfo):
        if self.is_enabled_for(level, tag):
            self.log_at(tag, DEFAULT_BOUNDARY, level, msg, args, exc_info)

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

    def __repr__(self) -> str:
        return f"StdlibTagLogger({self._logger.name!r})"


class TagRenderFilter(logging.Filter):
    """Inject ``tag_text`` (the rendered tag, with a leading space) into log records."""

    def filter(self, record):
        text = render_tag(getattr(record, "tag", None))
        record.tag_text = f" {text}" if text else ""
        return True
