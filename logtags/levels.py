"""Severity levels shared by the decorator and its backends."""

import logging
from enum import IntEnum

from opentelemetry._logs import SeverityNumber

from .mechanism import LevelMappingError

# stdlib has no TRACE level
STDLIB_TRACE = 5
logging.addLevelName(STDLIB_TRACE, "TRACE")


class Level(IntEnum):
    """The five severity levels, numbered like the location-aware level codes."""

    TRACE = 0
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def coerce(cls, value: "Level | str | int") -> "Level":
        """
        Resolve a level from a :class:`Level`, a level name or a level code.

        ``WARNING`` is accepted as an alias of ``WARN``. Anything else raises
        :class:`LevelMappingError`.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.upper()
            if name == "WARNING":
                name = "WARN"
            try:
                return cls[name]
            except KeyError:
                raise LevelMappingError(value, source="Level") from None
        try:
            return cls(value)
        except ValueError:
            raise LevelMappingError(value, source="Level") from None


_STDLIB_LEVELS: dict[Level, int] = {
    Level.TRACE: STDLIB_TRACE,
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}

_OTEL_SEVERITIES: dict[Level, SeverityNumber] = {
    Level.TRACE: SeverityNumber.TRACE,
    Level.DEBUG: SeverityNumber.DEBUG,
    Level.INFO: SeverityNumber.INFO,
    Level.WARN: SeverityNumber.WARN,
    Level.ERROR: SeverityNumber.ERROR,
}


def to_stdlib(level: Level | int) -> int:
    """Map a :class:`Level` to the matching :mod:`logging` level number."""
    try:
        return _STDLIB_LEVELS[level]  # type: ignore[index]
    except KeyError:
        raise LevelMappingError(level, source="stdlib") from None


def to_severity(level: Level | int) -> SeverityNumber:
    """Map a :class:`Level` to the matching OTel ``SeverityNumber``."""
    try:
        return _OTEL_SEVERITIES[level]  # type: ignore[index]
    except KeyError:
        raise LevelMappingError(level, source="otel") from None
