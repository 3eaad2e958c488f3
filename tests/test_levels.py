import logging

import pytest
from opentelemetry._logs import SeverityNumber

from logtags.levels import STDLIB_TRACE, Level, to_severity, to_stdlib
from logtags.mechanism import LevelMappingError, LogTagsError


@pytest.mark.parametrize(
    "value,expected",
    [
        (Level.INFO, Level.INFO),
        ("debug", Level.DEBUG),
        ("WARNING", Level.WARN),
        ("warn", Level.WARN),
        (40, Level.ERROR),
        (0, Level.TRACE),
    ],
)
def test_coerce(value, expected):
    assert Level.coerce(value) is expected


@pytest.mark.parametrize("value", ["CRITICAL", 25, 50])
def test_coerce_unknown(value):
    with pytest.raises(LevelMappingError) as exc:
        Level.coerce(value)
    assert exc.value.level == value
    assert exc.value.source == "Level"


def test_level_tables():
    assert [to_stdlib(level) for level in Level] == [
        STDLIB_TRACE,
        logging.DEBUG,
        logging.INFO,
        logging.WARNING,
        logging.ERROR,
    ]
    assert to_severity(Level.WARN) == SeverityNumber.WARN
    assert logging.getLevelName(STDLIB_TRACE) == "TRACE"


def test_unmapped_level_in_tables():
    with pytest.raises(LevelMappingError):
        to_stdlib(25)
    with pytest.raises(LevelMappingError):
        to_severity(25)


def test_error_str():
    err = LevelMappingError(7, source="stdlib")
    assert isinstance(err, LogTagsError)
    assert str(err) == "<stdlib> level mapping: Level number 7 is not recognized."
