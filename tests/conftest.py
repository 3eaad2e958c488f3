"""Shared test fixtures for logtags tests."""

import pytest

from logtags.backend import EventAwareLogger, LocationAwareLogger, TagLogger


class RecordingLogger(TagLogger):
    """Plain tag logger that records every call.

    ``enabled`` is either a bool or a callable ``(level, tag) -> bool``.
    """

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.calls = []
        self.enabled_checks = []

    def is_enabled_for(self, level, tag=None):
        self.enabled_checks.append((level, tag))
        if callable(self.enabled):
            return self.enabled(level, tag)
        return self.enabled

    def trace(self, msg, *args, tag=None, exc_info=None):
        self.calls.append(("trace", msg, args, tag, exc_info))

    def debug(self, msg, *args, tag=None, exc_info=None):
        self.calls.append(("debug", msg, args, tag, exc_info))

    def info(self, msg, *args, tag=None, exc_info=None):
        self.calls.append(("info", msg, args, tag, exc_info))

    def warn(self, msg, *args, tag=None, exc_info=None):
        self.calls.append(("warn", msg, args, tag, exc_info))

    def error(self, msg, *args, tag=None, exc_info=None):
        self.calls.append(("error", msg, args, tag, exc_info))


class LocationRecordingLogger(RecordingLogger, LocationAwareLogger):
    def log_at(self, tag, boundary, level, msg, args, exc_info=None):
        self.calls.append(("log_at", tag, boundary, level, msg, args, exc_info))


class EventRecordingLogger(RecordingLogger, EventAwareLogger):
    def log_event(self, event):
        self.calls.append(("log_event", event))


class CountingSource:
    """Tag source that counts its invocations."""

    def __init__(self, make):
        self.make = make
        self.count = 0

    def __call__(self):
        self.count += 1
        return self.make(self.count)


@pytest.fixture
def plain_logger():
    return RecordingLogger()


@pytest.fixture
def location_logger():
    return LocationRecordingLogger()


@pytest.fixture
def event_logger():
    return EventRecordingLogger()


@pytest.fixture
def make_source():
    return CountingSource


@pytest.fixture
def make_logger():
    return RecordingLogger
