"""Tests for the tag-injecting logger decorator."""

import logging

import pytest

from logtags.augmented import AugmentedLogger, with_context, with_event_context
from logtags.backend import Capabilities
from logtags.backends.stdlib import StdlibTagLogger
from logtags.events import DEFAULT_BOUNDARY
from logtags.levels import Level
from logtags.mechanism import LevelMappingError
from logtags.tags import IMPORTANT, SLACK, decode_context, encode_context, has_tag

LEVEL_METHODS = [
    ("trace", Level.TRACE),
    ("debug", Level.DEBUG),
    ("info", Level.INFO),
    ("warn", Level.WARN),
    ("error", Level.ERROR),
]


class TestPlainDispatch:
    """Wrapped logger without location support: text is built by the decorator."""

    def test_context_prepended(self, plain_logger):
        log = with_context(plain_logger, k="v")
        log.info("hello")

        method, msg, args, tag, exc_info = plain_logger.calls[0]
        assert method == "info"
        assert msg == "k=v hello"
        assert args == ()
        assert exc_info is None
        assert decode_context(tag) == {"k": "v"}

    def test_same_text_on_repeated_calls(self, plain_logger):
        log = with_context(plain_logger, k="v")
        log.info("hello")
        log.info("hello")
        assert plain_logger.calls[0][1] == plain_logger.calls[1][1] == "k=v hello"

    def test_arguments_formatted(self, plain_logger):
        log = with_context(plain_logger, k="v")
        log.warn("took %d ms for %s", 12, "job")
        assert plain_logger.calls[0][1] == "k=v took 12 ms for job"
        assert plain_logger.calls[0][2] == ()

    def test_no_tag_no_prefix(self, plain_logger):
        log = AugmentedLogger.with_tag(plain_logger, None)
        log.info("100% done")
        assert plain_logger.calls[0][1] == "100% done"
        assert plain_logger.calls[0][3] is None

    @pytest.mark.parametrize("name,level", LEVEL_METHODS)
    def test_levels_route_to_matching_method(self, plain_logger, name, level):
        log = with_context(plain_logger, k="v")
        getattr(log, name)("msg")
        assert plain_logger.calls[0][0] == name
        assert plain_logger.enabled_checks[0][0] == level

    def test_warning_alias(self, plain_logger):
        with_context(plain_logger, k="v").warning("careful")
        assert plain_logger.calls[0][0] == "warn"

    def test_exception_attached(self, plain_logger):
        log = with_context(plain_logger, k="v")
        err = ValueError("boom")
        log.error("failed", exc_info=err)
        assert plain_logger.calls[0][4] is err

        log.exception("failed again")
        assert plain_logger.calls[1][0] == "error"
        assert plain_logger.calls[1][4] is True

    def test_unknown_level_is_fatal(self, plain_logger):
        log = with_context(plain_logger, k="v")
        with pytest.raises(LevelMappingError):
            log.log_at(None, DEFAULT_BOUNDARY, 25, "msg", ())
        with pytest.raises(LevelMappingError):
            log.log(25, "msg")

    def test_log_by_name(self, plain_logger):
        with_context(plain_logger, k="v").log("warning", "m")
        assert plain_logger.calls[0][0] == "warn"

    def test_mismatched_arguments_do_not_raise(self, plain_logger):
        log = with_context(plain_logger, k="v")
        log.info("no placeholder", 1)
        log.info("%s and %s", "one")
        assert plain_logger.calls[0][1] == "k=v no placeholder (1,)"
        assert plain_logger.calls[1][1] == "k=v %s and %s ('one',)"


class TestLocationAwareDispatch:
    def test_raw_arguments_forwarded(self, location_logger):
        log = with_context(location_logger, k="v")
        log.debug("x=%s", 5)

        name, tag, boundary, level, msg, args, exc_info = location_logger.calls[0]
        assert name == "log_at"
        assert boundary == DEFAULT_BOUNDARY
        assert level == Level.DEBUG
        assert msg == "x=%s"
        assert args == (5,)
        assert decode_context(tag) == {"k": "v"}

    def test_custom_boundary(self, location_logger):
        log = AugmentedLogger.with_tag(location_logger, SLACK, boundary="myapp.logsupport")
        log.info("m")
        assert location_logger.calls[0][2] == "myapp.logsupport"

    def test_capabilities_probed(self, location_logger, plain_logger):
        assert AugmentedLogger.with_tag(location_logger, None).capabilities == Capabilities(
            location_aware=True, event_aware=False
        )
        assert AugmentedLogger.with_tag(plain_logger, None).capabilities == Capabilities()

    def test_stdlib_logger_adapted(self):
        log = AugmentedLogger.with_tag(logging.getLogger("logtags_test.adapt"), None)
        assert isinstance(log.logger, StdlibTagLogger)
        assert log.capabilities.location_aware


class TestAugment:
    def test_caller_context_wins(self, plain_logger):
        log = with_context(plain_logger, x="1")
        log.info("m", tag=encode_context({"x": "2", "y": "3"}))
        assert decode_context(plain_logger.calls[0][3]) == {"x": "2", "y": "3"}

    def test_caller_markers_kept(self, plain_logger):
        log = with_context(plain_logger, x="1")
        log.info("m", tag=SLACK)
        tag = plain_logger.calls[0][3]
        assert has_tag(tag, SLACK)
        assert decode_context(tag) == {"x": "1"}

    def test_configured_tag_survives_consumers(self, plain_logger):
        log = with_context(plain_logger, k="v")
        log.info("first")
        assert decode_context(plain_logger.calls[0][3], consume=True) == {"k": "v"}
        log.info("second")
        assert decode_context(plain_logger.calls[1][3]) == {"k": "v"}

    def test_context_values_stringified(self, plain_logger):
        log = with_context(plain_logger, {"count": 3}, missing=None)
        log.info("m")
        assert decode_context(plain_logger.calls[0][3]) == {"count": "3", "missing": None}

    def test_child_adds_context(self, plain_logger):
        log = with_context(plain_logger, tenant="acme").child(request="7")
        log.info("m")
        assert decode_context(plain_logger.calls[0][3]) == {"tenant": "acme", "request": "7"}

    def test_stacked_decorators(self, plain_logger):
        inner = with_context(plain_logger, b="2")
        outer = with_context(inner, a="1")
        outer.info("m")
        assert len(plain_logger.calls) == 1
        assert decode_context(plain_logger.calls[0][3]) == {"a": "1", "b": "2"}
        assert plain_logger.calls[0][1].endswith(" m")


class TestFilter:
    def test_disabled_call_does_no_work(self, make_source, make_logger):
        source = make_source(lambda n: encode_context({"request": str(n)}))
        logger = make_logger(enabled=False)
        log = AugmentedLogger.with_generator(logger, source)

        log.info("hidden")

        assert source.count == 1
        assert logger.calls == []

    def test_filter_sees_augmented_tag(self, make_logger):
        logger = make_logger(enabled=lambda level, tag: decode_context(tag).get("tenant") == "acme")
        log = with_context(logger, tenant="acme")
        log.info("shown")
        assert len(logger.calls) == 1

        other = with_context(logger, tenant="other")
        other.info("hidden")
        assert len(logger.calls) == 1

    def test_is_enabled_for_does_not_call_source(self, plain_logger, make_source):
        source = make_source(lambda n: None)
        log = AugmentedLogger.with_generator(plain_logger, source)
        assert log.is_enabled_for(Level.INFO)
        assert source.count == 0


class TestGeneratedTag:
    def test_called_once_per_call(self, plain_logger, make_source):
        source = make_source(lambda n: encode_context({"request": str(n)}))
        log = AugmentedLogger.with_generator(plain_logger, source)

        log.info("a")
        log.debug("b")
        log.error("c")

        assert source.count == 3
        assert [decode_context(c[3])["request"] for c in plain_logger.calls] == ["1", "2", "3"]

    def test_failure_propagates(self, plain_logger):
        def broken():
            raise RuntimeError("no request in scope")

        log = AugmentedLogger.with_generator(plain_logger, broken)
        with pytest.raises(RuntimeError, match="no request in scope"):
            log.info("m")
        assert plain_logger.calls == []

    def test_event_context_supplier(self, plain_logger):
        ids = iter(["r1", "r2"])
        log = with_event_context(plain_logger, lambda: {"request": next(ids)})
        log.info("a")
        log.info("b")
        assert plain_logger.calls[0][1] == "request=r1 a"
        assert plain_logger.calls[1][1] == "request=r2 b"

    def test_empty_supplier(self, plain_logger):
        log = with_event_context(plain_logger, dict)
        log.info("hello")
        assert plain_logger.calls[0][1] == "hello"
        assert plain_logger.calls[0][3] is None


class TestStackedFilter:
    """A decorator wrapping another decorator is filtered on the tag of the whole stack."""

    def test_inner_tag_can_disable(self, make_logger):
        logger = make_logger(enabled=lambda level, tag: not has_tag(tag, SLACK))
        log = AugmentedLogger.with_tag(logger, SLACK).child(request="7")

        log.info("m")
        log.at_info().log("event")

        assert logger.calls == []

    def test_inner_tag_can_enable(self, make_logger):
        logger = make_logger(enabled=lambda level, tag: has_tag(tag, IMPORTANT))
        log = with_context(AugmentedLogger.with_tag(logger, IMPORTANT), k="v")

        log.info("m")
        log.at_info().log("event")

        assert [c[1] for c in logger.calls] == ["IMPORTANT k=v m", "k=v IMPORTANT event"]
        assert all(decode_context(c[3]) == {"k": "v"} for c in logger.calls)

    def test_checked_once_with_full_tag(self, plain_logger):
        log = with_context(AugmentedLogger.with_tag(plain_logger, SLACK), k="v")

        log.warn("m")

        assert len(plain_logger.enabled_checks) == 1
        level, tag = plain_logger.enabled_checks[0]
        assert level == Level.WARN
        assert has_tag(tag, SLACK)
        assert decode_context(tag) == {"k": "v"}

    def test_log_at_filters(self, make_logger):
        logger = make_logger(enabled=False)
        log = AugmentedLogger.with_tag(logger, SLACK)

        log.log_at(None, DEFAULT_BOUNDARY, Level.INFO, "m", ())

        assert logger.calls == []
