"""Convenience exports for the :mod:`logtags` package."""

from .augmented import AugmentedLogger, with_context, with_event_context  # noqa: F401
from .backend import (  # noqa: F401
    Capabilities,
    EventAwareLogger,
    LocationAwareLogger,
    TagLogger,
)
from .backends import StdlibTagLogger, TagRenderFilter  # noqa: F401
from .events import DEFAULT_BOUNDARY, EventBuilder, LogEvent  # noqa: F401
from .formatting import format_message, merge_message  # noqa: F401
from .levels import Level  # noqa: F401
from .mechanism import LevelMappingError, LogTagsError  # noqa: F401
from .notification import context_fields, level_color, wants_notification  # noqa: F401
from .stream import (  # noqa: F401
    LogItem,
    RxTagLogger,
    context_pairs,
    drop_log,
    log_filter,
    log_redirect_to,
    notifications,
    render_tags,
    tag_filter,
)
from .tags import (  # noqa: F401
    IMPORTANT,
    NO_SLACK,
    SLACK,
    Tag,
    TagName,
    combine,
    combine_context,
    decode_context,
    encode_context,
    find_tag,
    has_tag,
    render_tag,
    slack_tag,
)

__all__ = [
    "LogTagsError",
    "LevelMappingError",
    "Level",

    # tag trees
    "Tag",
    "TagName",
    "SLACK",
    "NO_SLACK",
    "IMPORTANT",
    "encode_context",
    "decode_context",
    "combine",
    "combine_context",
    "find_tag",
    "has_tag",
    "render_tag",
    "slack_tag",

    # decorator
    "AugmentedLogger",
    "with_context",
    "with_event_context",
    "TagLogger",
    "LocationAwareLogger",
    "EventAwareLogger",
    "Capabilities",
    "LogEvent",
    "EventBuilder",
    "DEFAULT_BOUNDARY",
    "format_message",
    "merge_message",

    # backends
    "StdlibTagLogger",
    "TagRenderFilter",
    "RxTagLogger",
    "LogItem",
    "log_filter",
    "drop_log",
    "tag_filter",
    "context_pairs",
    "render_tags",
    "notifications",
    "log_redirect_to",

    # notification
    "context_fields",
    "level_color",
    "wants_notification",
]
