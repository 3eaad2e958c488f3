"""What an alert sink needs from a tagged record, short of sending it.

Delivery itself (HTTP to a chat endpoint) lives elsewhere. These helpers
turn a record's tag into the structured parts of a notification payload.
"""

from typing import Any, Optional

from .levels import Level
from .tags import Tag, TagName, decode_context, has_tag

SHORT_FIELD_THRESHOLD = 20
"""Values up to this length are displayed side by side."""


def context_fields(tag: Optional[Tag]) -> Optional[list[dict[str, Any]]]:
    """
    One attachment field per context entry of ``tag``.

    Args:
        tag: The record's tag tree, may be ``None``.

    Returns:
        A list of ``{"title", "value", "short"}`` dicts, or ``None`` if the
        tag carries no context.
    """
    context = decode_context(tag)
    if not context:
        return None
    return [
        {
            "title": key,
            "value": value,
            "short": value is None or len(value) <= SHORT_FIELD_THRESHOLD,
        }
        for key, value in context.items()
    ]


def level_color(level: Level | int) -> Optional[str]:
    """Default attachment colour for ``level``; ``None`` below INFO."""
    if level >= Level.ERROR:
        return "danger"
    if level >= Level.WARN:
        return "warning"
    if level >= Level.INFO:
        return "#439FE0"
    return None


def wants_notification(tag: Optional[Tag], default: bool = False) -> bool:
    """
    Whether a record should be delivered as a notification.

    ``NO_SLACK`` anywhere in the tree wins over ``SLACK``; with neither the
    answer is ``default``.
    """
    if has_tag(tag, TagName.NO_SLACK):
        return False
    if has_tag(tag, TagName.SLACK):
        return True
    return default
