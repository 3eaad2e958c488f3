"""Message formatting for loggers that only take plain text."""

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .tags import Tag, render_tag


def format_message(template: Any, args: tuple) -> str:
    """
    Apply ``args`` to a ``%``-style template.

    Same rule as ``logging.LogRecord.getMessage``: without arguments the
    template is returned untouched, so a lone ``%`` is safe. A single mapping
    argument is used for named placeholders. A template that does not match
    its arguments gives the template followed by the arguments' repr instead
    of raising.
    """
    msg = str(template)
    if not args:
        return msg
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        values: Any = args[0]
    else:
        values = args
    try:
        return msg % values
    except (TypeError, ValueError, KeyError):
        return f"{msg} {args!r}"


def merge_message(
    message: str,
    tags: Iterable[Optional[Tag]] = (),
    key_values: Iterable[tuple[str, Any]] = (),
) -> str:
    """
    Prepend tags and key/value pairs to ``message``.

    Order is tags, then ``key=value`` pairs, then the message, separated by
    single spaces. Empty segments are left out.
    """
    segments = [render_tag(tag) for tag in tags]
    segments.extend(f"{key}={value}" for key, value in key_values)
    segments.append(message)
    return " ".join(s for s in segments if s)
