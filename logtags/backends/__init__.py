"""Adapters from existing logging frameworks to :class:`~logtags.backend.TagLogger`."""

from .stdlib import StdlibTagLogger, TagRenderFilter

__all__ = [
    "StdlibTagLogger",
    "TagRenderFilter",
]
