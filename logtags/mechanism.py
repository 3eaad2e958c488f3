"""Core error types for :mod:`logtags`."""


class LogTagsError(Exception):
    """Base class for all logtags exceptions."""

    def __init__(self, message: str, source: str = "Unknown", note: str = ""):
        super().__init__(f"<{source}> {note}: {message}")
        self.message = message
        self.source = source
        self.note = note

    def __str__(self):
        return f"<{self.source}> {self.note}: {self.message}"


class LevelMappingError(LogTagsError):
    """A severity code that none of the level tables knows about.

    Raised when a level reaches a dispatch table that has no entry for it.
    This means the level tables are out of sync with :class:`Level` and is
    never caught inside the package.
    """

    def __init__(self, level: object, source: str = "Unknown"):
        super().__init__(
            f"Level number {level!r} is not recognized.",
            source=source,
            note="level mapping",
        )
        self.level = level
