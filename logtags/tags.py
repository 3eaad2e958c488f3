"""Tag trees: named annotation nodes that carry structured context.

A log call usually offers a single opaque annotation slot. :class:`Tag`
trees let arbitrary key/value context travel through that slot: a
``CONTEXT`` node holds one ``CONTEXT_KEY_<key>`` child per entry, and each
key node holds exactly one ``CONTEXT_VAL_<value>`` child. Independent tags
attached to the same call are grouped under a ``WRAPPER`` node.

Tags are identified by name. Two separately built leaves with the same name
are interchangeable for searching and merging.
"""

from enum import Enum
from typing import Iterator, Mapping, Optional

# =============================================================================
# Reserved names
# =============================================================================


class TagName(str, Enum):
    """Names with a fixed meaning inside tag trees."""

    SLACK = "SLACK"
    NO_SLACK = "NO_SLACK"
    IMPORTANT = "IMPORTANT"
    WRAPPER = "WRAPPER"
    CONTEXT = "CONTEXT"


CONTEXT_KEY_PREFIX = "CONTEXT_KEY_"
CONTEXT_VALUE_PREFIX = "CONTEXT_VAL_"


def _name_of(name: "str | TagName | Tag") -> str:
    if isinstance(name, Tag):
        return name.name
    if isinstance(name, Enum):
        return name.value
    return name


# =============================================================================
# Tag
# =============================================================================


class Tag:
    """
    A named node referencing zero or more child tags.

    Equality and hashing use the name only. Tags created with ``frozen=True``
    (the module constants) reject any change to their children; ``copy()``
    of a frozen tag is an ordinary mutable tag.
    """

    __slots__ = ("_name", "_children", "_frozen")

    def __init__(self, name: "str | TagName", children=(), *, frozen: bool = False):
        name = _name_of(name)
        if not isinstance(name, str) or not name:
            raise ValueError(f"Tag names must be non-empty strings, got {name!r}")
        self._name = name
        self._children: list[Tag] = []
        self._frozen = False
        for child in children:
            self.add(child)
        self._frozen = frozen

    @property
    def name(self) -> str:
        return self._name

    @property
    def children(self) -> tuple["Tag", ...]:
        return tuple(self._children)

    @property
    def has_children(self) -> bool:
        return bool(self._children)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self):
        if self._frozen:
            raise TypeError(f"Tag {self._name!r} is frozen")

    def add(self, child: "Tag") -> None:
        """Append ``child``. Refuses ``None`` and anything that would form a cycle."""
        self._check_mutable()
        if not isinstance(child, Tag):
            raise ValueError(f"Only tags can be added to a tag, got {child!r}")
        if child is self or child._reaches(self):
            raise ValueError(f"Adding {child.name!r} to {self._name!r} would create a cycle")
        self._children.append(child)

    def remove(self, child: "Tag | str") -> bool:
        """
        Detach a direct child. The exact object is preferred; otherwise the
        first child with the same name goes. Returns whether one was removed.
        """
        self._check_mutable()
        for i, existing in enumerate(self._children):
            if existing is child:
                del self._children[i]
                return True
        name = _name_of(child)
        for i, existing in enumerate(self._children):
            if existing.name == name:
                del self._children[i]
                return True
        return False

    def clear(self) -> None:
        self._check_mutable()
        self._children.clear()

    def contains(self, name: "str | TagName | Tag") -> bool:
        """Whether this tag or any descendant carries ``name``."""
        return find_tag(self, name) is not None

    def copy(self) -> "Tag":
        """Deep structural copy. The copy is never frozen."""
        return Tag(self._name, [child.copy() for child in self._children])

    def _reaches(self, target: "Tag") -> bool:
        for child in self._children:
            if child is target or child._reaches(target):
                return True
        return False

    def __iter__(self) -> Iterator["Tag"]:
        return iter(tuple(self._children))

    def __len__(self) -> int:
        return len(self._children)

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Tag):
            return self._name == other._name
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        if self._children:
            return f"Tag({self._name!r}, {list(self._children)!r})"
        return f"Tag({self._name!r})"

    def __str__(self) -> str:
        if not self._children:
            return self._name
        return f"{self._name} [ {', '.join(str(c) for c in self._children)} ]"


SLACK = Tag(TagName.SLACK, frozen=True)
"""Marks a message that should be delivered as a notification."""

NO_SLACK = Tag(TagName.NO_SLACK, frozen=True)
"""Marks a message that should specifically not be delivered as a notification."""

IMPORTANT = Tag(TagName.IMPORTANT, frozen=True)
"""Marks a message as important."""


# =============================================================================
# Search
# =============================================================================


def find_tag(
    tag: Optional[Tag], name: "str | TagName | Tag", consume: bool = False
) -> Optional[Tag]:
    """
    Find the first tag called ``name`` in ``tag`` or its descendants.

    The search is depth-first in child order. With ``consume=True`` a match
    below the root is detached from its direct parent; a match at the root
    itself is returned as is.
    """
    if tag is None:
        return None
    name = _name_of(name)
    if tag.name == name:
        return tag
    return _find_below(tag, name, consume)


def _find_below(parent: Tag, name: str, consume: bool) -> Optional[Tag]:
    for child in parent:
        if child.name == name:
            if consume:
                parent.remove(child)
            return child
        found = _find_below(child, name, consume)
        if found is not None:
            return found
    return None


def has_tag(tag: Optional[Tag], name: "str | TagName | Tag") -> bool:
    return find_tag(tag, name) is not None


# =============================================================================
# Context encoding
# =============================================================================


def encode_context(context: Optional[Mapping[str, object]]) -> Optional[Tag]:
    """
    Encode a context map as a ``CONTEXT`` tag.

    Args:
        context: Mapping of keys to values. Values are converted with ``str``;
            ``None`` is kept as an absent value.

    Returns:
        The context tag, or ``None`` for an empty or missing mapping.
    """
    if not context:
        return None
    ctx = Tag(TagName.CONTEXT)
    for key, value in context.items():
        key_tag = Tag(CONTEXT_KEY_PREFIX + str(key))
        key_tag.add(Tag(CONTEXT_VALUE_PREFIX + ("" if value is None else str(value))))
        ctx.add(key_tag)
    return ctx


def _read_context(ctx: Tag) -> dict[str, Optional[str]]:
    result: dict[str, Optional[str]] = {}
    for key_tag in ctx:
        # malformed pairs are skipped, the rest still decode
        if not key_tag.name.startswith(CONTEXT_KEY_PREFIX) or len(key_tag) != 1:
            continue
        value_tag = key_tag.children[0]
        if not value_tag.name.startswith(CONTEXT_VALUE_PREFIX):
            continue
        key = key_tag.name[len(CONTEXT_KEY_PREFIX):]
        value = value_tag.name[len(CONTEXT_VALUE_PREFIX):]
        result[key] = value or None
    return result


def decode_context(tag: Optional[Tag], consume: bool = False) -> dict[str, Optional[str]]:
    """
    Decode the first ``CONTEXT`` node found in ``tag``.

    Args:
        tag: The tree to search, may be ``None``.
        consume: Detach the context node from its parent after reading it.
            If the context node is ``tag`` itself its children are cleared,
            so a second consuming decode finds nothing either way.

    Returns:
        The context map; empty if there is no context node.
    """
    ctx = find_tag(tag, TagName.CONTEXT, consume)
    if ctx is None:
        return {}
    result = _read_context(ctx)
    if consume and ctx is tag:
        ctx.clear()
    return result


def slack_tag(context: Optional[Mapping[str, object]] = None) -> Tag:
    """A notification tag, optionally carrying context."""
    return combine(SLACK, encode_context(context))  # type: ignore[return-value]


# =============================================================================
# Composition
# =============================================================================


def combine(*tags: Optional[Tag]) -> Optional[Tag]:
    """
    Group tags under a new ``WRAPPER`` node.

    ``None`` entries are dropped. No remaining tag gives ``None`` and a single
    remaining tag is returned unchanged.
    """
    present = [t for t in tags if t is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    wrapper = Tag(TagName.WRAPPER)
    for t in present:
        wrapper.add(t)
    return wrapper


def _drain_context(tag: Tag) -> dict[str, Optional[str]]:
    """Strip every context node from ``tag``; the first one found wins per key."""
    if tag.name == TagName.CONTEXT.value:
        return decode_context(tag, consume=True)
    result: dict[str, Optional[str]] = {}
    while find_tag(tag, TagName.CONTEXT) is not None:
        for key, value in decode_context(tag, consume=True).items():
            result.setdefault(key, value)
    return result


def _prune_wrappers(tag: Tag) -> Optional[Tag]:
    """Drop wrappers left empty by stripping; ``None`` if nothing remains."""
    if tag.name == TagName.CONTEXT.value and not tag.has_children:
        return None
    for child in tag:
        if _prune_wrappers(child) is None:
            tag.remove(child)
    if tag.name == TagName.WRAPPER.value and not tag.has_children:
        return None
    return tag


def combine_context(tag_a: Optional[Tag], tag_b: Optional[Tag]) -> Optional[Tag]:
    """
    Merge two tags that are attached to the same log call.

    The context maps of both are merged into one new ``CONTEXT`` tag, entries
    of ``tag_b`` winning on key collisions. Whatever else the inputs carry is
    kept and combined with the new context tag. If either input is ``None``
    the other one is returned unchanged. The inputs are never modified.
    """
    if tag_a is None:
        return tag_b
    if tag_b is None:
        return tag_a

    rest_a, rest_b = tag_a.copy(), tag_b.copy()
    merged = _drain_context(rest_a)
    merged.update(_drain_context(rest_b))

    return combine(_prune_wrappers(rest_a), _prune_wrappers(rest_b), encode_context(merged))


# =============================================================================
# Rendering
# =============================================================================


def render_tag(tag: Optional[Tag]) -> str:
    """
    Render a tag tree as plain text for loggers without annotation support.

    Context entries become ``key=value``, other leaves their name. Wrapper
    and context nodes themselves are not printed.
    """
    if tag is None:
        return ""
    parts: list[str] = []
    _render_into(tag, parts)
    return " ".join(parts)


def _render_into(tag: Tag, parts: list[str]) -> None:
    if tag.name == TagName.CONTEXT.value:
        parts.extend(f"{key}={value}" for key, value in _read_context(tag).items())
    elif tag.name == TagName.WRAPPER.value:
        for child in tag:
            _render_into(child, parts)
    else:
        parts.append(str(tag))
