"""Path model: addressing nodes within a JSON document."""

from __future__ import annotations

import re
from typing import Iterable, Protocol, Union, runtime_checkable

from .exceptions import PathSyntaxError
from .values import Node


class _Wildcard:
    """Pattern-only segment matching any field name or any array index."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


ANY_FIELD = _Wildcard("ANY_FIELD")
ANY_INDEX = _Wildcard("ANY_INDEX")

Segment = Union[str, int]

_INDEX_PATTERN = re.compile(r"[+-]?\d+")

# Parser states
_START, _FIELD, _AFTER_INDEX, _AFTER_DOT = range(4)


def _parse_segments(text: str, wildcards: bool = False) -> list:
    """
    Parse path text into segments.

    Grammar: fields separated by '.', indices written as [i] (optionally
    signed) and attached directly to the preceding segment. A backslash
    escapes the next character inside a field name.

    Args:
        text: The path text ('' is the root)
        wildcards: Accept '*' fields and '[*]' indices (for patterns)

    Returns:
        List of str/int segments (and wildcard markers when enabled)
    """
    segments: list = []
    state = _START
    field: list[str] = []
    escaped = False
    i = 0

    def flush():
        name = "".join(field)
        if wildcards and name == "*" and not escaped:
            segments.append(ANY_FIELD)
        else:
            segments.append(name)
        field.clear()

    while i < len(text):
        char = text[i]

        if char == "[":
            if state == _AFTER_DOT:
                raise PathSyntaxError(text, i, "expected field name after '.'")
            if state == _FIELD:
                flush()
            end = text.find("]", i)
            if end == -1:
                raise PathSyntaxError(text, i, "unterminated bracket")
            content = text[i + 1:end]
            if wildcards and content == "*":
                segments.append(ANY_INDEX)
            elif _INDEX_PATTERN.fullmatch(content):
                segments.append(int(content))
            else:
                raise PathSyntaxError(text, i, f"invalid array index '{content}'")
            state = _AFTER_INDEX
            i = end + 1
            continue

        if char == ".":
            if state in (_START, _AFTER_DOT):
                raise PathSyntaxError(text, i, "empty field name")
            if state == _FIELD:
                flush()
            state = _AFTER_DOT
            i += 1
            continue

        if state == _AFTER_INDEX:
            raise PathSyntaxError(text, i, "expected '.' or '[' after array index")

        if state != _FIELD:
            escaped = False
        if char == "\\":
            if i + 1 == len(text):
                raise PathSyntaxError(text, i, "dangling escape")
            i += 1
            char = text[i]
            escaped = True
        field.append(char)
        state = _FIELD
        i += 1

    if state == _AFTER_DOT:
        raise PathSyntaxError(text, len(text), "empty field name")
    if state == _FIELD:
        flush()

    return segments


def _render_field(name: str) -> str:
    return name.replace("\\", "\\\\").replace(".", "\\.").replace("[", "\\[")


class Path:
    """
    An immutable location within a JSON document.

    Segments are field names (str) or array indices (int, negative counts
    from the end). The optional root label ('$', or a query expression) is
    only used when rendering.
    """

    __slots__ = ("_segments", "_root")

    def __init__(self, segments: Iterable[Segment] = (), root: str = ""):
        object.__setattr__(self, "_segments", tuple(segments))
        object.__setattr__(self, "_root", root)

    def __setattr__(self, name, value):
        raise AttributeError("Path is immutable")

    @classmethod
    def of(cls, *segments: Segment, root: str = "") -> Path:
        return cls(segments, root)

    @classmethod
    def parse(cls, text: str) -> Path:
        """
        Parse path text such as 'a.b[0]', 'a\\.b' or '[-1]'.

        Raises:
            PathSyntaxError: on an unterminated bracket, a bad index,
                an empty field name or a dangling escape
        """
        return cls(_parse_segments(text))

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def root(self) -> str:
        return self._root

    @property
    def is_root(self) -> bool:
        return not self._segments

    @property
    def parent(self) -> Path:
        return Path(self._segments[:-1], self._root)

    @property
    def last(self) -> Segment | None:
        return self._segments[-1] if self._segments else None

    def to_field(self, name: str) -> Path:
        return Path(self._segments + (name,), self._root)

    def to_element(self, index: int) -> Path:
        return Path(self._segments + (index,), self._root)

    def concat(self, other: Path) -> Path:
        """Append other's segments; the root label of self is kept."""
        return Path(self._segments + other._segments, self._root)

    def with_root(self, root: str) -> Path:
        return Path(self._segments, root)

    def resolve(self, node: Node) -> Node:
        """Look up this path in node; returns MISSING if anything is absent."""
        for segment in self._segments:
            if isinstance(segment, int):
                node = node.element(segment)
            else:
                node = node.get(segment)
            if node.is_missing:
                break
        return node

    def __len__(self) -> int:
        return len(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._segments == other._segments and self._root == other._root

    def __hash__(self) -> int:
        return hash((self._segments, self._root))

    def __str__(self) -> str:
        text = self._root
        for segment in self._segments:
            if isinstance(segment, int):
                text += f"[{segment}]"
            elif text:
                text += "." + _render_field(segment)
            else:
                text += _render_field(segment)
        return text

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"


ROOT = Path()


@runtime_checkable
class PathMatcher(Protocol):
    """Answers whether a path is covered by a pattern."""

    def matches(self, path: Path) -> bool: ...


class SimplePathMatcher:
    """
    Matches a single literal path pattern.

    Supported pattern syntax (same grammar as Path, plus wildcards):
    - Exact path: root.ignored, items[0].id
    - Any array index: items[*].id
    - Any field name: root.*.id
    """

    def __init__(self, pattern: str | Path):
        if isinstance(pattern, Path):
            self._segments = pattern.segments
        else:
            self._segments = tuple(_parse_segments(pattern, wildcards=True))
        self.pattern = str(pattern)

    @property
    def literal(self) -> tuple | None:
        """The segments when the pattern has no wildcards, else None."""
        if any(isinstance(s, _Wildcard) for s in self._segments):
            return None
        return self._segments

    def matches(self, path: Path) -> bool:
        segments = path.segments
        if len(segments) != len(self._segments):
            return False

        for expected, actual in zip(self._segments, segments):
            if expected is ANY_FIELD:
                if not isinstance(actual, str):
                    return False
            elif expected is ANY_INDEX:
                if not isinstance(actual, int):
                    return False
            elif type(expected) is not type(actual) or expected != actual:
                return False
        return True

    def __repr__(self) -> str:
        return f"SimplePathMatcher({self.pattern!r})"


class AggregatePathMatcher:
    """Matches when any of its matchers matches."""

    def __init__(self, matchers: Iterable[PathMatcher]):
        self.matchers = tuple(matchers)
        self._literals: set[tuple] = set()
        self._others: list[PathMatcher] = []
        for matcher in self.matchers:
            literal = getattr(matcher, "literal", None)
            if literal is not None:
                self._literals.add(literal)
            else:
                self._others.append(matcher)

    def matches(self, path: Path) -> bool:
        if path.segments in self._literals:
            return True
        return any(matcher.matches(path) for matcher in self._others)

    def __len__(self) -> int:
        return len(self.matchers)

    def __repr__(self) -> str:
        return f"AggregatePathMatcher({list(self.matchers)!r})"
