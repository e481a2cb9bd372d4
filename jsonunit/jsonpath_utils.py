"""JSONPath utilities: turns jsonpath-ng query results into concrete Paths."""

from __future__ import annotations

import logging
from typing import Optional

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as jsonpath_parse
from jsonpath_ng.jsonpath import DatumInContext, Fields, Index, Root, This

from .exceptions import InvalidJsonPathError
from .paths import ROOT, AggregatePathMatcher, Path, PathMatcher, SimplePathMatcher
from .values import Node, to_node

logger = logging.getLogger(__name__)


def is_jsonpath(pattern: str) -> bool:
    """Patterns starting with '$' are JSONPath queries; others are literal paths."""
    return pattern.startswith("$")


def _index_of(step: Index) -> int:
    # jsonpath-ng >= 1.6 stores a tuple of indices, older releases a single one
    indices = getattr(step, "indices", None)
    if indices:
        return indices[0]
    return step.index


def _datum_path(datum: DatumInContext) -> Optional[Path]:
    """
    Rebuild the concrete path of a match by walking its context chain.

    Returns None when the match is not addressable (e.g. a computed value
    such as length()).
    """
    segments: list = []
    while datum is not None:
        step = datum.path
        if isinstance(step, Fields):
            if len(step.fields) != 1:
                return None
            segments.append(step.fields[0])
        elif isinstance(step, Index):
            index = _index_of(step)
            if index < 0 and datum.context is not None:
                index += len(datum.context.value)
            segments.append(index)
        elif not isinstance(step, (Root, This)):
            return None
        datum = datum.context
    return Path(reversed(segments))


class JSONPathMatcher:
    """Compiles JSONPath expressions and evaluates them against Nodes."""

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    @classmethod
    def compile(cls, expression: str):
        """
        Compile and cache a JSONPath expression.

        Raises:
            InvalidJsonPathError: if the expression does not parse
        """
        if expression not in cls._cache:
            try:
                cls._cache[expression] = jsonpath_parse(expression)
            except (JsonPathLexerError, JsonPathParserError) as e:
                raise InvalidJsonPathError(expression, str(e))
        return cls._cache[expression]

    @classmethod
    def find(cls, expression: str, document: Node) -> list[tuple[Optional[Path], Node]]:
        """
        Find all matches for a JSONPath expression.

        Returns:
            List of (concrete_path, node) tuples in query order; the path is
            None for matches that do not address a node of the document
        """
        expr = cls.compile(expression)
        matches = expr.find(document.to_python())
        return [(_datum_path(m), to_node(m.value)) for m in matches]

    @classmethod
    def find_paths(cls, expression: str, document: Node) -> list[Path]:
        """Find the concrete paths matching a JSONPath expression."""
        paths = [path for path, _ in cls.find(expression, document) if path is not None]
        logger.debug("JSONPath %s matched %d path(s)", expression, len(paths))
        return paths


def validate_pattern(pattern: str) -> None:
    """
    Check an ignored-path pattern without evaluating it.

    Raises:
        InvalidJsonPathError: for a malformed JSONPath query
        PathSyntaxError: for a malformed literal path
    """
    if is_jsonpath(pattern):
        JSONPathMatcher.compile(pattern)
    else:
        SimplePathMatcher(pattern)


def path_matcher_for(pattern: str, document: Node, base: Path = ROOT) -> PathMatcher:
    """
    Build the matcher for one ignored-path pattern.

    JSONPath queries are resolved against the document, so the result is
    only valid for that document. Each resolved path is prefixed with base,
    the location of the document within the compared tree.

    Args:
        pattern: Literal path pattern or JSONPath query
        document: Document the query is evaluated against
        base: Prefix for the resolved paths
    """
    if is_jsonpath(pattern):
        paths = JSONPathMatcher.find_paths(pattern, document)
        return AggregatePathMatcher(SimplePathMatcher(base.concat(p)) for p in paths)
    return SimplePathMatcher(pattern)


def resolve_ignored_paths(
    patterns: tuple[str, ...],
    documents: list[tuple[Node, Path]],
) -> Optional[PathMatcher]:
    """
    Resolve all ignored-path patterns against every (document, base) pair.

    Returns:
        A single aggregate matcher, or None when nothing is ignored
    """
    if not patterns:
        return None

    matchers: list[PathMatcher] = []
    for pattern in patterns:
        if is_jsonpath(pattern):
            for document, base in documents:
                matchers.extend(path_matcher_for(pattern, document, base).matchers)
        else:
            matchers.append(SimplePathMatcher(pattern))
    return AggregatePathMatcher(matchers)
