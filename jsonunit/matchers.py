"""Placeholders and custom matchers embedded in expected documents.

Placeholders are only recognized when they make up the entire expected
string value:

    ${json-unit.ignore}              anything (configurable token)
    ${json-unit.any-number}          any number
    ${json-unit.any-string}          any string
    ${json-unit.any-boolean}         true or false
    ${json-unit.regex}<pattern>      a string fully matching <pattern>
    ${json-unit.matches:<name>}      a registered matcher
    ${json-unit.matches:<name>}<p>   a registered matcher called with parameter <p>
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from .comparators import compile_pattern
from .exceptions import ConfigurationError, UnknownMatcherError
from .paths import ROOT, Path, PathMatcher
from .values import MISSING, Node, NodeType

# A matcher receives the actual value as plain Python data (numbers as
# Decimal, null as None, an absent node as the MISSING sentinel) and, when
# the placeholder carries one, the parameter string. It returns a bool, a
# (bool, description) tuple or a MatchResult.
Matcher = Callable[..., Any]

ANY_NUMBER = "${json-unit.any-number}"
ANY_STRING = "${json-unit.any-string}"
ANY_BOOLEAN = "${json-unit.any-boolean}"
REGEX_PREFIX = "${json-unit.regex}"
MATCHER_PREFIX = "${json-unit.matches:"

_KIND_PLACEHOLDERS = {
    ANY_NUMBER: (NodeType.NUMBER, "a number"),
    ANY_STRING: (NodeType.STRING, "a string"),
    ANY_BOOLEAN: (NodeType.BOOLEAN, "a boolean"),
}


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a matcher call."""
    matched: bool
    description: str = ""


@dataclass(frozen=True)
class MatcherReference:
    """A parsed ${json-unit.matches:<name>} placeholder."""
    name: str
    parameter: Optional[str] = None


def kind_placeholder(token: str) -> Optional[tuple[NodeType, str]]:
    """Return (required node type, description) for an any-* placeholder."""
    return _KIND_PLACEHOLDERS.get(token)


def regex_placeholder(token: str) -> Optional[str]:
    """Return the pattern of a regex placeholder, or None."""
    if token.startswith(REGEX_PREFIX):
        return token[len(REGEX_PREFIX):]
    return None


def parse_matcher_reference(token: str) -> Optional[MatcherReference]:
    """Parse a matcher placeholder; returns None if token is not one."""
    if not token.startswith(MATCHER_PREFIX):
        return None
    rest = token[len(MATCHER_PREFIX):]
    end = rest.find("}")
    if end <= 0:
        return None
    return MatcherReference(rest[:end], rest[end + 1:] or None)


def run_matcher(matcher: Matcher, actual: Node, parameter: Optional[str] = None) -> MatchResult:
    """Call a matcher on the actual node and normalize its result."""
    value = MISSING if actual.is_missing else actual.to_python()
    if parameter is None:
        result = matcher(value)
    else:
        result = matcher(value, parameter)

    if isinstance(result, MatchResult):
        return result
    if isinstance(result, tuple):
        matched, description = result
        return MatchResult(bool(matched), str(description or ""))
    return MatchResult(bool(result))


def _strings(
    node: Node,
    path: Path,
    ignored: Optional[PathMatcher],
    unordered: bool
) -> Iterator[str]:
    """Strings of the tree the comparison can reach, skipping ignored subtrees."""
    if ignored is not None and ignored.matches(path):
        return
    if node.type is NodeType.STRING:
        yield node.value
    elif node.type is NodeType.OBJECT:
        for key, member in node.items():
            yield from _strings(member, path.to_field(key), ignored, unordered)
    elif node.type is NodeType.ARRAY:
        # Unordered elements may be compared at any index
        element_ignored = None if unordered else ignored
        for i, element in enumerate(node.elements()):
            yield from _strings(element, path.to_element(i), element_ignored, unordered)


def check_placeholders(
    expected: Node,
    matchers: Mapping[str, Matcher],
    ignore_placeholder: str,
    path: Path = ROOT,
    ignored: Optional[PathMatcher] = None,
    unordered: bool = False
) -> None:
    """
    Validate the placeholders of an expected document up front.

    Subtrees at ignored paths are never compared, so they are not checked.

    Args:
        expected: The expected document
        matchers: Registered matchers by name
        ignore_placeholder: The configured ignore token
        path: Path the expected document is compared at
        ignored: Resolved ignored paths, if any
        unordered: True if arrays are compared regardless of order

    Raises:
        UnknownMatcherError: for a matcher name that is not registered
        ConfigurationError: for a regex placeholder that does not compile
    """
    for token in _strings(expected, path, ignored, unordered):
        if token == ignore_placeholder:
            continue
        reference = parse_matcher_reference(token)
        if reference is not None:
            if reference.name not in matchers:
                raise UnknownMatcherError(reference.name)
            continue
        pattern = regex_placeholder(token)
        if pattern is not None:
            try:
                compile_pattern(pattern)
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid regex placeholder '{token}': {e}",
                    {"pattern": pattern}
                )
