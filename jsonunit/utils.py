"""Utility functions for rendering values and difference messages."""

from __future__ import annotations

from typing import Iterable

from .paths import Path
from .values import Node


def render_list(nodes: Iterable[Node]) -> str:
    """Render nodes as a list joined by ', ' (e.g. [2, 3])."""
    return "[" + ", ".join(node.render() for node in nodes) + "]"


def different_value_message(path: Path, expected: str, actual: str) -> str:
    """Both sides are given as rendered text (e.g. 'a number' for placeholders)."""
    return (
        f'Different value found in node "{path}", '
        f"expected: <{expected}> but was: <{actual}>."
    )


def missing_node_message(path: Path) -> str:
    return f'Missing node in path "{path}".'


def different_keys_message(
    path: Path,
    key: str,
    missing: bool,
    expected: Node,
    actual: Node
) -> str:
    """
    Message for a single key present on only one side.

    Args:
        path: Path of the parent object
        key: The key
        missing: True if the key is absent from actual, False if extra
        expected: The expected parent object
        actual: The actual parent object
    """
    label = "missing" if missing else "extra"
    return (
        f'Different keys found in node "{path}", {label}: "{key}", '
        f"expected: <{expected.render()}> but was: <{actual.render()}>"
    )


def array_length_message(path: Path, expected_length: int, actual_length: int) -> str:
    return (
        f'Array "{path}" has different length, '
        f"expected: <{expected_length}> but was: <{actual_length}>."
    )


def array_content_message(
    path: Path,
    values: Iterable[Node],
    missing: bool,
    expected: Node,
    actual: Node
) -> str:
    label = "Missing values" if missing else "Extra values"
    return (
        f'Array "{path}" has different content. {label}: {render_list(values)}, '
        f"expected: <{expected.render()}> but was: <{actual.render()}>"
    )


def unordered_content_message(
    path: Path,
    missing: Iterable[Node],
    extra: Iterable[Node],
    expected: Node,
    actual: Node
) -> str:
    """Both leftover lists in one line, as reported for order-insensitive arrays."""
    return (
        f'Array "{path}" has different content. '
        f"Missing values: {render_list(missing)}, extra values: {render_list(extra)}, "
        f"expected: <{expected.render()}> but was: <{actual.render()}>"
    )


def matcher_message(name: str, path: Path, actual: Node, description: str) -> str:
    message = f'Matcher "{name}" does not match value {actual.render()} in node "{path}".'
    if description:
        message += f" {description}"
    return message


def pattern_message(path: Path, pattern: str, actual: Node) -> str:
    return (
        f'Different value found in node "{path}". '
        f"Pattern {pattern} did not match {actual.render()}."
    )
