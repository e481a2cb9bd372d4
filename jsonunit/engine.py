"""Comparison entry points for jsonunit."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from .differ import Differ
from .jsonpath_utils import JSONPathMatcher, resolve_ignored_paths
from .matchers import check_placeholders
from .models import Configuration, Difference, DifferenceListener, DiffReport, Option, format_differences
from .paths import ROOT, Path
from .values import MISSING, Node, NodeType, to_node

logger = logging.getLogger(__name__)


class Diff:
    """
    Comparison of an expected document with (a node of) an actual document.

    Both documents may be given as plain Python data, JSON text as bytes,
    or Node trees. The comparison runs once, on first access to the
    differences; later calls return the cached result.

    Usage:
        diff = Diff({"a": 1}, {"a": 2}, configuration)
        if not diff.similar():
            print(diff.differences_message())
    """

    def __init__(
        self,
        expected: Any,
        actual: Any,
        configuration: Optional[Configuration] = None,
        path: str | Path = "",
        listener: Optional[DifferenceListener] = None
    ):
        """
        Initialize the comparison.

        Args:
            expected: The expected document (may contain placeholders)
            actual: The actual document
            configuration: Comparison options (uses defaults if not provided)
            path: Path text navigating the actual document to the node
                compared against expected
            listener: Called once per difference, in discovery order

        Raises:
            PathSyntaxError: if path cannot be parsed
            UnsupportedValueError: if a document cannot be converted
        """
        self.configuration = configuration or Configuration()
        self.listener = listener
        self.expected = to_node(expected)
        self.actual = to_node(actual)
        self.path = path if isinstance(path, Path) else Path.parse(path)
        self._compared = self.path.resolve(self.actual)
        self._differences: Optional[list[Difference]] = None
        self.duration_ms = 0

    @classmethod
    def in_path(
        cls,
        expression: str,
        expected: Any,
        actual: Any,
        configuration: Optional[Configuration] = None,
        listener: Optional[DifferenceListener] = None
    ) -> Diff:
        """
        Compare expected with the result of a JSONPath query on actual.

        A single concrete match is compared at its own path ($-rooted).
        Several matches are compared as an array of their values and no
        match as a missing node; both are reported under the expression.

        Raises:
            InvalidJsonPathError: if the expression does not parse
        """
        diff = cls(expected, actual, configuration, listener=listener)
        matches = JSONPathMatcher.find(expression, diff.actual)

        if len(matches) == 1 and matches[0][0] is not None:
            path, node = matches[0]
            diff._focus(path.with_root("$"), node)
        elif matches:
            values = tuple(node for _, node in matches)
            diff._focus(Path(root=expression), Node(NodeType.ARRAY, values))
        else:
            diff._focus(Path(root=expression), MISSING)
        return diff

    def _focus(self, path: Path, node: Node):
        self.path = path
        self._compared = node

    @property
    def differences(self) -> list[Difference]:
        if self._differences is None:
            self._differences = self._compute()
        return list(self._differences)

    def similar(self) -> bool:
        return not self.differences

    def differences_message(self) -> str:
        return format_differences(self.differences)

    def report(self) -> DiffReport:
        return DiffReport(differences=self.differences, duration_ms=self.duration_ms)

    def _compute(self) -> list[Difference]:
        start_time = time.time()
        configuration = self.configuration

        ignored = resolve_ignored_paths(
            configuration.ignored_paths,
            [(self.actual, ROOT), (self.expected, self.path)]
        )
        # Fail before any difference is reported
        check_placeholders(
            self.expected,
            configuration.matchers,
            configuration.ignore_placeholder,
            path=self.path,
            ignored=ignored,
            unordered=configuration.has_option(Option.IGNORING_ARRAY_ORDER)
        )

        logger.debug(
            "Comparing at '%s' with options %s",
            self.path, sorted(o.value for o in configuration.options)
        )

        differ = Differ(configuration, ignored, self.listener)
        differ.diff(self.path, self.expected, self._compared)

        self.duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "Comparison at '%s' done: %d difference(s), %d node(s) checked",
            self.path, len(differ.differences), differ.nodes_checked
        )
        return differ.differences

    def __str__(self) -> str:
        return self.differences_message()


def compare(
    expected: Any,
    actual: Any,
    configuration: Optional[Configuration] = None,
    path: str | Path = "",
    listener: Optional[DifferenceListener] = None
) -> list[Difference]:
    """
    Convenience function to compare two JSON documents.

    Args:
        expected: The expected document
        actual: The actual document
        configuration: Optional comparison options
        path: Optional path of the compared node within actual
        listener: Optional per-difference callback

    Returns:
        The differences, in discovery order (empty if the documents match)
    """
    return Diff(expected, actual, configuration, path, listener).differences


def compare_in_path(
    expression: str,
    expected: Any,
    actual: Any,
    configuration: Optional[Configuration] = None,
    listener: Optional[DifferenceListener] = None
) -> list[Difference]:
    """Compare expected with the node(s) selected by a JSONPath query on actual."""
    return Diff.in_path(expression, expected, actual, configuration, listener).differences
