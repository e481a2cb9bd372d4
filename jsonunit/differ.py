"""Recursive comparison of expected and actual node trees."""

from __future__ import annotations

from typing import Optional

from .comparators import compare_scalars, matches_pattern
from .exceptions import UnknownMatcherError
from .matchers import kind_placeholder, parse_matcher_reference, regex_placeholder, run_matcher
from .models import Configuration, Difference, DifferenceKind, DifferenceListener, Option
from .paths import Path, PathMatcher
from .reconciler import ArrayReconciler
from .utils import (
    array_content_message,
    array_length_message,
    different_keys_message,
    different_value_message,
    matcher_message,
    missing_node_message,
    pattern_message,
    render_list,
    unordered_content_message,
)
from .values import MISSING, Node, NodeType


class Differ:
    """
    Performs the deep comparison of two node trees.

    Handles:
    - Ignored paths and the ignore placeholder
    - Kind, regex and matcher placeholders
    - Objects (missing/extra keys), arrays (ordered or not) and scalars

    Differences accumulate in discovery order; the walk never stops early
    unless fail_fast is set (used for trial comparisons).
    """

    def __init__(
        self,
        configuration: Configuration,
        ignored: Optional[PathMatcher] = None,
        listener: Optional[DifferenceListener] = None,
        fail_fast: bool = False
    ):
        self.configuration = configuration
        self.ignored = ignored
        self.listener = listener
        self.fail_fast = fail_fast

        self.differences: list[Difference] = []
        self.nodes_checked = 0
        self._aborted = False

    def diff(self, path: Path, expected: Node, actual: Node) -> bool:
        """
        Compare expected with actual at path.

        Returns:
            True if no difference was found below path
        """
        if self._aborted:
            return False
        count = len(self.differences)
        self._diff(path, expected, actual)
        return len(self.differences) == count

    def child(self, fail_fast: Optional[bool] = None) -> Differ:
        """A differ with the same settings that reports nothing to the listener."""
        return Differ(
            self.configuration,
            self.ignored,
            listener=None,
            fail_fast=self.fail_fast if fail_fast is None else fail_fast
        )

    def items_equal(self, path: Path, expected: Node, actual: Node) -> bool:
        """Check if two nodes are equal without recording anything."""
        # Use a temporary differ to avoid polluting our differences
        return self.child(fail_fast=True).diff(path, expected, actual)

    def _has(self, option: Option) -> bool:
        return self.configuration.has_option(option)

    def _is_ignored(self, path: Path) -> bool:
        return self.ignored is not None and self.ignored.matches(path)

    def _diff(self, path: Path, expected: Node, actual: Node):
        if self._is_ignored(path):
            return

        if expected.type is NodeType.STRING and expected.value == self.configuration.ignore_placeholder:
            return

        if expected.type is NodeType.STRING and self._check_placeholder(path, expected.value, actual):
            return

        if self._has(Option.TREATING_NULL_AS_ABSENT):
            if expected.is_null:
                expected = MISSING
            if actual.is_null:
                actual = MISSING

        if expected.is_missing or actual.is_missing:
            if not (expected.is_missing and actual.is_missing):
                self._diff_missing(path, expected, actual)
            return

        if expected.type is not actual.type:
            self._add_diff(
                path=path,
                kind=DifferenceKind.DIFFERENT_TYPE,
                expected=expected.render(),
                actual=actual.render(),
                message=different_value_message(path, expected.render(), actual.render())
            )
            return

        # Dispatch by type
        if expected.type is NodeType.OBJECT:
            self._diff_objects(path, expected, actual)
        elif expected.type is NodeType.ARRAY:
            self._diff_arrays(path, expected, actual)
        else:
            self._diff_scalars(path, expected, actual)

    def _diff_missing(self, path: Path, expected: Node, actual: Node):
        if actual.is_missing:
            message = missing_node_message(path)
        else:
            message = different_value_message(path, expected.render(), actual.render())
        self._add_diff(
            path=path,
            kind=DifferenceKind.DIFFERENT_VALUE,
            expected=expected.render(),
            actual=actual.render(),
            message=message
        )

    def _check_placeholder(self, path: Path, token: str, actual: Node) -> bool:
        """
        Evaluate token if it is a placeholder.

        Returns:
            True if token was a placeholder (whether or not it matched)
        """
        kind = kind_placeholder(token)
        if kind is not None:
            self.nodes_checked += 1
            node_type, description = kind
            if actual.type is not node_type:
                self._add_diff(
                    path=path,
                    kind=DifferenceKind.DIFFERENT_VALUE,
                    expected=token,
                    actual=actual.render(),
                    message=different_value_message(path, description, actual.render())
                )
            return True

        pattern = regex_placeholder(token)
        if pattern is not None:
            self.nodes_checked += 1
            if not (actual.type is NodeType.STRING and matches_pattern(pattern, actual.value)):
                self._add_diff(
                    path=path,
                    kind=DifferenceKind.DIFFERENT_VALUE,
                    expected=token,
                    actual=actual.render(),
                    message=pattern_message(path, pattern, actual)
                )
            return True

        reference = parse_matcher_reference(token)
        if reference is not None:
            self.nodes_checked += 1
            matcher = self.configuration.matchers.get(reference.name)
            if matcher is None:
                raise UnknownMatcherError(reference.name)
            result = run_matcher(matcher, actual, reference.parameter)
            if not result.matched:
                self._add_diff(
                    path=path,
                    kind=DifferenceKind.MATCHER_FAILED,
                    expected=token,
                    actual=actual.render(),
                    message=matcher_message(reference.name, path, actual, result.description),
                    detail=result.description or None
                )
            return True

        return False

    def _present_keys(self, node: Node) -> set[str]:
        if self._has(Option.TREATING_NULL_AS_ABSENT):
            return {key for key, member in node.items() if not member.is_null}
        return set(node.keys())

    def _diff_objects(self, path: Path, expected: Node, actual: Node):
        """Compare two objects: missing keys, then extra keys, then shared keys."""
        expected_keys = self._present_keys(expected)
        actual_keys = self._present_keys(actual)

        for key in sorted(expected_keys - actual_keys):
            child_path = path.to_field(key)
            if self._aborted:
                return
            if self._is_ignored(child_path):
                continue
            self._add_diff(
                path=child_path,
                kind=DifferenceKind.MISSING_ENTRY,
                expected=expected.get(key).render(),
                actual=MISSING.render(),
                message=different_keys_message(path, key, True, expected, actual)
            )

        if not self._has(Option.IGNORING_EXTRA_FIELDS):
            for key in sorted(actual_keys - expected_keys):
                child_path = path.to_field(key)
                if self._aborted:
                    return
                if self._is_ignored(child_path):
                    continue
                self._add_diff(
                    path=child_path,
                    kind=DifferenceKind.EXTRA_ENTRY,
                    expected=MISSING.render(),
                    actual=actual.get(key).render(),
                    message=different_keys_message(path, key, False, expected, actual)
                )

        for key in sorted(expected_keys & actual_keys):
            if self._aborted:
                return
            self.diff(path.to_field(key), expected.get(key), actual.get(key))

    def _diff_arrays(self, path: Path, expected: Node, actual: Node):
        """Compare two arrays, in order or via the reconciler."""
        expected_items = expected.elements()
        actual_items = actual.elements()
        ignore_extra = self._has(Option.IGNORING_EXTRA_ARRAY_ITEMS)

        if len(expected_items) != len(actual_items):
            if not (ignore_extra and len(actual_items) > len(expected_items)):
                self._add_diff(
                    path=path,
                    kind=DifferenceKind.DIFFERENT_ARRAY_LENGTH,
                    expected=str(len(expected_items)),
                    actual=str(len(actual_items)),
                    message=array_length_message(path, len(expected_items), len(actual_items))
                )

        if self._has(Option.IGNORING_ARRAY_ORDER):
            ArrayReconciler(self, path, expected, actual).reconcile()
            return

        if len(expected_items) > len(actual_items):
            self.add_content_difference(path, expected, actual, expected_items[len(actual_items):], True)
        elif len(actual_items) > len(expected_items) and not ignore_extra:
            self.add_content_difference(path, expected, actual, actual_items[len(expected_items):], False)

        for i in range(min(len(expected_items), len(actual_items))):
            if self._aborted:
                return
            self.diff(path.to_element(i), expected_items[i], actual_items[i])

    def _diff_scalars(self, path: Path, expected: Node, actual: Node):
        """Compare scalar values."""
        self.nodes_checked += 1

        if self._has(Option.IGNORING_VALUES):
            return

        is_match, message = compare_scalars(expected, actual, self.configuration.tolerance)
        if is_match:
            return

        self._add_diff(
            path=path,
            kind=DifferenceKind.DIFFERENT_VALUE,
            expected=expected.render(),
            actual=actual.render(),
            message=different_value_message(path, expected.render(), actual.render()),
            detail=message or None
        )

    def add_content_difference(
        self,
        path: Path,
        expected: Node,
        actual: Node,
        values: tuple[Node, ...],
        missing: bool
    ):
        """Report values present in only one of the arrays at path."""
        self._add_diff(
            path=path,
            kind=DifferenceKind.MISSING_ENTRY if missing else DifferenceKind.EXTRA_ENTRY,
            expected=expected.render(),
            actual=actual.render(),
            message=array_content_message(path, values, missing, expected, actual),
            detail=render_list(values)
        )

    def add_unordered_content_difference(
        self,
        path: Path,
        expected: Node,
        actual: Node,
        missing: tuple[Node, ...],
        extra: tuple[Node, ...]
    ):
        """Report the leftovers of an order-insensitive array in one difference."""
        self._add_diff(
            path=path,
            kind=DifferenceKind.MISSING_ENTRY if missing else DifferenceKind.EXTRA_ENTRY,
            expected=expected.render(),
            actual=actual.render(),
            message=unordered_content_message(path, missing, extra, expected, actual),
            detail=f"missing: {render_list(missing)}, extra: {render_list(extra)}"
        )

    def _add_diff(
        self,
        path: Path,
        kind: DifferenceKind,
        expected: str,
        actual: str,
        message: str,
        detail: str = None
    ):
        """Add a difference."""
        self.add_difference(Difference(
            path=path,
            kind=kind,
            expected=expected,
            actual=actual,
            message=message,
            detail=detail
        ))

    def add_difference(self, difference: Difference):
        """Record a difference and notify the listener."""
        self.differences.append(difference)

        if self.listener is not None:
            self.listener(difference)

        if self.fail_fast:
            self._aborted = True
