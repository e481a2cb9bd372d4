"""Order-insensitive array comparison."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from .models import Option
from .paths import Path
from .values import Node

if TYPE_CHECKING:
    from .differ import Differ

logger = logging.getLogger(__name__)


class ArrayReconciler:
    """
    Pairs the elements of two arrays regardless of their order.

    Each expected element, in index order, takes the first still-unpaired
    actual element it compares equal to (a trial comparison with no
    differences). What is left over is reported on the owning differ:

    - exactly one leftover on each side: the pair is compared in full and
      every difference found is tagged with the (expected, actual)
      element paths
    - otherwise: a single difference at the array path listing both the
      missing and the extra values (extra values are left out under
      IGNORING_EXTRA_ARRAY_ITEMS)
    """

    def __init__(self, differ: Differ, path: Path, expected: Node, actual: Node):
        self.differ = differ
        self.path = path
        self.expected = expected
        self.actual = actual

    def reconcile(self):
        expected_items = self.expected.elements()
        actual_items = self.actual.elements()

        actual_matched = [False] * len(actual_items)
        unmatched_expected: list[int] = []

        for i, expected_item in enumerate(expected_items):
            for j, actual_item in enumerate(actual_items):
                if actual_matched[j]:
                    continue
                if self.differ.items_equal(self.path.to_element(j), expected_item, actual_item):
                    actual_matched[j] = True
                    break
            else:
                unmatched_expected.append(i)

        unmatched_actual = [j for j, matched in enumerate(actual_matched) if not matched]

        logger.debug(
            "Reconciled %s: %d paired, %d expected and %d actual left over",
            self.path, len(expected_items) - len(unmatched_expected),
            len(unmatched_expected), len(unmatched_actual)
        )

        if len(unmatched_expected) == 1 and len(unmatched_actual) == 1:
            self._compare_pair(unmatched_expected[0], unmatched_actual[0])
            return

        if self.differ.configuration.has_option(Option.IGNORING_EXTRA_ARRAY_ITEMS):
            unmatched_actual = []
        if unmatched_expected or unmatched_actual:
            self.differ.add_unordered_content_difference(
                self.path, self.expected, self.actual,
                tuple(expected_items[i] for i in unmatched_expected),
                tuple(actual_items[j] for j in unmatched_actual)
            )

    def _compare_pair(self, i: int, j: int):
        """Compare the single leftover pair and merge its differences."""
        pair = (self.path.to_element(i), self.path.to_element(j))
        differ = self.differ.child()
        differ.diff(pair[1], self.expected.element(i), self.actual.element(j))

        for difference in differ.differences:
            # Nested pairs keep the innermost element paths
            if difference.element_pair is None:
                difference = dataclasses.replace(difference, element_pair=pair)
            self.differ.add_difference(difference)
