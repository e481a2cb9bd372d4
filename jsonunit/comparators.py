"""Comparison functions for scalar nodes."""

from __future__ import annotations

import re
from decimal import MAX_EMAX, MIN_EMIN, ROUND_DOWN, ROUND_UP, Decimal, localcontext
from functools import lru_cache

from .values import Node, NodeType


# Cache for compiled regex patterns
@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern:
    """Compile and cache a regex pattern."""
    return re.compile(pattern)


def matches_pattern(pattern: str, value: str) -> bool:
    """True if the whole of value matches pattern."""
    return compile_pattern(pattern).fullmatch(value) is not None


def compare_numbers(
    expected: Decimal,
    actual: Decimal,
    tolerance: Decimal = Decimal(0)
) -> tuple[bool, str]:
    """
    Compare two numbers, allowing |expected - actual| <= tolerance.

    The subtraction is done with enough precision to be exact, so
    0.1 vs 0.3 with tolerance 0.2 matches.

    Args:
        expected: The expected number
        actual: The actual number
        tolerance: Maximum allowed difference (0 means equal by value)

    Returns:
        Tuple of (is_match, message)
    """
    if not tolerance:
        if expected == actual:
            return True, ""
        return False, ""

    # Bounds of |expected - actual| at a precision tied to the tolerance
    low, high = _difference_bounds(expected, actual, max(28, len(tolerance.as_tuple().digits) + 2))
    if high <= tolerance:
        return True, ""
    if low > tolerance:
        return False, f"Difference {low} exceeds tolerance {tolerance}"

    # Too close to call: subtract exactly. Both operands then lie within
    # about the tolerance of each other, so their digits bound the precision.
    exponents = [n.as_tuple().exponent for n in (expected, actual, tolerance)]
    magnitude = max(n.adjusted() for n in (expected, actual, tolerance))
    difference, _ = _difference_bounds(expected, actual, max(28, magnitude - min(exponents) + 2))
    if difference <= tolerance:
        return True, ""
    return False, f"Difference {difference} exceeds tolerance {tolerance}"


def _difference_bounds(expected: Decimal, actual: Decimal, precision: int) -> tuple[Decimal, Decimal]:
    """|expected - actual| rounded toward zero and away from zero."""
    with localcontext() as ctx:
        ctx.prec = precision
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.rounding = ROUND_DOWN
        low = abs(expected - actual)
        ctx.rounding = ROUND_UP
        high = abs(expected - actual)
    return low, high


def compare_scalars(expected: Node, actual: Node, tolerance: Decimal = Decimal(0)) -> tuple[bool, str]:
    """
    Compare two scalar nodes of the same type.

    Returns:
        Tuple of (is_match, message)
    """
    if expected.type is NodeType.NUMBER:
        return compare_numbers(expected.value, actual.value, tolerance)
    if expected.value == actual.value:
        return True, ""
    return False, ""
