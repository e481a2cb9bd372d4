"""Data models for jsonunit: options, configuration and differences."""

from __future__ import annotations

import decimal
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Protocol

from .exceptions import ConfigurationError
from .jsonpath_utils import validate_pattern
from .paths import Path

if TYPE_CHECKING:
    from .matchers import Matcher


DEFAULT_IGNORE_PLACEHOLDER = "${json-unit.ignore}"


class Option(Enum):
    IGNORING_ARRAY_ORDER = "ignoring-array-order"
    IGNORING_EXTRA_FIELDS = "ignoring-extra-fields"
    IGNORING_EXTRA_ARRAY_ITEMS = "ignoring-extra-array-items"
    TREATING_NULL_AS_ABSENT = "treating-null-as-absent"
    IGNORING_VALUES = "ignoring-values"

    @classmethod
    def from_name(cls, name: str) -> Option:
        """Look up an option by enum name or kebab-case value."""
        if isinstance(name, Option):
            return name
        normalized = str(name).strip()
        for option in cls:
            if normalized in (option.name, option.value):
                return option
        raise ConfigurationError(
            f"Unknown option: {name}",
            {"valid": [o.value for o in cls]}
        )


class DifferenceKind(Enum):
    DIFFERENT_VALUE = "DIFFERENT_VALUE"
    DIFFERENT_TYPE = "DIFFERENT_TYPE"
    MISSING_ENTRY = "MISSING_ENTRY"
    EXTRA_ENTRY = "EXTRA_ENTRY"
    DIFFERENT_ARRAY_LENGTH = "DIFFERENT_ARRAY_LENGTH"
    MATCHER_FAILED = "MATCHER_FAILED"


@dataclass(frozen=True)
class Difference:
    """A single difference found during comparison."""
    path: Path
    kind: DifferenceKind
    expected: str
    actual: str
    message: str
    detail: Optional[str] = None
    # (expected element, actual element) when found by pairing leftover
    # elements of an order-insensitive array
    element_pair: Optional[tuple[Path, Path]] = None

    @property
    def expected_path(self) -> Path:
        """Location of the expected side; differs from path inside a paired element."""
        if self.element_pair is None:
            return self.path
        expected_element, actual_element = self.element_pair
        suffix = self.path.segments[len(actual_element):]
        return Path(expected_element.segments + suffix, expected_element.root)

    def to_dict(self) -> dict:
        result = {
            "path": str(self.path),
            "kind": self.kind.value,
            "expected": self.expected,
            "actual": self.actual,
            "message": self.message,
        }
        if self.detail is not None:
            result["detail"] = self.detail
        if self.element_pair is not None:
            result["expected_path"] = str(self.expected_path)
        return result

    def __str__(self) -> str:
        return (
            f"{self.kind.value} Expected {self.expected} in {self.expected_path} "
            f"got {self.actual} in {self.path}"
        )


class DifferenceListener(Protocol):
    """Called once for every difference, in discovery order."""

    def __call__(self, difference: Difference) -> None: ...


def _to_tolerance(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid tolerance: {value!r}")
    try:
        if isinstance(value, float):
            tolerance = Decimal(repr(value))
        else:
            tolerance = Decimal(value)
    except (decimal.InvalidOperation, TypeError, ValueError):
        raise ConfigurationError(f"Invalid tolerance: {value!r}")

    if not tolerance.is_finite() or tolerance < 0:
        raise ConfigurationError(
            f"Tolerance must be a finite number >= 0, got {value!r}"
        )
    return tolerance


@dataclass(frozen=True)
class Configuration:
    """
    Immutable snapshot of comparison options.

    Build one with Configuration.builder() or from a mapping (see
    from_dict). Snapshots never share mutable state with the builder
    that produced them, so they can be reused across threads.
    """
    options: frozenset = frozenset()
    tolerance: Decimal = Decimal(0)
    ignored_paths: tuple[str, ...] = ()
    matchers: Mapping[str, Matcher] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    ignore_placeholder: str = DEFAULT_IGNORE_PLACEHOLDER

    def __post_init__(self):
        object.__setattr__(
            self, "options", frozenset(Option.from_name(o) for o in self.options)
        )
        object.__setattr__(self, "tolerance", _to_tolerance(self.tolerance))

        if isinstance(self.ignored_paths, str):
            raise ConfigurationError("ignored_paths must be a list of patterns, not a string")
        ignored_paths = tuple(self.ignored_paths)
        for pattern in ignored_paths:
            if not isinstance(pattern, str):
                raise ConfigurationError(f"Ignored path must be a string: {pattern!r}")
            validate_pattern(pattern)
        object.__setattr__(self, "ignored_paths", ignored_paths)

        matchers = dict(self.matchers)
        for name, matcher in matchers.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Invalid matcher name: {name!r}")
            if not callable(matcher):
                raise ConfigurationError(f"Matcher '{name}' is not callable")
        object.__setattr__(self, "matchers", MappingProxyType(matchers))

        if not isinstance(self.ignore_placeholder, str) or not self.ignore_placeholder:
            raise ConfigurationError(
                f"Invalid ignore placeholder: {self.ignore_placeholder!r}"
            )

    def has_option(self, option: Option) -> bool:
        return option in self.options

    @classmethod
    def builder(cls) -> ConfigurationBuilder:
        return ConfigurationBuilder()

    def to_builder(self) -> ConfigurationBuilder:
        """Start a new builder pre-filled with this snapshot's settings."""
        return ConfigurationBuilder(self)

    @classmethod
    def from_dict(
        cls,
        data: Optional[Mapping[str, Any]],
        matchers: Optional[Mapping[str, Matcher]] = None
    ) -> Configuration:
        """
        Create a configuration from a plain mapping (e.g. loaded from YAML).

        Supported keys: options, tolerance, ignored_paths, ignore_placeholder.
        Matchers are code, so they are passed separately.

        Raises:
            ConfigurationError: on unknown keys or invalid values
        """
        data = dict(data or {})
        known = {"options", "tolerance", "ignored_paths", "ignore_placeholder"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                {"unknown": unknown}
            )

        options = data.get("options") or []
        if isinstance(options, str):
            options = [options]

        return cls(
            options=frozenset(Option.from_name(o) for o in options),
            tolerance=data.get("tolerance", 0),
            ignored_paths=tuple(data.get("ignored_paths") or ()),
            matchers=matchers or {},
            ignore_placeholder=data.get("ignore_placeholder", DEFAULT_IGNORE_PLACEHOLDER),
        )

    def to_dict(self) -> dict:
        return {
            "options": sorted(o.value for o in self.options),
            "tolerance": str(self.tolerance),
            "ignored_paths": list(self.ignored_paths),
            "matchers": sorted(self.matchers),
            "ignore_placeholder": self.ignore_placeholder,
        }


class ConfigurationBuilder:
    """
    Mutable builder producing immutable Configuration snapshots.

    Usage:
        config = (Configuration.builder()
                  .with_options(Option.IGNORING_ARRAY_ORDER)
                  .with_tolerance(0.01)
                  .when_ignoring_paths("root.timestamp", "$..id")
                  .build())
    """

    def __init__(self, base: Optional[Configuration] = None):
        base = base or Configuration()
        self._options: set[Option] = set(base.options)
        self._tolerance: Any = base.tolerance
        self._ignored_paths: list[str] = list(base.ignored_paths)
        self._matchers: dict[str, Matcher] = dict(base.matchers)
        self._ignore_placeholder: str = base.ignore_placeholder

    def with_options(self, *options: Option | str) -> ConfigurationBuilder:
        self._options.update(Option.from_name(o) for o in options)
        return self

    def without_options(self, *options: Option | str) -> ConfigurationBuilder:
        self._options.difference_update(Option.from_name(o) for o in options)
        return self

    def with_tolerance(self, tolerance: Any) -> ConfigurationBuilder:
        self._tolerance = _to_tolerance(tolerance)
        return self

    def when_ignoring_paths(self, *patterns: str) -> ConfigurationBuilder:
        for pattern in patterns:
            validate_pattern(pattern)
        self._ignored_paths.extend(patterns)
        return self

    def with_matcher(self, name: str, matcher: Matcher) -> ConfigurationBuilder:
        self._matchers[name] = matcher
        return self

    def with_matchers(self, matchers: Mapping[str, Matcher]) -> ConfigurationBuilder:
        self._matchers.update(matchers)
        return self

    def with_ignore_placeholder(self, placeholder: str) -> ConfigurationBuilder:
        self._ignore_placeholder = placeholder
        return self

    def build(self) -> Configuration:
        return Configuration(
            options=frozenset(self._options),
            tolerance=self._tolerance,
            ignored_paths=tuple(self._ignored_paths),
            matchers=dict(self._matchers),
            ignore_placeholder=self._ignore_placeholder,
        )


def format_differences(differences: Iterable[Difference]) -> str:
    """
    Render differences as a multi-line failure message.

    Differences found by pairing leftover array elements are preceded by
    a line naming the compared elements.
    """
    differences = list(differences)
    if not differences:
        return ""

    lines = ["JSON documents are different:"]
    current_pair = None
    for difference in differences:
        pair = difference.element_pair
        if pair is not None and pair != current_pair:
            lines.append(
                f"Different value found when comparing expected array element "
                f"{pair[0]} to actual element {pair[1]}."
            )
        current_pair = pair
        lines.append(difference.message)
    return "\n".join(lines) + "\n"


@dataclass
class DiffReport:
    """Complete comparison report."""
    differences: list[Difference] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def is_match(self) -> bool:
        return not self.differences

    @property
    def message(self) -> str:
        return format_differences(self.differences)

    def summary(self) -> dict:
        counts: dict[str, int] = {}
        for difference in self.differences:
            counts[difference.kind.value] = counts.get(difference.kind.value, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "is_match": self.is_match,
            "duration_ms": self.duration_ms,
            "summary": self.summary(),
            "differences": [d.to_dict() for d in self.differences],
        }
