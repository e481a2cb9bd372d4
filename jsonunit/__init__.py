"""
jsonunit - Semantic JSON Comparison Engine

Compares an expected JSON document with an actual one and reports every
difference with its path. Expected documents may contain placeholders
(${json-unit.ignore}, ${json-unit.any-number}, custom matchers, ...), and
comparisons can ignore array order, extra fields or chosen paths.
"""

from .engine import Diff, compare, compare_in_path
from .exceptions import (
    ConfigurationError,
    InvalidJsonError,
    InvalidJsonPathError,
    JsonUnitError,
    PathSyntaxError,
    UnknownMatcherError,
    UnsupportedValueError,
)
from .matchers import MatchResult
from .models import (
    Configuration,
    ConfigurationBuilder,
    Difference,
    DifferenceKind,
    DifferenceListener,
    DiffReport,
    Option,
    format_differences,
)
from .paths import ROOT, AggregatePathMatcher, Path, PathMatcher, SimplePathMatcher
from .runner import (
    DatasetRunner,
    GlobalReport,
    ScenarioResult,
    load_configuration,
    run_datasets,
)
from .values import MISSING, Node, NodeType, read_json, to_node

__version__ = "1.0.0"
__all__ = [
    # Comparison
    "Diff",
    "compare",
    "compare_in_path",
    # Configuration
    "Configuration",
    "ConfigurationBuilder",
    "Option",
    "MatchResult",
    # Reports
    "Difference",
    "DifferenceKind",
    "DifferenceListener",
    "DiffReport",
    "format_differences",
    # Values and paths
    "Node",
    "NodeType",
    "MISSING",
    "read_json",
    "to_node",
    "Path",
    "ROOT",
    "PathMatcher",
    "SimplePathMatcher",
    "AggregatePathMatcher",
    # Errors
    "JsonUnitError",
    "PathSyntaxError",
    "InvalidJsonPathError",
    "UnknownMatcherError",
    "ConfigurationError",
    "UnsupportedValueError",
    "InvalidJsonError",
    # Dataset runner
    "DatasetRunner",
    "GlobalReport",
    "ScenarioResult",
    "load_configuration",
    "run_datasets",
]
