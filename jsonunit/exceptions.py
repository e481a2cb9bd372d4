"""Custom exceptions for jsonunit.

Data differences are never raised; these exceptions signal caller misuse
(bad paths, bad configuration, unknown matchers) and abort a comparison
before any difference is reported.
"""


class JsonUnitError(Exception):
    """Base exception for jsonunit errors."""
    pass


class PathSyntaxError(JsonUnitError, ValueError):
    """Raised when path text does not follow the path grammar."""
    def __init__(self, path: str, position: int, reason: str):
        super().__init__(f"Invalid path '{path}' at position {position}: {reason}")
        self.path = path
        self.position = position
        self.reason = reason


class InvalidJsonPathError(JsonUnitError, ValueError):
    """Raised when a JSONPath expression cannot be parsed."""
    def __init__(self, expression: str, reason: str):
        super().__init__(f"Invalid JSONPath expression '{expression}': {reason}")
        self.expression = expression
        self.reason = reason


class UnknownMatcherError(JsonUnitError, KeyError):
    """Raised when ${json-unit.matches:<name>} refers to an unregistered matcher."""
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Matcher \"{self.name}\" not found."


class ConfigurationError(JsonUnitError, ValueError):
    """Raised when configuration values are invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnsupportedValueError(JsonUnitError, TypeError):
    """Raised when a value cannot be represented as a JSON node."""
    def __init__(self, value: object, reason: str = None):
        reason = reason or f"unsupported type {type(value).__name__}"
        super().__init__(f"Cannot convert value to JSON: {reason}")
        self.value = value
        self.reason = reason


class InvalidJsonError(JsonUnitError, ValueError):
    """Raised when JSON text cannot be parsed."""
    def __init__(self, message: str, line: int = None, column: int = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
