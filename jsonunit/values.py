"""Value model: a uniform, immutable representation of JSON nodes."""

from __future__ import annotations

import json
import math
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from .exceptions import InvalidJsonError, UnsupportedValueError


class NodeType(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    MISSING = "missing"


class Node:
    """
    An immutable JSON node.

    The payload depends on the node type:
    - OBJECT: read-only mapping of key -> Node (insertion order preserved)
    - ARRAY: tuple of Node
    - STRING: str
    - NUMBER: Decimal (never a float, so no precision is lost)
    - BOOLEAN: bool
    - NULL, MISSING: None

    MISSING stands for "no node at this path" and is distinct from NULL.
    Lookups that fall off the document return MISSING instead of raising.
    """

    __slots__ = ("_type", "_value")

    def __init__(self, node_type: NodeType, value: Any = None):
        object.__setattr__(self, "_type", node_type)
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError("Node is immutable")

    @property
    def type(self) -> NodeType:
        return self._type

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_missing(self) -> bool:
        return self._type is NodeType.MISSING

    @property
    def is_null(self) -> bool:
        return self._type is NodeType.NULL

    @property
    def is_container(self) -> bool:
        return self._type in (NodeType.OBJECT, NodeType.ARRAY)

    def get(self, key: str) -> Node:
        """Return the member node for key, or MISSING."""
        if self._type is not NodeType.OBJECT:
            return MISSING
        return self._value.get(key, MISSING)

    def element(self, index: int) -> Node:
        """
        Return the array element at index, or MISSING.

        A negative index -k resolves to len - k; when k exceeds the
        length the result is MISSING.
        """
        if self._type is not NodeType.ARRAY:
            return MISSING
        if index < 0:
            index += len(self._value)
        if 0 <= index < len(self._value):
            return self._value[index]
        return MISSING

    def keys(self) -> list[str]:
        if self._type is not NodeType.OBJECT:
            return []
        return list(self._value.keys())

    def items(self) -> list[tuple[str, Node]]:
        if self._type is not NodeType.OBJECT:
            return []
        return list(self._value.items())

    def elements(self) -> tuple[Node, ...]:
        if self._type is not NodeType.ARRAY:
            return ()
        return self._value

    def __len__(self) -> int:
        if self.is_container:
            return len(self._value)
        return 0

    def __iter__(self) -> Iterator:
        if self._type is NodeType.OBJECT:
            return iter(self._value.keys())
        return iter(self.elements())

    def __contains__(self, key: object) -> bool:
        return self._type is NodeType.OBJECT and key in self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self._type is not other._type:
            return False
        if self._type is NodeType.OBJECT:
            return dict(self._value) == dict(other._value)
        return self._value == other._value

    __hash__ = None

    def __repr__(self) -> str:
        return f"Node({self.render()})"

    def to_python(self) -> Any:
        """Convert back to plain Python values (numbers stay Decimal)."""
        if self._type is NodeType.OBJECT:
            return {key: node.to_python() for key, node in self._value.items()}
        if self._type is NodeType.ARRAY:
            return [node.to_python() for node in self._value]
        return self._value

    def render(self) -> str:
        """Render as compact JSON text; MISSING renders as 'missing'."""
        if self._type is NodeType.OBJECT:
            members = ",".join(
                f"{_render_string(key)}:{node.render()}"
                for key, node in self._value.items()
            )
            return "{" + members + "}"
        if self._type is NodeType.ARRAY:
            return "[" + ",".join(node.render() for node in self._value) + "]"
        if self._type is NodeType.STRING:
            return _render_string(self._value)
        if self._type is NodeType.NUMBER:
            return render_number(self._value)
        if self._type is NodeType.BOOLEAN:
            return "true" if self._value else "false"
        if self._type is NodeType.NULL:
            return "null"
        return "missing"


_PLAIN_DIGITS = 100


def _render_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def render_number(number: Decimal) -> str:
    """
    Render a number; integral values have no fractional part.

    Integral values with more than _PLAIN_DIGITS digits keep the exponent
    form (1E+5000), which is still valid JSON.
    """
    if number != number.to_integral_value():
        return str(number)
    if not number:
        return "0"
    if number.adjusted() < _PLAIN_DIGITS:
        return format(number.to_integral_value(), "f")

    sign, digits, exponent = number.as_tuple()
    while digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    return str(Decimal((sign, digits, exponent)))


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    else:
        if not math.isfinite(value):
            raise UnsupportedValueError(value, f"non-finite number {value!r}")
        # repr gives the shortest round-tripping text, so 1.1 stays 1.1
        number = Decimal(repr(value))
    if not number.is_finite():
        raise UnsupportedValueError(value, f"non-finite number {value!r}")
    return number


def to_node(value: Any) -> Node:
    """
    Adapt a Python value into a Node tree.

    Accepts dict-like mappings with string keys, lists and tuples, str,
    bool, int, float, Decimal, None and existing Nodes. Bytes are treated
    as JSON text and parsed with read_json.

    Raises:
        UnsupportedValueError: for any other type, non-string keys or
            non-finite numbers
    """
    if isinstance(value, Node):
        return value
    if value is None:
        return NULL
    if isinstance(value, bool):
        return TRUE if value else FALSE
    if isinstance(value, str):
        return Node(NodeType.STRING, value)
    if isinstance(value, (int, float, Decimal)):
        return Node(NodeType.NUMBER, _to_decimal(value))
    if isinstance(value, Mapping):
        members = {}
        for key, member in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(value, f"object key {key!r} is not a string")
            members[key] = to_node(member)
        return Node(NodeType.OBJECT, MappingProxyType(members))
    if isinstance(value, (list, tuple)):
        return Node(NodeType.ARRAY, tuple(to_node(item) for item in value))
    if isinstance(value, (bytes, bytearray)):
        return read_json(value)
    raise UnsupportedValueError(value)


def _reject_constant(name: str):
    raise InvalidJsonError(f"Invalid JSON: {name} is not a valid number")


def read_json(text: str | bytes) -> Node:
    """
    Parse JSON text into a Node tree, keeping numbers as Decimal.

    Raises:
        InvalidJsonError: if the text is not valid JSON
    """
    try:
        data = json.loads(
            text,
            parse_float=Decimal,
            parse_int=Decimal,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise InvalidJsonError(f"Invalid JSON: {e.msg}", line=e.lineno, column=e.colno)
    except UnicodeDecodeError as e:
        raise InvalidJsonError(f"Invalid JSON encoding: {e.reason}")
    return to_node(data)


MISSING = Node(NodeType.MISSING)
NULL = Node(NodeType.NULL)
TRUE = Node(NodeType.BOOLEAN, True)
FALSE = Node(NodeType.BOOLEAN, False)
