"""
Value model for data extracted from resource documents.

A resource document is schema-erased JSON-like data. Everything the path
extractor returns is one of the closed set of variants below, so every
condition node can handle each shape explicitly instead of probing Python types.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any

from kubesnoop.core.errors import MalformedResourceError

_TRUTHY_STRINGS = frozenset({"1", "t", "T", "true", "TRUE", "True"})


@dataclass(frozen=True)
class Absent:
    """The path did not resolve to anything."""


@dataclass(frozen=True)
class Null:
    """The path resolved to an explicit JSON null."""


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Array:
    items: tuple["Value", ...] = ()


@dataclass(frozen=True)
class Object:
    fields: dict[str, "Value"] = field(default_factory=dict)


Value = Absent | Null | Bool | Number | String | Array | Object

VALUE_TYPES = (Absent, Null, Bool, Number, String, Array, Object)

ABSENT = Absent()
NULL = Null()


def from_python(data: Any) -> Value:
    """
    Convert plain Python data (as produced by a JSON or YAML parser) into a Value.

    Raises:
        MalformedResourceError: if the data contains something that has no JSON
            representation (non-string keys, NaN, arbitrary objects).
    """
    if data is None:
        return NULL
    # bool before int: bool is an int subclass
    if isinstance(data, bool):
        return Bool(data)
    if isinstance(data, int | float):
        if isinstance(data, float) and not math.isfinite(data):
            raise MalformedResourceError(f"Non-finite number in document: {data!r}")
        try:
            return Number(float(data))
        except OverflowError as e:
            raise MalformedResourceError(f"Number out of range in document: {data!r}") from e
    if isinstance(data, str):
        return String(data)
    if isinstance(data, dict):
        fields: dict[str, Value] = {}
        for key, item in data.items():
            if not isinstance(key, str):
                raise MalformedResourceError(f"Non-string key in document: {key!r}")
            fields[key] = from_python(item)
        return Object(fields)
    if isinstance(data, list | tuple):
        return Array(tuple(from_python(item) for item in data))
    raise MalformedResourceError(f"Unsupported value of type {type(data).__name__}")


def to_python(value: Value) -> Any:
    """Render a Value back to plain Python data. Absent and Null both become None."""
    if isinstance(value, Absent | Null):
        return None
    if isinstance(value, Bool | String):
        return value.value
    if isinstance(value, Number):
        return int(value.value) if value.value.is_integer() else value.value
    if isinstance(value, Array):
        return [to_python(item) for item in value.items]
    return {key: to_python(item) for key, item in value.fields.items()}


def is_truthy(value: Value) -> bool:
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, Number):
        return value.value != 0
    if isinstance(value, String):
        return value.value in _TRUTHY_STRINGS
    return False


def as_string(value: Value) -> str:
    """String form of a value, as compared by string conditions."""
    if isinstance(value, String):
        return value.value
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return _format_number(value.value)
    if isinstance(value, Absent | Null):
        return ""
    return json.dumps(to_python(value), separators=(",", ":"))


def as_number(value: Value) -> float:
    """Numeric form of a value; anything that is not a number reads as 0."""
    if isinstance(value, Number):
        return value.value
    if isinstance(value, Bool):
        return 1.0 if value.value else 0.0
    if isinstance(value, String):
        try:
            number = float(value.value.strip())
        except ValueError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0


def _format_number(number: float) -> str:
    if number.is_integer():
        return str(int(number))
    return repr(number)
