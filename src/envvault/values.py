"""
envvault — configuration value kinds

File: src/envvault/values.py
Last updated: 2026-10-19

Purpose
- Name the closed set of value kinds a configuration object may hold and provide
  explicit recursive helpers over them (kind dispatch, structural checks, equality).

Functional requirements
- ``bool`` is never treated as a number.
- Structural equality is order-insensitive for object keys and order-sensitive for arrays.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Literal, TypeAlias

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
ConfigObject: TypeAlias = dict[str, JSONValue]

ValueKind = Literal["string", "number", "boolean", "null", "object", "array"]


def value_kind(value: object) -> ValueKind:
    """Return the tag of ``value``; raise ``TypeError`` for non-configuration values."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    raise TypeError(f"unsupported configuration value type: {type(value).__name__}")


def describe_kind(value: object) -> str:
    """Like ``value_kind`` but never raises; used when rendering error messages."""

    try:
        return value_kind(value)
    except TypeError:
        return type(value).__name__


def is_plain_object(value: object) -> bool:
    return isinstance(value, Mapping)


def is_json_value(value: object) -> bool:
    """Return True when ``value`` is built only from configuration value kinds."""

    if isinstance(value, float):
        return math.isfinite(value)
    if value is None or isinstance(value, (str, int, bool)):
        return True
    if isinstance(value, Mapping):
        return all(isinstance(key, str) and is_json_value(item) for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return all(is_json_value(item) for item in value)
    return False


def deep_equal(left: object, right: object) -> bool:
    """Structural equality over configuration values."""

    if describe_kind(left) != describe_kind(right):
        return False

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right, strict=True))

    return left == right


__all__ = [
    "ConfigObject",
    "JSONScalar",
    "JSONValue",
    "ValueKind",
    "deep_equal",
    "describe_kind",
    "is_json_value",
    "is_plain_object",
    "value_kind",
]
