"""Per-type value checks shared by schema construction (defaults) and validation."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from envvault.values import JSONValue, describe_kind, is_json_value

if TYPE_CHECKING:
    from envvault.schema.fields import FieldSpec


def check_value(spec: FieldSpec, value: object) -> list[str]:
    """Return every constraint violation of ``value`` against ``spec`` (empty when valid)."""

    if spec.type == "string":
        return _check_string(spec, value)
    if spec.type == "number":
        return _check_number(spec, value)
    if spec.type == "boolean":
        if isinstance(value, bool):
            return []
        return [f"expected boolean, got {describe_kind(value)}"]
    if is_json_value(value):
        return []
    return [f"expected JSON value, got {type(value).__name__}"]


def _check_string(spec: FieldSpec, value: object) -> list[str]:
    if not isinstance(value, str):
        return [f"expected string, got {describe_kind(value)}"]

    # enum membership supersedes pattern/length constraints
    if spec.enum is not None:
        return _check_enum(spec.enum, value)

    messages: list[str] = []
    if spec.pattern is not None and spec.pattern.fullmatch(value) is None:
        messages.append(f"does not match pattern {spec.pattern.pattern!r}")
    if spec.min_length is not None and len(value) < spec.min_length:
        messages.append(f"length must be >= {spec.min_length}")
    if spec.max_length is not None and len(value) > spec.max_length:
        messages.append(f"length must be <= {spec.max_length}")
    return messages


def _check_number(spec: FieldSpec, value: object) -> list[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return [f"expected number, got {describe_kind(value)}"]
    if not math.isfinite(value):
        return ["must be finite"]

    messages: list[str] = []
    if spec.enum is not None:
        messages.extend(_check_enum(spec.enum, value))
    if spec.minimum is not None and value < spec.minimum:
        messages.append(f"must be >= {_render_bound(spec.minimum)}")
    if spec.maximum is not None and value > spec.maximum:
        messages.append(f"must be <= {_render_bound(spec.maximum)}")
    return messages


def _check_enum(allowed: tuple[JSONValue, ...], value: str | int | float) -> list[str]:
    if value in allowed:
        return []
    expected = ", ".join(repr(item) for item in allowed)
    return [f"invalid value {value!r}; expected one of: {expected}"]


def _render_bound(bound: float) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


__all__ = ["check_value"]
