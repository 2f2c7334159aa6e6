"""
envvault — field specifications and schema construction

File: src/envvault/schema/fields.py
Last updated: 2026-10-19

Purpose
- Parse raw schema definitions (as read from JSON/YAML) into immutable ``FieldSpec``
  values and an immutable ``Schema`` mapping.

What should be included in this file
- Key normalization between on-disk camelCase (``minLength``) and Python names.
- Construction-time checks: unknown type, invalid regex, inconsistent bounds, bad enum,
  defaults that violate their own field spec.

Functional requirements
- Malformed definitions fail fast with ``SchemaConstructionError`` listing every issue.
- A built ``Schema`` cannot be mutated; rebuilding is the only way to change it.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

from envvault.constants import FIELD_TYPES
from envvault.errors import Issue, SchemaConstructionError
from envvault.schema.checks import check_value
from envvault.values import JSONValue, describe_kind, is_json_value


class _Missing:
    """Sentinel for an absent default (``None`` is a legitimate default)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_KEY_ALIASES: Final[dict[str, str]] = {
    "type": "type",
    "required": "required",
    "default": "default",
    "secret": "secret",
    "description": "description",
    "pattern": "pattern",
    "minLength": "min_length",
    "min_length": "min_length",
    "maxLength": "max_length",
    "max_length": "max_length",
    "min": "minimum",
    "minimum": "minimum",
    "max": "maximum",
    "maximum": "maximum",
    "enum": "enum",
}

_STRING_ONLY: Final[tuple[str, ...]] = ("pattern", "min_length", "max_length")
_NUMBER_ONLY: Final[tuple[str, ...]] = ("minimum", "maximum")


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Contract for one configuration key."""

    name: str
    type: str
    required: bool = False
    default: Any = MISSING
    secret: bool = False
    description: str | None = None
    pattern: re.Pattern[str] | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    enum: tuple[JSONValue, ...] | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def default_value(self) -> Any:
        """Return a private copy of the default so callers cannot mutate the field definition."""

        return copy.deepcopy(self.default)

    def to_dict(self) -> dict[str, Any]:
        """Render the definition back into its on-disk JSON shape."""

        out: dict[str, Any] = {"type": self.type}
        if self.required:
            out["required"] = True
        if self.has_default:
            out["default"] = copy.deepcopy(self.default)
        if self.secret:
            out["secret"] = True
        if self.description is not None:
            out["description"] = self.description
        if self.pattern is not None:
            out["pattern"] = self.pattern.pattern
        if self.min_length is not None:
            out["minLength"] = self.min_length
        if self.max_length is not None:
            out["maxLength"] = self.max_length
        if self.minimum is not None:
            out["min"] = self.minimum
        if self.maximum is not None:
            out["max"] = self.maximum
        if self.enum is not None:
            out["enum"] = list(self.enum)
        return out

    @classmethod
    def from_mapping(cls, name: str, raw: object) -> FieldSpec:
        """Build one field spec, raising ``SchemaConstructionError`` on any problem."""

        issues: list[Issue] = []
        spec = _build_field(name, raw, issues)
        if issues or spec is None:
            raise SchemaConstructionError(issues)
        return spec


@dataclass(frozen=True, eq=False)
class Schema(Mapping[str, FieldSpec]):
    """Immutable mapping of field name to ``FieldSpec``."""

    _fields: Mapping[str, FieldSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_fields", MappingProxyType(dict(self._fields)))

    def __getitem__(self, key: str) -> FieldSpec:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: spec.to_dict() for name, spec in self._fields.items()}

    @classmethod
    def from_mapping(cls, raw: object) -> Schema:
        """Parse a whole schema definition, collecting every construction issue."""

        issues: list[Issue] = []
        if not isinstance(raw, Mapping):
            raise SchemaConstructionError(
                (Issue("<root>", f"expected object, got {describe_kind(raw)}"),)
            )

        fields: dict[str, FieldSpec] = {}
        for name, definition in raw.items():
            if not isinstance(name, str) or not name.strip():
                issues.append(Issue("<root>", f"field name must be a non-empty string: {name!r}"))
                continue
            spec = _build_field(name, definition, issues)
            if spec is not None:
                fields[name] = spec

        if issues:
            raise SchemaConstructionError(issues)
        return cls(fields)


def _build_field(name: str, raw: object, issues: list[Issue]) -> FieldSpec | None:
    if isinstance(raw, FieldSpec):
        return raw
    if not isinstance(raw, Mapping):
        issues.append(Issue(name, f"field definition must be an object, got {describe_kind(raw)}"))
        return None

    start = len(issues)
    values: dict[str, Any] = {}
    for key in raw:
        canonical = _KEY_ALIASES.get(key) if isinstance(key, str) else None
        if canonical is None:
            issues.append(Issue(f"{name}.{key}", "unknown schema attribute"))
            continue
        values[canonical] = raw[key]

    field_type = values.get("type")
    if field_type not in FIELD_TYPES:
        expected = ", ".join(FIELD_TYPES)
        issues.append(Issue(f"{name}.type", f"unknown field type {field_type!r}; expected one of: {expected}"))
        return None

    required = _flag(values, "required", name, issues)
    secret = _flag(values, "secret", name, issues)

    description = values.get("description")
    if description is not None and not isinstance(description, str):
        issues.append(Issue(f"{name}.description", "must be a string"))
        description = None

    for attr in _STRING_ONLY:
        if attr in values and field_type != "string":
            issues.append(Issue(f"{name}.{attr}", f"only applies to string fields, not {field_type}"))
    for attr in _NUMBER_ONLY:
        if attr in values and field_type != "number":
            issues.append(Issue(f"{name}.{attr}", f"only applies to number fields, not {field_type}"))

    pattern = _compile_pattern(values.get("pattern"), name, issues)
    min_length = _length(values.get("min_length"), f"{name}.minLength", issues)
    max_length = _length(values.get("max_length"), f"{name}.maxLength", issues)
    if min_length is not None and max_length is not None and min_length > max_length:
        issues.append(Issue(f"{name}.minLength", "must not exceed maxLength"))

    minimum = _bound(values.get("minimum"), f"{name}.min", issues)
    maximum = _bound(values.get("maximum"), f"{name}.max", issues)
    if minimum is not None and maximum is not None and minimum > maximum:
        issues.append(Issue(f"{name}.min", "must not exceed max"))

    enum = _enum(values, field_type, name, issues)

    if len(issues) > start:
        return None

    spec = FieldSpec(
        name=name,
        type=field_type,
        required=required,
        default=copy.deepcopy(values["default"]) if "default" in values else MISSING,
        secret=secret,
        description=description,
        pattern=pattern,
        min_length=min_length,
        max_length=max_length,
        minimum=minimum,
        maximum=maximum,
        enum=enum,
    )

    if spec.has_default:
        for message in check_value(spec, spec.default):
            issues.append(Issue(f"{name}.default", message))
        if len(issues) > start:
            return None

    return spec


def _flag(values: Mapping[str, Any], key: str, name: str, issues: list[Issue]) -> bool:
    raw = values.get(key, False)
    if raw is None:
        return False
    if not isinstance(raw, bool):
        issues.append(Issue(f"{name}.{key}", f"expected boolean, got {describe_kind(raw)}"))
        return False
    return raw


def _compile_pattern(raw: object, name: str, issues: list[Issue]) -> re.Pattern[str] | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        issues.append(Issue(f"{name}.pattern", f"expected string, got {describe_kind(raw)}"))
        return None
    try:
        return re.compile(raw)
    except re.error as exc:
        issues.append(Issue(f"{name}.pattern", f"invalid regular expression: {exc}"))
        return None


def _length(raw: object, path: str, issues: list[Issue]) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int):
        issues.append(Issue(path, f"expected integer, got {describe_kind(raw)}"))
        return None
    if raw < 0:
        issues.append(Issue(path, "must be >= 0"))
        return None
    return raw


def _bound(raw: object, path: str, issues: list[Issue]) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        issues.append(Issue(path, f"expected number, got {describe_kind(raw)}"))
        return None
    if not math.isfinite(raw):
        issues.append(Issue(path, "must be finite"))
        return None
    return raw


def _enum(
    values: Mapping[str, Any], field_type: str, name: str, issues: list[Issue]
) -> tuple[JSONValue, ...] | None:
    if "enum" not in values or values["enum"] is None:
        return None
    raw = values["enum"]
    path = f"{name}.enum"
    if field_type not in {"string", "number"}:
        issues.append(Issue(path, f"only applies to string and number fields, not {field_type}"))
        return None
    if not isinstance(raw, (list, tuple)) or not raw:
        issues.append(Issue(path, "must be a non-empty list"))
        return None
    expected_kind = "string" if field_type == "string" else "number"
    for item in raw:
        if not is_json_value(item) or describe_kind(item) != expected_kind:
            issues.append(Issue(path, f"enum members must be {expected_kind}s, got {item!r}"))
            return None
    return tuple(raw)


__all__ = ["MISSING", "FieldSpec", "Schema"]
