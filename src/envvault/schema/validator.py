"""
envvault — schema-driven configuration validator

File: src/envvault/schema/validator.py
Last updated: 2026-10-19

Purpose
- Type-check configuration objects against a ``Schema`` and expose the schema's
  required/secret field sets and default values.

Functional requirements
- Validation is total: every declared field is checked and every violation is returned.
- Validation failures are data (``ValidationResult``), never exceptions.
- Absent optional fields take their default when one is declared.
- Unknown fields are accepted unless the validator is built in strict mode.

Non-functional requirements
- Deterministic error ordering: schema declaration order, then unknown keys in input order.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from envvault.errors import ConfigValidationError, Issue
from envvault.schema.checks import check_value
from envvault.schema.fields import MISSING, Schema
from envvault.values import ConfigObject, describe_kind


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One validation failure for one field.

    ``value`` is ``MISSING`` when the field was absent rather than invalid.
    """

    field: str
    message: str
    value: Any = MISSING

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.has_value:
            out["value"] = self.value
        return out


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a config object.

    ``config`` holds the normalized object (defaults substituted) when valid.
    """

    valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    config: ConfigObject | None = field(default=None, compare=False)

    def errors_for(self, name: str) -> tuple[ValidationIssue, ...]:
        return tuple(error for error in self.errors if error.field == name)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": [error.to_dict() for error in self.errors]}


class SchemaValidator:
    """Validate configuration objects against an immutable schema."""

    def __init__(
        self,
        schema: Schema | Mapping[str, object],
        *,
        allow_unknown_fields: bool = True,
    ) -> None:
        self._schema = schema if isinstance(schema, Schema) else Schema.from_mapping(schema)
        self._allow_unknown_fields = allow_unknown_fields

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def allow_unknown_fields(self) -> bool:
        return self._allow_unknown_fields

    def validate(self, config: Mapping[str, object] | object) -> ValidationResult:
        if not isinstance(config, Mapping):
            issue = ValidationIssue("<root>", f"expected object, got {describe_kind(config)}")
            return ValidationResult(valid=False, errors=(issue,))

        errors: list[ValidationIssue] = []
        normalized: ConfigObject = {}

        for name, spec in self._schema.items():
            if name not in config:
                if spec.required:
                    errors.append(ValidationIssue(name, "missing required field"))
                elif spec.has_default:
                    normalized[name] = spec.default_value()
                continue

            value = config[name]
            for message in check_value(spec, value):
                errors.append(ValidationIssue(name, message, value))
            normalized[name] = copy.deepcopy(value)

        for name, value in config.items():
            if name in self._schema:
                continue
            if not self._allow_unknown_fields:
                errors.append(ValidationIssue(str(name), "unknown field", value))
                continue
            if isinstance(name, str):
                normalized[name] = copy.deepcopy(value)

        if errors:
            return ValidationResult(valid=False, errors=tuple(errors))
        return ValidationResult(valid=True, errors=(), config=normalized)

    def validate_field(self, name: str, value: object) -> ValidationResult:
        """Validate ``value`` as the only override on top of every schema default."""

        if name not in self._schema:
            issue = ValidationIssue(name, "field is not defined in schema", value)
            return ValidationResult(valid=False, errors=(issue,))

        candidate = self.defaults()
        candidate[name] = value
        relevant = self.validate(candidate).errors_for(name)
        if relevant:
            return ValidationResult(valid=False, errors=relevant)
        return ValidationResult(valid=True, errors=(), config={name: copy.deepcopy(value)})

    def assert_valid(self, config: Mapping[str, object] | object) -> ConfigObject:
        """Validate and raise ``ConfigValidationError`` on failure."""

        result = self.validate(config)
        if result.config is None:
            raise ConfigValidationError(
                [Issue(error.field, error.message) for error in result.errors]
            )
        return result.config

    def required_fields(self) -> list[str]:
        return [name for name, spec in self._schema.items() if spec.required]

    def secret_fields(self) -> list[str]:
        return [name for name, spec in self._schema.items() if spec.secret]

    def defaults(self) -> ConfigObject:
        return {
            name: spec.default_value() for name, spec in self._schema.items() if spec.has_default
        }


__all__ = ["SchemaValidator", "ValidationIssue", "ValidationResult"]
