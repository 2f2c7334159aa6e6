"""
envvault — public error taxonomy

File: src/envvault/errors.py
Last updated: 2026-10-19

Purpose
- Define the exception hierarchy raised by the schema, crypto, and settings layers.

Functional requirements
- Every raised error carries a stable ``ErrorCode`` and a small structured context.
- Validation failures of configuration data are *not* exceptions; they are returned
  as ``ValidationResult`` values. Only ``assert_valid`` converts them into
  ``ConfigValidationError``.

Non-functional requirements
- Error messages never include secret values.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable machine-readable codes shared with the CLI and HTTP collaborators."""

    UNKNOWN = "E1000"
    INVALID_ARGUMENT = "E1001"

    CONFIG_VALIDATION_ERROR = "E2003"
    CONFIG_LOAD_ERROR = "E2005"

    SCHEMA_NOT_FOUND = "E4001"
    SCHEMA_PARSE_ERROR = "E4002"
    SCHEMA_INVALID = "E4004"

    ENCRYPTION_KEY_NOT_SET = "E5001"
    ENCRYPTION_FAILED = "E5002"
    DECRYPTION_FAILED = "E5003"
    INVALID_KEY = "E5004"


@dataclass(frozen=True, slots=True)
class Issue:
    """One structured problem: dotted path plus human-readable message."""

    path: str
    message: str


class EnvVaultError(ValueError):
    """Base class for every error raised by envvault."""

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.context: dict[str, Any] = dict(context or {})

    def full_message(self) -> str:
        rendered = f"[{self.code.value}] {self.message}"
        field = self.context.get("field")
        if field:
            rendered += f" (field: {field})"
        path = self.context.get("path")
        if path:
            rendered += f" (file: {path})"
        return rendered

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
            "context": {key: str(value) for key, value in sorted(self.context.items())},
        }


class _IssuesError(EnvVaultError):
    """Error that aggregates several structured issues into one message."""

    headline = "invalid input"

    def __init__(
        self,
        issues: Sequence[Issue],
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"{self.headline}:\n{rendered}", context=context)


# --------------------------------------------------------------------------- schema


class SchemaError(EnvVaultError):
    default_code = ErrorCode.SCHEMA_INVALID


class SchemaConstructionError(_IssuesError, SchemaError):
    """Raised when a schema definition is malformed (unknown type, bad regex, ...)."""

    default_code = ErrorCode.SCHEMA_INVALID
    headline = "invalid schema"


class SchemaLoadError(SchemaError):
    """Raised when a schema file cannot be found, read, or parsed."""

    default_code = ErrorCode.SCHEMA_PARSE_ERROR


class ConfigValidationError(_IssuesError):
    """Raised by ``SchemaValidator.assert_valid`` when a config object is invalid."""

    default_code = ErrorCode.CONFIG_VALIDATION_ERROR
    headline = "invalid config"


# --------------------------------------------------------------------------- crypto


class CryptoError(EnvVaultError):
    default_code = ErrorCode.ENCRYPTION_FAILED


class KeyNotSetError(CryptoError):
    default_code = ErrorCode.ENCRYPTION_KEY_NOT_SET

    def __init__(self) -> None:
        super().__init__(
            "encryption key is not set; build the engine from a passphrase or key first"
        )


class EncryptionError(CryptoError):
    default_code = ErrorCode.ENCRYPTION_FAILED


class DecryptionError(CryptoError):
    """Wrong key and corrupted/tampered ciphertext are deliberately indistinguishable."""

    default_code = ErrorCode.DECRYPTION_FAILED


class InvalidKeyError(CryptoError):
    default_code = ErrorCode.INVALID_KEY


# --------------------------------------------------------------------------- settings


class SettingsValidationError(_IssuesError):
    """Raised when envvault.toml (plus overrides) violates the settings schema."""

    default_code = ErrorCode.CONFIG_VALIDATION_ERROR
    headline = "invalid settings"


class SettingsLoadError(EnvVaultError):
    """Raised when settings cannot be read or an override cannot be coerced."""

    default_code = ErrorCode.CONFIG_LOAD_ERROR


__all__ = [
    "ConfigValidationError",
    "CryptoError",
    "DecryptionError",
    "EncryptionError",
    "EnvVaultError",
    "ErrorCode",
    "InvalidKeyError",
    "Issue",
    "KeyNotSetError",
    "SchemaConstructionError",
    "SchemaError",
    "SchemaLoadError",
    "SettingsLoadError",
    "SettingsValidationError",
]
