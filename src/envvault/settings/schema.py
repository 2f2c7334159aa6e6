"""
envvault — engine settings schema and validation.

File: src/envvault/settings/schema.py
Last updated: 2026-10-19

Purpose
- Define authoritative defaults for ``envvault.toml`` and strict validation rules.

What should be included in this file
- Schema versioning and migration guidance.
- Validation rules for types, enums, and numeric constraints per section.
- Rejection of unknown keys and of embedded secrets.

Functional requirements
- Validate settings payloads and return structured errors (dotted path + message).
- A passphrase is runtime input only; any secret-looking key in the file is an error.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from envvault.constants import SCRYPT_N, SCRYPT_P, SCRYPT_R, SETTINGS_SCHEMA_VERSION
from envvault.errors import Issue, SettingsValidationError
from envvault.merging import merge
from envvault.security.redaction import is_sensitive_key

SettingsValidationIssue = Issue

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")

_HEX_PATTERN = re.compile(r"^(?:[0-9a-fA-F]{2})+$")


class MetaSettings(TypedDict):
    schema_version: int


class CryptoSettings(TypedDict):
    kdf_salt: str
    scrypt_n: int
    scrypt_r: int
    scrypt_p: int
    legacy_salt: bool


class ValidationSettings(TypedDict):
    allow_unknown_fields: bool


class ObservabilitySettings(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_format: Literal["json", "text"]
    redact_secrets: bool


class EnvVaultSettings(TypedDict):
    meta: MetaSettings
    crypto: CryptoSettings
    validation: ValidationSettings
    observability: ObservabilitySettings


DEFAULT_SETTINGS: Final[EnvVaultSettings] = {
    "meta": {
        "schema_version": SETTINGS_SCHEMA_VERSION,
    },
    "crypto": {
        "kdf_salt": "",
        "scrypt_n": SCRYPT_N,
        "scrypt_r": SCRYPT_R,
        "scrypt_p": SCRYPT_P,
        "legacy_salt": False,
    },
    "validation": {
        "allow_unknown_fields": True,
    },
    "observability": {
        "log_level": "INFO",
        "log_format": "json",
        "redact_secrets": True,
    },
}


@dataclass(frozen=True, slots=True)
class SettingsValidationResult:
    """Validation result with normalized settings when no issues were found."""

    settings: dict[str, Any] | None
    issues: tuple[Issue, ...]

    @property
    def is_valid(self) -> bool:
        return self.settings is not None and not self.issues


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Issue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(Issue(path=path, message=message))

    def items(self) -> tuple[Issue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


_Validator = Callable[[dict[str, object], str, _IssueCollector], dict[str, Any]]


def default_settings() -> dict[str, Any]:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(dict(DEFAULT_SETTINGS))


def migration_guidance(found_version: int) -> str:
    if found_version < SETTINGS_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is older than supported {SETTINGS_SCHEMA_VERSION}; "
            "upgrade envvault.toml to the current schema"
        )
    if found_version > SETTINGS_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is newer than supported {SETTINGS_SCHEMA_VERSION}; "
            "upgrade envvault"
        )
    return "schema version is current"


def merge_settings(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base``; nested sections merge key-wise."""

    return merge(base, overlay)


def validate_settings(settings: Mapping[str, object] | object) -> SettingsValidationResult:
    """Validate a complete settings payload and return structured issues."""

    issues = _IssueCollector()
    root = _as_object(settings, "<root>", issues)
    if root is None:
        return SettingsValidationResult(settings=None, issues=issues.items())

    sections: dict[str, _Validator] = {
        "meta": _validate_meta,
        "crypto": _validate_crypto,
        "validation": _validate_validation,
        "observability": _validate_observability,
    }
    _reject_unknown_keys(root, set(sections), "", issues)

    normalized: dict[str, Any] = {}
    for key, validator in sections.items():
        if key not in root:
            issues.add(key, "missing required section")
            continue
        section = _as_object(root[key], key, issues)
        if section is not None:
            normalized[key] = validator(section, key, issues)

    if issues.has_issues:
        return SettingsValidationResult(settings=None, issues=issues.items())
    return SettingsValidationResult(settings=normalized, issues=())


def assert_valid_settings(settings: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate settings and raise ``SettingsValidationError`` on failure."""

    result = validate_settings(settings)
    if result.settings is None:
        raise SettingsValidationError(result.issues)
    return result.settings


def _validate_meta(payload: dict[str, object], path: str, issues: _IssueCollector) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"schema_version"}, path, issues)
    _require_keys(payload, {"schema_version"}, path, issues)

    out: dict[str, Any] = {}
    if "schema_version" in payload:
        parsed = _as_int(payload["schema_version"], _join(path, "schema_version"), issues, minimum=1)
        if parsed is not None:
            out["schema_version"] = parsed
            if parsed != SETTINGS_SCHEMA_VERSION:
                issues.add(_join(path, "schema_version"), migration_guidance(parsed))
    return out


def _validate_crypto(
    payload: dict[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"kdf_salt", "scrypt_n", "scrypt_r", "scrypt_p", "legacy_salt"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "kdf_salt" in payload:
        salt = payload["kdf_salt"]
        salt_path = _join(path, "kdf_salt")
        if not isinstance(salt, str):
            issues.add(salt_path, f"expected string, got {type(salt).__name__}")
        elif salt.strip() and not _HEX_PATTERN.fullmatch(salt.strip()):
            issues.add(salt_path, "must be a hex string")
        else:
            out["kdf_salt"] = salt.strip().lower()

    if "scrypt_n" in payload:
        n_path = _join(path, "scrypt_n")
        parsed_n = _as_int(payload["scrypt_n"], n_path, issues, minimum=2)
        if parsed_n is not None:
            if parsed_n & (parsed_n - 1):
                issues.add(n_path, "must be a power of two")
            else:
                out["scrypt_n"] = parsed_n

    for key in ("scrypt_r", "scrypt_p"):
        if key in payload:
            parsed = _as_int(payload[key], _join(path, key), issues, minimum=1)
            if parsed is not None:
                out[key] = parsed

    if "legacy_salt" in payload:
        parsed_legacy = _as_bool(payload["legacy_salt"], _join(path, "legacy_salt"), issues)
        if parsed_legacy is not None:
            out["legacy_salt"] = parsed_legacy

    if out.get("legacy_salt") and out.get("kdf_salt"):
        issues.add(_join(path, "legacy_salt"), "cannot be enabled together with kdf_salt")

    return out


def _validate_validation(
    payload: dict[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"allow_unknown_fields"}, path, issues)
    _require_keys(payload, {"allow_unknown_fields"}, path, issues)

    out: dict[str, Any] = {}
    if "allow_unknown_fields" in payload:
        parsed = _as_bool(
            payload["allow_unknown_fields"], _join(path, "allow_unknown_fields"), issues
        )
        if parsed is not None:
            out["allow_unknown_fields"] = parsed
    return out


def _validate_observability(
    payload: dict[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    allowed = {"log_level", "log_format", "redact_secrets"}
    _reject_unknown_keys(payload, allowed, path, issues)
    _require_keys(payload, allowed, path, issues)

    out: dict[str, Any] = {}
    if "log_level" in payload:
        level = payload["log_level"]
        parsed_level = _as_enum(
            level.upper() if isinstance(level, str) else level,
            _join(path, "log_level"),
            issues,
            allowed_values=LOG_LEVELS,
        )
        if parsed_level is not None:
            out["log_level"] = parsed_level

    if "log_format" in payload:
        parsed_format = _as_enum(
            payload["log_format"], _join(path, "log_format"), issues, allowed_values=LOG_FORMATS
        )
        if parsed_format is not None:
            out["log_format"] = parsed_format

    if "redact_secrets" in payload:
        parsed_redact = _as_bool(payload["redact_secrets"], _join(path, "redact_secrets"), issues)
        if parsed_redact is not None:
            out["redact_secrets"] = parsed_redact
    return out


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_int(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    minimum: int | None = None,
) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    if minimum is not None and value < minimum:
        issues.add(path, f"must be >= {minimum}")
        return None
    return value


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key in allowed:
            continue
        key_path = _join(path, key)
        if is_sensitive_key(key):
            issues.add(
                key_path,
                "embedded secret values are forbidden; supply the passphrase at runtime",
            )
        else:
            issues.add(key_path, "unknown field")


def _require_keys(
    payload: Mapping[str, object],
    required: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(required):
        if key not in payload:
            issues.add(_join(path, key), "missing required field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "DEFAULT_SETTINGS",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "CryptoSettings",
    "EnvVaultSettings",
    "MetaSettings",
    "ObservabilitySettings",
    "SettingsValidationIssue",
    "SettingsValidationResult",
    "ValidationSettings",
    "assert_valid_settings",
    "default_settings",
    "merge_settings",
    "migration_guidance",
    "validate_settings",
]
