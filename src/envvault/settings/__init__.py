"""
envvault settings package public API.

File: src/envvault/settings/__init__.py
Last updated: 2026-10-19

Purpose
- Export settings loading/validation entrypoints and component factories.

Functional requirements
- Support loading from ``envvault.toml`` + ``ENVVAULT_`` env overrides.
- Fail fast with clear structured validation/load errors.

Non-functional requirements
- Keep import-time surface small and deterministic.
"""

from envvault.errors import SettingsLoadError, SettingsValidationError
from envvault.settings.factory import build_engine, build_validator
from envvault.settings.loader import (
    DEFAULT_SETTINGS_FILE,
    ENV_PREFIX,
    dump_effective_settings,
    effective_settings,
    load_settings,
)
from envvault.settings.schema import (
    DEFAULT_SETTINGS,
    EnvVaultSettings,
    SettingsValidationIssue,
    SettingsValidationResult,
    assert_valid_settings,
    default_settings,
    merge_settings,
    migration_guidance,
    validate_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "EnvVaultSettings",
    "SettingsLoadError",
    "SettingsValidationError",
    "SettingsValidationIssue",
    "SettingsValidationResult",
    "assert_valid_settings",
    "build_engine",
    "build_validator",
    "default_settings",
    "dump_effective_settings",
    "effective_settings",
    "load_settings",
    "merge_settings",
    "migration_guidance",
    "validate_settings",
]
