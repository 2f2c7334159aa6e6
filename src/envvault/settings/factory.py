"""
envvault — wiring of loaded settings into engine components.

File: src/envvault/settings/factory.py
Last updated: 2026-10-19

Purpose
- Build a ``CryptoEngine`` and a ``SchemaValidator`` configured from effective settings.

Functional requirements
- The passphrase is runtime input; it is never read from the settings mapping.
- ``crypto.legacy_salt`` selects the historical fixed salt; otherwise ``crypto.kdf_salt``
  must hold the persisted per-installation salt; an empty salt is rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from envvault.crypto import CryptoEngine
from envvault.errors import Issue, SettingsValidationError
from envvault.schema import Schema, SchemaValidator
from envvault.settings.schema import assert_valid_settings


def build_engine(settings: Mapping[str, Any], passphrase: str) -> CryptoEngine:
    """Derive an engine from ``passphrase`` using the ``[crypto]`` settings section."""

    crypto = assert_valid_settings(settings)["crypto"]
    if not crypto["legacy_salt"] and not crypto["kdf_salt"]:
        raise SettingsValidationError(
            [
                Issue(
                    path="crypto.kdf_salt",
                    message=(
                        "a persisted hex salt is required to derive the key; "
                        "generate one with envvault.crypto.generate_salt().hex() "
                        "and store it in envvault.toml"
                    ),
                )
            ]
        )
    return CryptoEngine.from_passphrase(
        passphrase,
        salt=None if crypto["legacy_salt"] else crypto["kdf_salt"],
        legacy_salt=crypto["legacy_salt"],
        n=crypto["scrypt_n"],
        r=crypto["scrypt_r"],
        p=crypto["scrypt_p"],
    )


def build_validator(
    settings: Mapping[str, Any], schema: Schema | Mapping[str, object]
) -> SchemaValidator:
    validation = assert_valid_settings(settings)["validation"]
    return SchemaValidator(schema, allow_unknown_fields=validation["allow_unknown_fields"])


__all__ = ["build_engine", "build_validator"]
