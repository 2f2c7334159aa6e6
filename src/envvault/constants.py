"""Stable constants shared by the validator, crypto engine, and settings loader."""

from __future__ import annotations

from typing import Final

# Settings schema version for envvault.toml.
SETTINGS_SCHEMA_VERSION: Final[int] = 1

# Field types accepted by schema definitions.
FIELD_TYPES: Final[tuple[str, ...]] = ("string", "number", "boolean", "json")

# Envelope format: "encrypted:" + base64(iv || tag || ciphertext).
ENCRYPTED_PREFIX: Final[str] = "encrypted:"
KEY_LENGTH: Final[int] = 32
IV_LENGTH: Final[int] = 16
TAG_LENGTH: Final[int] = 16
SALT_LENGTH: Final[int] = 16

# scrypt cost parameters (N, r, p).
SCRYPT_N: Final[int] = 2**14
SCRYPT_R: Final[int] = 8
SCRYPT_P: Final[int] = 1

# Salt used by installations created before per-installation salts existed.
LEGACY_KDF_SALT: Final[bytes] = b"ldesign-env-salt"

__all__ = [
    "ENCRYPTED_PREFIX",
    "FIELD_TYPES",
    "IV_LENGTH",
    "KEY_LENGTH",
    "LEGACY_KDF_SALT",
    "SALT_LENGTH",
    "SCRYPT_N",
    "SCRYPT_P",
    "SCRYPT_R",
    "SETTINGS_SCHEMA_VERSION",
    "TAG_LENGTH",
]
