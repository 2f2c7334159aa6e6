"""
envvault — key material and key derivation

File: src/envvault/crypto/keys.py
Last updated: 2026-10-19

Purpose
- Derive 256-bit AES keys from passphrases with scrypt and generate random key material.

Functional requirements
- Derivation uses a per-installation random salt; the historical fixed salt is only
  used when a caller asks for it explicitly to read values written by older installs.
- ``KeyMaterial`` is immutable and never renders the key bytes in ``repr``.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from envvault.constants import KEY_LENGTH, SALT_LENGTH, SCRYPT_N, SCRYPT_P, SCRYPT_R
from envvault.errors import InvalidKeyError


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """A derived AES-256 key together with the salt it was derived with."""

    key: bytes = field(repr=False)
    salt: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.key, bytes) or len(self.key) != KEY_LENGTH:
            raise InvalidKeyError(f"key must be exactly {KEY_LENGTH} bytes")

    @property
    def salt_hex(self) -> str:
        return self.salt.hex()


def derive_key(
    passphrase: str,
    salt: bytes,
    *,
    n: int = SCRYPT_N,
    r: int = SCRYPT_R,
    p: int = SCRYPT_P,
) -> KeyMaterial:
    """Derive a 32-byte key from ``passphrase`` with scrypt."""

    if not isinstance(passphrase, str) or not passphrase:
        raise InvalidKeyError("passphrase must be a non-empty string")
    if not isinstance(salt, bytes) or not salt:
        raise InvalidKeyError("salt must be non-empty bytes")

    try:
        kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=n, r=r, p=p)
        derived = kdf.derive(passphrase.encode("utf-8"))
    except ValueError as exc:
        raise InvalidKeyError(f"invalid scrypt parameters: {exc}") from exc
    return KeyMaterial(key=derived, salt=salt)


def generate_key() -> str:
    """Return 256 bits of fresh randomness as 64 hex characters."""

    return secrets.token_bytes(KEY_LENGTH).hex()


def generate_salt() -> bytes:
    return secrets.token_bytes(SALT_LENGTH)


def salt_from_hex(text: str) -> bytes:
    """Decode a persisted hex salt, raising ``InvalidKeyError`` when malformed."""

    try:
        salt = bytes.fromhex(text.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidKeyError("salt must be a hex string") from exc
    if not salt:
        raise InvalidKeyError("salt must not be empty")
    return salt


__all__ = ["KeyMaterial", "derive_key", "generate_key", "generate_salt", "salt_from_hex"]
