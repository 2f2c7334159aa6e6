"""
envvault — envelope encryption of configuration values

File: src/envvault/crypto/engine.py
Last updated: 2026-10-19

Purpose
- Encrypt and decrypt individual string values with AES-256-GCM and produce the
  self-describing ``encrypted:<base64>`` envelope persisted in environment files.

What should be included in this file
- Single-value encrypt/decrypt, prefix detection, and bulk helpers over config objects.

Functional requirements
- Envelope layout is base64(IV[16] || tag[16] || ciphertext); a fresh IV per call.
- Tampering or a wrong key surfaces as ``DecryptionError`` (indistinguishable causes).
- ``auto_decrypt`` never fails the whole object for one bad field: it logs and keeps
  the stored value.

Non-functional requirements
- An engine is never mutated after construction; switching keys yields a new engine,
  so a shared instance is safe across threads.
- Secret values never appear in log records or error messages.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from collections.abc import Iterable, Mapping
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from envvault.constants import (
    ENCRYPTED_PREFIX,
    IV_LENGTH,
    LEGACY_KDF_SALT,
    SCRYPT_N,
    SCRYPT_P,
    SCRYPT_R,
    TAG_LENGTH,
)
from envvault.crypto.keys import KeyMaterial, derive_key, generate_key, generate_salt, salt_from_hex
from envvault.errors import CryptoError, DecryptionError, EncryptionError, InvalidKeyError, KeyNotSetError

logger = logging.getLogger(__name__)


def is_encrypted(value: object) -> bool:
    """Pure prefix check; does not attempt to decode."""

    return isinstance(value, str) and value.startswith(ENCRYPTED_PREFIX)


class CryptoEngine:
    """Immutable AES-256-GCM engine bound to at most one key."""

    __slots__ = ("_key",)

    def __init__(self, key: KeyMaterial | None = None) -> None:
        self._key = key

    @classmethod
    def from_passphrase(
        cls,
        passphrase: str,
        *,
        salt: bytes | str | None = None,
        legacy_salt: bool = False,
        n: int = SCRYPT_N,
        r: int = SCRYPT_R,
        p: int = SCRYPT_P,
    ) -> CryptoEngine:
        """Derive a key from ``passphrase`` and return an engine bound to it.

        ``salt`` may be raw bytes or the persisted hex form. When omitted a fresh random
        salt is generated; callers must persist ``engine.key.salt_hex`` to decrypt later.
        ``legacy_salt=True`` selects the historical fixed salt instead.
        """

        if legacy_salt and salt is not None:
            raise InvalidKeyError("pass either an explicit salt or legacy_salt=True, not both")

        if legacy_salt:
            resolved = LEGACY_KDF_SALT
        elif salt is None:
            resolved = generate_salt()
            logger.info("derived key with a freshly generated salt; persist it to decrypt later")
        elif isinstance(salt, str):
            resolved = salt_from_hex(salt)
        else:
            resolved = salt

        return cls(derive_key(passphrase, resolved, n=n, r=r, p=p))

    def with_passphrase(self, passphrase: str, **kwargs: Any) -> CryptoEngine:
        """Return a new engine for ``passphrase``; this engine is left untouched."""

        return type(self).from_passphrase(passphrase, **kwargs)

    @property
    def key(self) -> KeyMaterial | None:
        return self._key

    @property
    def has_key(self) -> bool:
        return self._key is not None

    @staticmethod
    def generate_key() -> str:
        return generate_key()

    @staticmethod
    def is_encrypted(value: object) -> bool:
        return is_encrypted(value)

    def encrypt(self, plaintext: str) -> str:
        key = self._require_key()
        if not isinstance(plaintext, str):
            raise TypeError(f"plaintext must be a string, got {type(plaintext).__name__}")

        iv = secrets.token_bytes(IV_LENGTH)
        try:
            sealed = AESGCM(key.key).encrypt(iv, plaintext.encode("utf-8"), None)
        except (ValueError, OverflowError) as exc:
            raise EncryptionError(f"encryption failed: {exc}") from exc

        # AESGCM returns ciphertext || tag; the envelope stores the tag first.
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        payload = base64.b64encode(iv + tag + ciphertext).decode("ascii")
        return f"{ENCRYPTED_PREFIX}{payload}"

    def decrypt(self, ciphertext: str) -> str:
        key = self._require_key()
        if not isinstance(ciphertext, str):
            raise TypeError(f"ciphertext must be a string, got {type(ciphertext).__name__}")

        text = ciphertext[len(ENCRYPTED_PREFIX) :] if is_encrypted(ciphertext) else ciphertext
        try:
            combined = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionError("decryption failed: payload is not valid base64") from exc

        if len(combined) < IV_LENGTH + TAG_LENGTH:
            raise DecryptionError("decryption failed: payload is truncated")

        iv = combined[:IV_LENGTH]
        tag = combined[IV_LENGTH : IV_LENGTH + TAG_LENGTH]
        body = combined[IV_LENGTH + TAG_LENGTH :]
        try:
            plaintext = AESGCM(key.key).decrypt(iv, body + tag, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as exc:
            raise DecryptionError(
                "decryption failed: wrong key or corrupted data"
            ) from exc

    def encrypt_fields(
        self, obj: Mapping[str, Any], field_names: Iterable[str]
    ) -> dict[str, Any]:
        """Return a copy with the listed string fields encrypted.

        Non-string, absent, and already-encrypted values pass through unchanged.
        """

        result = dict(obj)
        for name in field_names:
            value = result.get(name)
            if isinstance(value, str) and not is_encrypted(value):
                result[name] = self.encrypt(value)
        return result

    def decrypt_fields(
        self, obj: Mapping[str, Any], field_names: Iterable[str]
    ) -> dict[str, Any]:
        """Return a copy with the listed encrypted fields decrypted; failures propagate."""

        result = dict(obj)
        for name in field_names:
            value = result.get(name)
            if is_encrypted(value):
                result[name] = self.decrypt(value)
        return result

    def auto_decrypt(self, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Decrypt every field holding an envelope; keep the raw value when one fails.

        An engine without a key passes plain values through and keeps every envelope.
        """

        result = dict(obj)
        for name, value in obj.items():
            if not is_encrypted(value):
                continue
            try:
                result[name] = self.decrypt(value)
            except CryptoError as exc:
                logger.warning(
                    "failed to decrypt field %s; keeping stored value",
                    name,
                    extra={"field": name, "error_code": exc.code.value},
                )
        return result

    def _require_key(self) -> KeyMaterial:
        if self._key is None:
            raise KeyNotSetError()
        return self._key

    def __repr__(self) -> str:
        state = "keyed" if self._key is not None else "unkeyed"
        return f"{type(self).__name__}({state})"


__all__ = ["CryptoEngine", "is_encrypted"]
