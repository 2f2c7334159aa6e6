"""
envvault crypto package public API.

File: src/envvault/crypto/__init__.py
Last updated: 2026-10-19

Purpose
- Export the envelope-encryption engine, key derivation helpers, and prefix detection.
"""

from envvault.crypto.engine import CryptoEngine, is_encrypted
from envvault.crypto.keys import KeyMaterial, derive_key, generate_key, generate_salt, salt_from_hex

__all__ = [
    "CryptoEngine",
    "KeyMaterial",
    "derive_key",
    "generate_key",
    "generate_salt",
    "is_encrypted",
    "salt_from_hex",
]
