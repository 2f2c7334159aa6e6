"""
envvault security package public API.

File: src/envvault/security/__init__.py
Last updated: 2026-10-19

Purpose
- Export redaction helpers used by diffs, logging, and display code.
"""

from envvault.security.redaction import (
    DEFAULT_SENSITIVE_KEY_DENYLIST,
    REDACTED_VALUE,
    is_sensitive_key,
    redact_config,
    redact_text,
    redact_value,
)

__all__ = [
    "DEFAULT_SENSITIVE_KEY_DENYLIST",
    "REDACTED_VALUE",
    "is_sensitive_key",
    "redact_config",
    "redact_text",
    "redact_value",
]
