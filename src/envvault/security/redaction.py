"""
envvault — redaction of secrets in configuration objects and log output

File: src/envvault/security/redaction.py
Last updated: 2026-10-19

Purpose
- Mask secret values before a configuration object, a diff, or a log record is rendered.

What should be included in this file
- Sensitive key detection (denylist plus suffix/prefix rules, camelCase aware).
- Text rules for secret-looking substrings and ``encrypted:`` envelopes.
- Deep, non-mutating redaction of nested structures.

Functional requirements
- Fields declared secret by a schema are always masked, whatever their name.
- Encrypted envelopes are masked too; ciphertext is not meant for display.

Non-functional requirements
- Deterministic and idempotent: redacting twice equals redacting once.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final, cast

from envvault.constants import ENCRYPTED_PREFIX

REDACTED_VALUE: Final[str] = "***REDACTED***"

DEFAULT_SENSITIVE_KEY_DENYLIST: Final[frozenset[str]] = frozenset(
    {
        "access_token",
        "api_key",
        "apikey",
        "auth_token",
        "authorization",
        "client_secret",
        "credential",
        "credentials",
        "encryption_key",
        "passphrase",
        "password",
        "passwd",
        "private_key",
        "refresh_token",
        "secret",
        "secret_key",
        "token",
    }
)

_SENSITIVE_KEY_SUFFIXES: Final[tuple[str, ...]] = (
    "_api_key",
    "_access_token",
    "_client_secret",
    "_passphrase",
    "_password",
    "_passwd",
    "_private_key",
    "_secret",
    "_token",
)

_SENSITIVE_KEY_PREFIXES: Final[tuple[str, ...]] = (
    "api_key_",
    "password_",
    "private_key_",
    "secret_",
)

_CAMEL_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class _TextRule:
    name: str
    pattern: re.Pattern[str]
    sensitive_group: int | None = None


_TEXT_RULES: Final[tuple[_TextRule, ...]] = (
    _TextRule(
        name="encrypted_envelope",
        pattern=re.compile(re.escape(ENCRYPTED_PREFIX) + r"[A-Za-z0-9+/=]+"),
    ),
    _TextRule(
        name="private_key_block",
        pattern=re.compile(
            r"-----BEGIN(?: [A-Z0-9]+)* PRIVATE KEY-----"
            r"[\s\S]+?"
            r"-----END(?: [A-Z0-9]+)* PRIVATE KEY-----"
        ),
    ),
    _TextRule(
        name="authorization_bearer",
        pattern=re.compile(r"(?i)(\bauthorization\s*:\s*bearer\s+)([A-Za-z0-9\-._~+/=]{8,})"),
        sensitive_group=2,
    ),
    _TextRule(
        name="explicit_secret_assignment",
        pattern=re.compile(
            r"(?i)(\b(?:password|passwd|passphrase|secret|api[_-]?key|client[_-]?secret|"
            r"access[_-]?token|refresh[_-]?token)\b\s*[:=]\s*[\"']?)"
            r"([A-Za-z0-9._~+/=-]{6,})"
        ),
        sensitive_group=2,
    ),
)


def is_sensitive_key(key: str) -> bool:
    """Return whether ``key`` looks like it names a secret (``DB_PASSWORD``, ``apiKey``)."""

    normalized = _normalize_key(key)
    if not normalized:
        return False
    if normalized in DEFAULT_SENSITIVE_KEY_DENYLIST:
        return True
    if any(normalized.endswith(suffix) for suffix in _SENSITIVE_KEY_SUFFIXES):
        return True
    return any(normalized.startswith(prefix) for prefix in _SENSITIVE_KEY_PREFIXES)


def redact_text(text: str) -> str:
    """Redact secret-like substrings of ``text``."""

    if not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    redacted = text
    for rule in _TEXT_RULES:
        redacted = rule.pattern.sub(lambda match, rule=rule: _replace(match, rule), redacted)
    return redacted


def redact_value(value: object, *, secret_fields: Iterable[str] = ()) -> object:
    """Return a deep-redacted copy of ``value``.

    Mapping keys listed in ``secret_fields`` or matching the sensitive key rules are
    replaced by ``REDACTED_VALUE`` at any depth.
    """

    return _redact(value, secrets=frozenset(secret_fields), seen=set())


def redact_config(
    config: Mapping[str, object], secret_fields: Iterable[str] = ()
) -> dict[str, object]:
    """Redact a top-level configuration object; the input is never mutated."""

    if not isinstance(config, Mapping):
        raise TypeError(f"config must be a mapping, got {type(config).__name__}")
    return cast(dict[str, object], redact_value(config, secret_fields=secret_fields))


def _redact(value: object, *, secrets: frozenset[str], seen: set[int]) -> object:
    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return redact_text(value)

    if isinstance(value, Mapping):
        value_id = id(value)
        if value_id in seen:
            return REDACTED_VALUE
        seen.add(value_id)
        try:
            out: dict[str, object] = {}
            for key, item in value.items():
                key_name = str(key)
                if key_name in secrets or is_sensitive_key(key_name):
                    out[key_name] = REDACTED_VALUE
                else:
                    out[key_name] = _redact(item, secrets=secrets, seen=seen)
            return out
        finally:
            seen.discard(value_id)

    if isinstance(value, (list, tuple)):
        value_id = id(value)
        if value_id in seen:
            return REDACTED_VALUE
        seen.add(value_id)
        try:
            items = [_redact(item, secrets=secrets, seen=seen) for item in value]
        finally:
            seen.discard(value_id)
        return items if isinstance(value, list) else tuple(items)

    return value


def _replace(match: re.Match[str], rule: _TextRule) -> str:
    if rule.sensitive_group is None:
        return REDACTED_VALUE
    full = match.group(0)
    start, end = match.span(rule.sensitive_group)
    offset_start = start - match.start(0)
    offset_end = end - match.start(0)
    return f"{full[:offset_start]}{REDACTED_VALUE}{full[offset_end:]}"


def _normalize_key(key: str) -> str:
    with_boundaries = _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", key.strip())
    return _NON_ALNUM.sub("_", with_boundaries.lower()).strip("_")


__all__ = [
    "DEFAULT_SENSITIVE_KEY_DENYLIST",
    "REDACTED_VALUE",
    "is_sensitive_key",
    "redact_config",
    "redact_text",
    "redact_value",
]
