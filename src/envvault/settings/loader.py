"""
envvault — runtime settings loader.

File: src/envvault/settings/loader.py
Last updated: 2026-10-19

Purpose
- Load effective engine settings from defaults, a TOML file, env vars, and caller overrides.

What should be included in this file
- Precedence logic: overrides > env (ENVVAULT_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and coercion.
- Redacted deterministic dump of effective settings.

Functional requirements
- Reject invalid settings and embedded secrets via schema validation.

Non-functional requirements
- Keep loading deterministic and reproducible.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

from envvault.errors import SettingsLoadError
from envvault.security.redaction import redact_config
from envvault.settings.schema import assert_valid_settings, default_settings, merge_settings

DEFAULT_SETTINGS_FILE: Final[str] = "envvault.toml"
ENV_PREFIX: Final[str] = "ENVVAULT_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

_ValueType = Literal["str", "int", "bool"]


@dataclass(frozen=True, slots=True)
class _Binding:
    path: tuple[str, ...]
    value_type: _ValueType


def load_settings(
    settings_path: str | Path | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load effective settings with deterministic precedence: overrides > env > file > defaults.

    A missing default ``envvault.toml`` is fine; a missing explicit path is an error.
    """

    resolved_path = _resolve_settings_path(settings_path)
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=settings_path is not None)

    merged = merge_settings(default_settings(), file_payload)
    merged = assert_valid_settings(merged)

    merged = merge_settings(merged, _collect_env_overrides(merged, env_map))
    merged = merge_settings(merged, _materialize_overrides(overrides or {}))
    return assert_valid_settings(merged)


def effective_settings(settings: Mapping[str, object]) -> dict[str, Any]:
    """Return a redacted settings representation suitable for logging."""

    return redact_config(settings)


def dump_effective_settings(settings: Mapping[str, object]) -> str:
    return json.dumps(
        effective_settings(settings), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def _resolve_settings_path(settings_path: str | Path | None) -> Path:
    if settings_path is None:
        return (Path.cwd() / DEFAULT_SETTINGS_FILE).resolve()
    return Path(settings_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise SettingsLoadError(f"settings file not found: {path}", context={"path": path})
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsLoadError(f"invalid TOML in {path}: {exc}", context={"path": path}) from exc
    except OSError as exc:
        raise SettingsLoadError(
            f"unable to read settings file {path}: {exc}", context={"path": path}
        ) from exc

    return parsed


def _collect_env_overrides(
    settings: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    bindings = _build_bindings(settings)
    overrides: dict[str, Any] = {}
    for env_name in sorted(bindings):
        raw = environ.get(env_name)
        if raw is None:
            continue
        binding = bindings[env_name]
        value = _coerce_env(raw, binding.value_type, env_name, binding.path)
        _set_nested(overrides, binding.path, value)
    return overrides


def _build_bindings(settings: Mapping[str, object]) -> dict[str, _Binding]:
    bindings: dict[str, _Binding] = {}
    for path, value in _iter_scalar_paths(settings):
        kind = _kind_for_value(value)
        if kind is None:
            continue
        bindings[_env_name_for_path(path)] = _Binding(path=path, value_type=kind)
    return bindings


def _iter_scalar_paths(
    payload: Mapping[str, object],
    prefix: tuple[str, ...] = (),
) -> list[tuple[tuple[str, ...], object]]:
    pairs: list[tuple[tuple[str, ...], object]] = []
    for key in sorted(payload):
        value = payload[key]
        path = (*prefix, key)
        if isinstance(value, Mapping):
            pairs.extend(_iter_scalar_paths(value, path))
        else:
            pairs.append((path, value))
    return pairs


def _kind_for_value(value: object) -> _ValueType | None:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, str):
        return "str"
    return None


def _coerce_env(raw: str, value_type: _ValueType, env_name: str, path: tuple[str, ...]) -> object:
    value = raw.strip()
    if value_type == "str":
        return value
    if value_type == "int":
        try:
            return int(value)
        except ValueError as exc:
            raise SettingsLoadError(f"{env_name} -> {'.'.join(path)} must be an integer") from exc

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise SettingsLoadError(
        f"{env_name} -> {'.'.join(path)} must be a boolean (true/false/1/0/yes/no/on/off)"
    )


def _materialize_overrides(overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(overrides):
        value = overrides[key]
        if "." in key:
            path = tuple(part for part in key.split(".") if part)
            if not path:
                raise SettingsLoadError(f"invalid override key {key!r}")
            _set_nested(payload, path, value)
        else:
            payload = merge_settings(payload, {key: value})
    return payload


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "dump_effective_settings",
    "effective_settings",
    "load_settings",
]
