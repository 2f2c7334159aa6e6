"""
envvault — deep merge and projection helpers

File: src/envvault/merging/merge.py
Last updated: 2026-10-19

Purpose
- Combine configuration objects for environment inheritance and reshape them
  (pick/omit, flatten/unflatten).

Functional requirements
- ``merge`` is a left-to-right fold: later objects win on collisions; plain nested
  objects merge key-wise; arrays and every other value kind are replaced wholesale.
- No helper mutates its inputs; results share no mutable state with them.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from envvault.values import is_plain_object


def merge(*configs: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``configs`` left to right into a new object."""

    merged: dict[str, Any] = {}
    for config in configs:
        _merge_into(merged, config)
    return merged


def merge_except(
    target: Mapping[str, Any],
    source: Mapping[str, Any],
    exclude_keys: Iterable[str],
) -> dict[str, Any]:
    """Merge ``source`` onto ``target`` but restore ``target``'s value for ``exclude_keys``.

    Excluded keys that ``target`` lacks keep whatever ``source`` supplied.
    """

    merged = merge(target, source)
    for key in exclude_keys:
        if key in target:
            merged[key] = copy.deepcopy(target[key])
    return merged


def merge_only(
    target: Mapping[str, Any],
    source: Mapping[str, Any],
    include_keys: Iterable[str],
) -> dict[str, Any]:
    """Merge only ``include_keys`` from ``source`` onto a copy of ``target``."""

    merged = merge(target)
    _merge_into(merged, {key: source[key] for key in include_keys if key in source})
    return merged


def pick(config: Mapping[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    return {key: copy.deepcopy(config[key]) for key in keys if key in config}


def omit(config: Mapping[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    excluded = set(keys)
    return {key: copy.deepcopy(value) for key, value in config.items() if key not in excluded}


def flatten(
    config: Mapping[str, Any],
    prefix: str = "",
    separator: str = ".",
) -> dict[str, Any]:
    """Collapse nested objects into ``separator``-joined keys.

    Empty nested objects disappear, exactly as they carry no leaf value.
    """

    _require_separator(separator)
    flat: dict[str, Any] = {}
    for key, value in config.items():
        path = f"{prefix}{separator}{key}" if prefix else key
        if is_plain_object(value):
            flat.update(flatten(value, path, separator))
        else:
            flat[path] = copy.deepcopy(value)
    return flat


def unflatten(config: Mapping[str, Any], separator: str = ".") -> dict[str, Any]:
    """Inverse of ``flatten`` for keys that do not contain ``separator`` themselves.

    When a key path passes through an existing leaf (``{"a": 1, "a.b": 2}``) the leaf is
    replaced by a nested object: later keys win.
    """

    _require_separator(separator)
    nested: dict[str, Any] = {}
    for key, value in config.items():
        parts = key.split(separator)
        cursor = nested
        for part in parts[:-1]:
            child = cursor.get(part)
            if not isinstance(child, dict):
                child = {}
                cursor[part] = child
            cursor = child
        cursor[parts[-1]] = copy.deepcopy(value)
    return nested


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if is_plain_object(value) and isinstance(existing, dict):
            _merge_into(existing, value)
        elif is_plain_object(value):
            nested: dict[str, Any] = {}
            _merge_into(nested, value)
            target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


def _require_separator(separator: str) -> None:
    if not isinstance(separator, str) or not separator:
        raise ValueError("separator must be a non-empty string")


__all__ = ["flatten", "merge", "merge_except", "merge_only", "omit", "pick", "unflatten"]
