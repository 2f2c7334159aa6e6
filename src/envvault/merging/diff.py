"""
envvault — structural diff between configuration objects

File: src/envvault/merging/diff.py
Last updated: 2026-10-19

Purpose
- Classify every key of two configuration objects as added, removed, modified, or
  unchanged, using structural (not identity) equality.

Functional requirements
- The four groups are pairwise disjoint and together cover ``keys(a) | keys(b)``.
- ``DiffResult.to_dict`` renders the wire shape consumed by the CLI ``diff`` command
  and the HTTP diff endpoint.
- Change records (add/update/delete) derived from a diff feed change listeners.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from envvault.security.redaction import REDACTED_VALUE
from envvault.values import deep_equal

ChangeAction = Literal["add", "update", "delete"]


@dataclass(frozen=True, slots=True)
class ModifiedEntry:
    key: str
    from_value: Any
    to_value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "from": self.from_value, "to": self.to_value}


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Partition of the union of two key sets."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    modified: tuple[ModifiedEntry, ...] = ()
    unchanged: tuple[str, ...] = ()

    @property
    def modified_keys(self) -> tuple[str, ...]:
        return tuple(entry.key for entry in self.modified)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    @property
    def is_empty(self) -> bool:
        """True when both sides had no keys at all."""

        return not (self.has_changes or self.unchanged)

    def keys(self) -> set[str]:
        return {*self.added, *self.removed, *self.modified_keys, *self.unchanged}

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "modified": [entry.to_dict() for entry in self.modified],
            "unchanged": list(self.unchanged),
        }

    def redacted(self, secret_fields: Iterable[str]) -> DiffResult:
        """Return a copy whose modified entries hide the values of ``secret_fields``."""

        secrets = set(secret_fields)
        modified = tuple(
            ModifiedEntry(entry.key, REDACTED_VALUE, REDACTED_VALUE)
            if entry.key in secrets
            else entry
            for entry in self.modified
        )
        return DiffResult(
            added=self.added,
            removed=self.removed,
            modified=modified,
            unchanged=self.unchanged,
        )


@dataclass(frozen=True, slots=True)
class ConfigChange:
    """One key-level change, as delivered to configuration change listeners."""

    key: str
    action: ChangeAction
    old_value: Any = None
    new_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"key": self.key, "action": self.action}
        if self.action != "add":
            out["oldValue"] = self.old_value
        if self.action != "delete":
            out["newValue"] = self.new_value
        return out


def diff(from_config: Mapping[str, Any], to_config: Mapping[str, Any]) -> DiffResult:
    """Compare two configuration objects key by key.

    Keys are reported in first-seen order: keys of ``from_config`` first, then keys
    only present in ``to_config``.
    """

    added: list[str] = []
    removed: list[str] = []
    modified: list[ModifiedEntry] = []
    unchanged: list[str] = []

    all_keys = list(from_config)
    all_keys.extend(key for key in to_config if key not in from_config)

    for key in all_keys:
        in_from = key in from_config
        in_to = key in to_config
        if not in_from:
            added.append(key)
        elif not in_to:
            removed.append(key)
        elif deep_equal(from_config[key], to_config[key]):
            unchanged.append(key)
        else:
            modified.append(
                ModifiedEntry(
                    key,
                    copy.deepcopy(from_config[key]),
                    copy.deepcopy(to_config[key]),
                )
            )

    return DiffResult(
        added=tuple(added),
        removed=tuple(removed),
        modified=tuple(modified),
        unchanged=tuple(unchanged),
    )


def changes_from_diff(
    result: DiffResult,
    from_config: Mapping[str, Any],
    to_config: Mapping[str, Any],
) -> list[ConfigChange]:
    """Expand a diff into change records: additions, then deletions, then updates."""

    changes = [ConfigChange(key, "add", new_value=to_config[key]) for key in result.added]
    changes.extend(
        ConfigChange(key, "delete", old_value=from_config[key]) for key in result.removed
    )
    changes.extend(
        ConfigChange(entry.key, "update", old_value=entry.from_value, new_value=entry.to_value)
        for entry in result.modified
    )
    return changes


__all__ = [
    "ChangeAction",
    "ConfigChange",
    "DiffResult",
    "ModifiedEntry",
    "changes_from_diff",
    "diff",
]
