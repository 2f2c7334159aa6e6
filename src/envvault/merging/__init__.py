"""
envvault merging package public API.

File: src/envvault/merging/__init__.py
Last updated: 2026-10-19

Purpose
- Export deep merge, projection helpers, and structural diff types.
"""

from envvault.merging.diff import (
    ChangeAction,
    ConfigChange,
    DiffResult,
    ModifiedEntry,
    changes_from_diff,
    diff,
)
from envvault.merging.merge import (
    flatten,
    merge,
    merge_except,
    merge_only,
    omit,
    pick,
    unflatten,
)
from envvault.values import deep_equal

__all__ = [
    "ChangeAction",
    "ConfigChange",
    "DiffResult",
    "ModifiedEntry",
    "changes_from_diff",
    "deep_equal",
    "diff",
    "flatten",
    "merge",
    "merge_except",
    "merge_only",
    "omit",
    "pick",
    "unflatten",
]
