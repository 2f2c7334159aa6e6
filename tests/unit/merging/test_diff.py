"""
envvault — unit tests for structural config diff

File: tests/unit/merging/test_diff.py
Last updated: 2026-10-19

Purpose
- Validate the added/removed/modified/unchanged partition and its wire shape.

What this test file should cover
- Structural equality (nested objects, arrays, bool vs number).
- First-seen key ordering and the ``to_dict`` shape.
- Change records and redacted diffs.
"""

from __future__ import annotations

import pytest

from envvault.merging import ConfigChange, DiffResult, ModifiedEntry, changes_from_diff, diff
from envvault.security import REDACTED_VALUE

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    HYPOTHESIS_AVAILABLE = False
else:
    HYPOTHESIS_AVAILABLE = True


def test_diff_partitions_keys() -> None:
    result = diff({"A": 1, "B": 2}, {"A": 1, "C": 3})

    assert result == DiffResult(added=("C",), removed=("B",), modified=(), unchanged=("A",))
    assert result.to_dict() == {"added": ["C"], "removed": ["B"], "modified": [], "unchanged": ["A"]}


def test_modified_entries_carry_both_values() -> None:
    result = diff({"PORT": 3306, "HOST": "a"}, {"PORT": 5432, "HOST": "a"})

    assert result.modified == (ModifiedEntry("PORT", 3306, 5432),)
    assert result.to_dict()["modified"] == [{"key": "PORT", "from": 3306, "to": 5432}]


def test_structural_equality_is_used() -> None:
    before = {"obj": {"a": [1, {"b": 2}]}, "num": 1, "flag": True}
    after = {"obj": {"a": [1, {"b": 2}]}, "num": 1.0, "flag": 1}

    result = diff(before, after)

    assert result.unchanged == ("obj", "num")
    assert result.modified_keys == ("flag",)


def test_nested_and_array_changes_are_modifications() -> None:
    result = diff({"o": {"a": 1}, "l": [1, 2]}, {"o": {"a": 2}, "l": [2, 1]})

    assert result.modified_keys == ("o", "l")


def test_key_order_is_first_seen() -> None:
    result = diff({"z": 1, "a": 1, "m": 1}, {"y": 2, "m": 1, "b": 2})

    assert result.removed == ("z", "a")
    assert result.unchanged == ("m",)
    assert result.added == ("y", "b")


def test_empty_and_identity_helpers() -> None:
    assert diff({}, {}).is_empty is True
    assert diff({"a": 1}, {"a": 1}).has_changes is False
    assert diff({"a": 1}, {"a": 1}).is_empty is False
    assert diff({}, {"a": 1}).has_changes is True


def test_modified_values_are_private_copies() -> None:
    before = {"o": {"a": 1}}
    result = diff(before, {"o": {"a": 2}})

    result.modified[0].from_value["a"] = 99

    assert before == {"o": {"a": 1}}


def test_changes_from_diff_orders_add_delete_update() -> None:
    before = {"A": 1, "B": 2}
    after = {"A": 5, "C": 3}

    changes = changes_from_diff(diff(before, after), before, after)

    assert changes == [
        ConfigChange("C", "add", new_value=3),
        ConfigChange("B", "delete", old_value=2),
        ConfigChange("A", "update", old_value=1, new_value=5),
    ]
    assert changes[0].to_dict() == {"key": "C", "action": "add", "newValue": 3}
    assert changes[1].to_dict() == {"key": "B", "action": "delete", "oldValue": 2}


def test_redacted_diff_masks_secret_values() -> None:
    result = diff({"DB_PASSWORD": "old", "PORT": 1}, {"DB_PASSWORD": "new", "PORT": 2})

    redacted = result.redacted(["DB_PASSWORD"])

    assert redacted.modified == (
        ModifiedEntry("DB_PASSWORD", REDACTED_VALUE, REDACTED_VALUE),
        ModifiedEntry("PORT", 1, 2),
    )
    assert result.modified[0].to_value == "new"


def test_property_diff_is_a_partition() -> None:
    if not HYPOTHESIS_AVAILABLE:
        pytest.skip("hypothesis is not installed")

    objects = st.dictionaries(
        st.text(alphabet="abcdef", min_size=1, max_size=2),
        st.one_of(st.integers(min_value=0, max_value=3), st.booleans(), st.none()),
        max_size=6,
    )

    @settings(max_examples=100, deadline=None)
    @given(before=objects, after=objects)
    def _check(before: dict[str, object], after: dict[str, object]) -> None:
        result = diff(before, after)
        groups = [
            set(result.added),
            set(result.removed),
            set(result.modified_keys),
            set(result.unchanged),
        ]
        assert sum(len(group) for group in groups) == len(set(before) | set(after))
        assert set().union(*groups) == set(before) | set(after)

        identity = diff(before, before)
        assert identity.added == identity.removed == identity.modified == ()
        assert set(identity.unchanged) == set(before)

    _check()
