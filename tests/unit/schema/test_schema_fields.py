"""
envvault — unit tests for schema construction

File: tests/unit/schema/test_schema_fields.py
Last updated: 2026-10-19

Purpose
- Validate that malformed schema definitions are rejected up front with every
  problem reported at once.

What this test file should cover
- Attribute aliases (camelCase on disk, snake_case in Python).
- Unknown types/attributes, invalid regex, inverted bounds, bad enums, bad defaults.
- Immutability of the constructed schema and its round trip to the on-disk shape.
"""

from __future__ import annotations

import pytest

from envvault.errors import SchemaConstructionError
from envvault.schema import FieldSpec, Schema


def _issue_paths(excinfo: pytest.ExceptionInfo[SchemaConstructionError]) -> list[str]:
    return [issue.path for issue in excinfo.value.issues]


def test_camel_case_and_snake_case_attributes_are_equivalent() -> None:
    camel = FieldSpec.from_mapping("NAME", {"type": "string", "minLength": 2, "maxLength": 5})
    snake = FieldSpec.from_mapping("NAME", {"type": "string", "min_length": 2, "max_length": 5})

    assert camel == snake
    assert camel.min_length == 2
    assert camel.max_length == 5


def test_schema_is_an_ordered_read_only_mapping() -> None:
    schema = Schema.from_mapping({"B": {"type": "string"}, "A": {"type": "number"}})

    assert list(schema) == ["B", "A"]
    assert len(schema) == 2
    assert schema["A"].type == "number"
    with pytest.raises(TypeError):
        schema._fields["C"] = schema["A"]  # type: ignore[index]


def test_to_dict_renders_on_disk_keys() -> None:
    raw = {
        "PORT": {"type": "number", "default": 3306, "min": 1, "max": 65535},
        "TOKEN": {
            "type": "string",
            "required": True,
            "secret": True,
            "pattern": "[a-f0-9]+",
            "minLength": 4,
            "description": "API token",
        },
    }

    assert Schema.from_mapping(raw).to_dict() == raw


def test_unknown_type_is_rejected() -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping({"X": {"type": "integer"}})

    assert _issue_paths(excinfo) == ["X.type"]
    assert "unknown field type 'integer'" in str(excinfo.value)


def test_all_problems_are_collected_in_one_error() -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping(
            {
                "A": {"type": "string", "pattern": "("},
                "B": {"type": "number", "min": 10, "max": 1},
                "C": {"type": "string", "minLength": -1},
                "D": {"type": "boolean", "colour": "blue"},
            }
        )

    assert _issue_paths(excinfo) == ["A.pattern", "B.min", "C.minLength", "D.colour"]
    assert excinfo.value.code.value == "E4004"


def test_type_specific_attributes_on_wrong_type_are_rejected() -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping({"FLAG": {"type": "boolean", "min": 1, "pattern": "x"}})

    assert sorted(_issue_paths(excinfo)) == ["FLAG.minimum", "FLAG.pattern"]


@pytest.mark.parametrize(
    ("definition", "path"),
    [
        ({"type": "string", "enum": []}, "E.enum"),
        ({"type": "string", "enum": "abc"}, "E.enum"),
        ({"type": "string", "enum": ["a", 1]}, "E.enum"),
        ({"type": "boolean", "enum": [True]}, "E.enum"),
    ],
)
def test_invalid_enums_are_rejected(definition: dict[str, object], path: str) -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping({"E": definition})

    assert _issue_paths(excinfo) == [path]


def test_default_must_satisfy_its_own_field() -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping({"PORT": {"type": "number", "default": 0, "min": 1}})

    assert _issue_paths(excinfo) == ["PORT.default"]
    assert "must be >= 1" in str(excinfo.value)


def test_flags_must_be_booleans() -> None:
    with pytest.raises(SchemaConstructionError) as excinfo:
        Schema.from_mapping({"X": {"type": "string", "required": "yes"}})

    assert _issue_paths(excinfo) == ["X.required"]


def test_non_mapping_root_is_rejected() -> None:
    with pytest.raises(SchemaConstructionError):
        Schema.from_mapping(["not", "a", "schema"])


def test_default_value_is_a_private_copy() -> None:
    spec = FieldSpec.from_mapping("F", {"type": "json", "default": {"a": [1]}})

    spec.default_value()["a"].append(2)

    assert spec.default == {"a": [1]}
    assert spec.has_default is True
