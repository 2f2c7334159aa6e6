"""
envvault — unit tests for schema file loading

File: tests/unit/schema/test_schema_loader.py
Last updated: 2026-10-19

Purpose
- Validate loading schema definitions from JSON and YAML files.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from envvault.errors import ErrorCode, SchemaConstructionError, SchemaLoadError
from envvault.schema import SchemaValidator, load_schema_file


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_load_json_schema(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "schema.json",
        json.dumps({"PORT": {"type": "number", "default": 3306}, "HOST": {"type": "string"}}),
    )

    schema = load_schema_file(path)

    assert list(schema) == ["PORT", "HOST"]
    assert SchemaValidator(schema).defaults() == {"PORT": 3306}


def test_load_yaml_schema(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "schema.yaml",
        """
DB_PASSWORD:
  type: string
  secret: true
  minLength: 8
LOG_LEVEL:
  type: string
  enum: [debug, info]
  default: info
""".strip(),
    )

    schema = load_schema_file(path)

    assert schema["DB_PASSWORD"].secret is True
    assert schema["LOG_LEVEL"].enum == ("debug", "info")


def test_empty_yaml_is_an_empty_schema(tmp_path: Path) -> None:
    path = _write(tmp_path / "schema.yml", "")

    assert len(load_schema_file(path)) == 0


def test_missing_file_uses_not_found_code(tmp_path: Path) -> None:
    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema_file(tmp_path / "absent.json")

    assert excinfo.value.code is ErrorCode.SCHEMA_NOT_FOUND
    assert excinfo.value.context["path"].endswith("absent.json")


def test_unparsable_file_raises_load_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "schema.json", "{not json")

    with pytest.raises(SchemaLoadError) as excinfo:
        load_schema_file(path)

    assert excinfo.value.code is ErrorCode.SCHEMA_PARSE_ERROR


def test_unsupported_suffix_raises_load_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "schema.toml", "")

    with pytest.raises(SchemaLoadError, match="unsupported schema format"):
        load_schema_file(path)


def test_malformed_definition_surfaces_construction_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "schema.json", json.dumps({"X": {"type": "date"}}))

    with pytest.raises(SchemaConstructionError):
        load_schema_file(path)
