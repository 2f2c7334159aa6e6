"""Load schema definitions from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from envvault.errors import ErrorCode, SchemaLoadError
from envvault.schema.fields import Schema

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


def load_schema_file(path: str | Path) -> Schema:
    """Read ``path`` and build a ``Schema``.

    Raises:
        SchemaLoadError: file missing, unreadable, unsupported, or unparsable.
        SchemaConstructionError: the parsed definition is malformed.
    """

    schema_path = Path(path).expanduser()
    context = {"path": schema_path.as_posix()}
    if not schema_path.is_file():
        raise SchemaLoadError(
            f"schema file not found: {schema_path}",
            code=ErrorCode.SCHEMA_NOT_FOUND,
            context=context,
        )

    suffix = schema_path.suffix.lower()
    if suffix not in SCHEMA_SUFFIXES:
        raise SchemaLoadError(f"unsupported schema format: {suffix or '<none>'}", context=context)

    try:
        raw_text = schema_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaLoadError(f"unable to read schema file {schema_path}: {exc}", context=context) from exc

    try:
        if suffix == ".json":
            data = json.loads(raw_text)
        else:
            data = yaml.safe_load(raw_text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaLoadError(f"invalid schema file {schema_path}: {exc}", context=context) from exc

    if data is None:
        data = {}
    return Schema.from_mapping(data)


__all__ = ["SCHEMA_SUFFIXES", "load_schema_file"]
