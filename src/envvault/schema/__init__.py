"""
envvault schema package public API.

File: src/envvault/schema/__init__.py
Last updated: 2026-10-19

Purpose
- Export field specs, schema construction, schema file loading, and the validator.
"""

from envvault.schema.checks import check_value
from envvault.schema.fields import MISSING, FieldSpec, Schema
from envvault.schema.loader import SCHEMA_SUFFIXES, load_schema_file
from envvault.schema.validator import SchemaValidator, ValidationIssue, ValidationResult

__all__ = [
    "MISSING",
    "SCHEMA_SUFFIXES",
    "FieldSpec",
    "Schema",
    "SchemaValidator",
    "ValidationIssue",
    "ValidationResult",
    "check_value",
    "load_schema_file",
]
