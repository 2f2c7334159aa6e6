"""
envvault — configuration engine package root

File: src/envvault/__init__.py
Last updated: 2026-10-19

Purpose
- Package root for the envvault configuration engine: schema validation,
  envelope encryption of secret fields, and deep diff/merge of environments.

Functional requirements
- Must not have side effects at import time (no settings loading, no logging init).

Key interfaces / contracts
- Subpackages are imported explicitly by callers; the root only exposes version metadata.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
