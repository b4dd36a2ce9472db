"""Core constants used across verhandle modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".verhandle")
STATE_FILE_NAME = "repository.json"
STATE_SCHEMA_VERSION = 1
DEFAULT_HANDLE_PREFIX = "123456789"
DEFAULT_CANONICAL_URL_PREFIX = "http://hdl.handle.net/"
DEFAULT_SUPPORTED_SCHEMES = ("info:hdl", "hdl", "http://", "https://")
VERSION_SEPARATOR = "."
HANDLE_SEPARATOR = "/"
VERSIONABLE_KINDS = ("item",)
DEFAULT_OBJECT_KIND = "item"
RESTORE_VERSION_COMMENT = "Restoring from AIP Service"
NEW_VERSION_COMMENT = "New version"
RESTORE_MANIFEST_VERSION = 1
