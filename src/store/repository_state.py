"""Repository state document persistence.

All reference collaborators share one JSON document under the data
root. This module isolates reading, validating, and atomically
replacing it so the stores stay focused on their own rules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.constants import STATE_FILE_NAME, STATE_SCHEMA_VERSION
from core.errors import HandleStoreError

_SECTIONS = ("handles", "object_handles", "objects", "histories")
_SEQUENCES = ("handle_sequence", "history_sequence")


def empty_state() -> dict[str, Any]:
    """Return a fresh state document."""
    state: dict[str, Any] = {"schema_version": STATE_SCHEMA_VERSION}
    for section in _SECTIONS:
        state[section] = {}
    for sequence in _SEQUENCES:
        state[sequence] = 0
    return state


def state_path(data_root: Path) -> Path:
    """Return the state document path for a data root."""
    return data_root / STATE_FILE_NAME


def read_state(data_root: Path) -> dict[str, Any]:
    """Read and validate the state document.

    Args:
        data_root: Repository data root.

    Returns:
        Parsed state, or an empty state when none was written yet.

    Raises:
        HandleStoreError: If the document is unreadable or malformed.
    """
    path = state_path(data_root)
    if not path.exists():
        return empty_state()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise HandleStoreError(
            f"Failed to parse repository state at {path}: {error.msg}. "
            "Restore the file from backup or re-import the repository."
        ) from error
    if not isinstance(payload, dict):
        raise HandleStoreError(
            f"Failed to parse repository state at {path}: "
            "expected JSON object at top level."
        )
    _validate_state(payload, path)
    return payload


def write_state(data_root: Path, state: dict[str, Any]) -> None:
    """Atomically replace the state document.

    Args:
        data_root: Repository data root.
        state: State document to persist.
    """
    data_root.mkdir(parents=True, exist_ok=True)
    path = state_path(data_root)
    temp_path = path.with_name(f"{path.name}.tmp")
    temp_path.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    temp_path.replace(path)


def _validate_state(payload: dict[str, Any], path: Path) -> None:
    version = payload.get("schema_version")
    if version != STATE_SCHEMA_VERSION:
        raise HandleStoreError(
            f"Unsupported repository state version {version!r} at {path}. "
            f"Expected {STATE_SCHEMA_VERSION}."
        )
    for section in _SECTIONS:
        if not isinstance(payload.get(section), dict):
            raise HandleStoreError(
                f"Repository state at {path} is missing section '{section}'."
            )
    for sequence in _SEQUENCES:
        if not isinstance(payload.get(sequence), int):
            raise HandleStoreError(
                f"Repository state at {path} has invalid counter '{sequence}'."
            )
