"""Typed restore manifest parsing.

This module loads and validates YAML manifests that describe
identifier bindings recovered from an archival import. Each entry
names an object and the identifier it carried before export.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

from core.constants import DEFAULT_OBJECT_KIND, RESTORE_MANIFEST_VERSION
from core.errors import HandleDependencyError, RestoreManifestError
from core.types import RestoreEntry, RestoreManifest

_ROOT_KEYS = {"version", "entries"}
_ENTRY_KEYS = {"object_id", "identifier", "kind"}


def load_restore_manifest(manifest_path: str) -> RestoreManifest:
    """Load and validate a YAML restore manifest from disk.

    Args:
        manifest_path: File path to YAML manifest.

    Returns:
        Fully validated restore manifest.

    Raises:
        HandleDependencyError: If PyYAML is unavailable.
        RestoreManifestError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(manifest_path)
    root_mapping = _expect_mapping(payload, "restore manifest root")
    _validate_keys(root_mapping, _ROOT_KEYS, "restore manifest root")
    version = _parse_version(root_mapping)
    entries = _parse_entries(root_mapping)
    return RestoreManifest(version=version, entries=entries)


def _load_yaml_payload(manifest_path: str) -> object:
    try:
        import yaml
    except ImportError as error:  # pragma: no cover - dependency failure
        raise HandleDependencyError(
            "Restore manifests require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    manifest_file = Path(manifest_path).expanduser().resolve()
    if not manifest_file.exists():
        raise RestoreManifestError(
            f"Restore manifest does not exist at {manifest_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(manifest_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise RestoreManifestError(
            f"Failed to read restore manifest at {manifest_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise RestoreManifestError(
            f"Failed to parse YAML restore manifest at {manifest_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise RestoreManifestError(
            f"Restore manifest at {manifest_file} is empty. Define 'version' and 'entries'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise RestoreManifestError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise RestoreManifestError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise RestoreManifestError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise RestoreManifestError(
            "Restore manifest field 'version' must be an integer. "
            f"Set version: {RESTORE_MANIFEST_VERSION}."
        )
    if raw_version != RESTORE_MANIFEST_VERSION:
        raise RestoreManifestError(
            f"Unsupported restore manifest version {raw_version}. "
            f"Use version: {RESTORE_MANIFEST_VERSION}."
        )
    return raw_version


def _parse_entries(root_mapping: Mapping[str, object]) -> tuple[RestoreEntry, ...]:
    raw_entries = root_mapping.get("entries")
    if raw_entries is None:
        raise RestoreManifestError(
            "Restore manifest missing required field 'entries'. Add a non-empty list."
        )
    entry_rows = _expect_sequence(raw_entries, "restore manifest entries")
    if len(entry_rows) == 0:
        raise RestoreManifestError("Restore manifest field 'entries' must include at least one entry.")
    return tuple(_parse_entry(row, index) for index, row in enumerate(entry_rows))


def _parse_entry(entry_value: object, entry_index: int) -> RestoreEntry:
    context = f"restore manifest entry #{entry_index + 1}"
    entry_mapping = _expect_mapping(entry_value, context)
    _validate_keys(entry_mapping, _ENTRY_KEYS, context)
    object_id = _required_string(entry_mapping, "object_id", context)
    identifier = _required_string(entry_mapping, "identifier", context)
    kind = _optional_string(entry_mapping, "kind", context) or DEFAULT_OBJECT_KIND
    return RestoreEntry(object_id=object_id, identifier=identifier, kind=kind)


def _required_string(mapping: Mapping[str, object], field_name: str, context: str) -> str:
    value = _optional_string(mapping, field_name, context)
    if value is None:
        raise RestoreManifestError(f"Invalid {context}: field '{field_name}' is required.")
    return value


def _optional_string(mapping: Mapping[str, object], field_name: str, context: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise RestoreManifestError(f"Invalid {context}: field '{field_name}' must be a string.")


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise RestoreManifestError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
