"""Unit tests for restore manifest parsing."""

from __future__ import annotations

import pytest

from core.errors import RestoreManifestError
from core.restore_manifest import load_restore_manifest
from tests.fixture_paths import fixture_path


def test_load_restore_manifest_parses_entries_in_order() -> None:
    """Valid manifest should keep entry order and default kinds."""
    manifest = load_restore_manifest(str(fixture_path("restore/valid.yaml")))

    assert [(entry.object_id, entry.kind) for entry in manifest.entries] == [
        ("restored-b", "item"),
        ("restored-a", "item"),
        ("restored-col", "collection"),
    ]


@pytest.mark.parametrize(
    "fixture_name",
    [
        "restore/invalid_version.yaml",
        "restore/unknown_entry_key.yaml",
        "restore/empty_entries.yaml",
        "restore/missing_identifier.yaml",
        "restore/does_not_exist.yaml",
    ],
)
def test_load_restore_manifest_rejects_invalid_files(fixture_name: str) -> None:
    """Schema violations and missing files raise manifest errors."""
    with pytest.raises(RestoreManifestError):
        load_restore_manifest(str(fixture_path(fixture_name)))


def test_load_restore_manifest_rejects_malformed_yaml(tmp_path) -> None:
    """YAML syntax errors are reported as manifest errors."""
    manifest_path = tmp_path / "broken.yaml"
    manifest_path.write_text("version: 1\nentries: [\n", encoding="utf-8")

    with pytest.raises(RestoreManifestError):
        load_restore_manifest(str(manifest_path))
