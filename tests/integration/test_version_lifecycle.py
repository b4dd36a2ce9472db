"""Integration tests for handle lifecycles through the SDK."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import HandleConfig
from core.errors import IdentifierMintError
from core.types import Found, NotFound
from store.repository_sdk import HandleClient
from tests.fixture_paths import fixture_path


def _client(data_root: Path) -> HandleClient:
    return HandleClient(HandleConfig(data_root=data_root, prefix="123456789"))


def test_versions_then_delete_keep_canonical_on_latest(tmp_path) -> None:
    """Create, version, and delete should keep X on the newest remaining version."""
    client = _client(tmp_path)
    canonical = client.create_object("a")
    second_handle = client.create_version("a", "b")
    third_handle = client.create_version("b", "c")

    client.delete("c")
    after_delete = client.resolve(canonical)

    assert (second_handle, third_handle) == (f"{canonical}.2", f"{canonical}.3")
    assert isinstance(after_delete, Found) and after_delete.item.object_id == "b"
    assert isinstance(client.resolve(f"{canonical}.3"), Found)
    assert [version.number for version in client.history("a")] == [1, 2]


def test_describe_reports_versioned_metadata(tmp_path) -> None:
    """The first version advertises X.1 once a second version exists."""
    client = _client(tmp_path)
    canonical = client.create_object("a")
    client.create_version("a", "b")

    first = client.describe("a")
    second = client.describe("b")

    assert first.handle == f"{canonical}.1"
    assert first.bound_handles == (f"{canonical}.1",)
    assert second.bound_handles == (canonical, f"{canonical}.2")
    assert first.descriptive_uris == (f"http://hdl.handle.net/{canonical}.1",)
    assert second.descriptive_uris == (f"http://hdl.handle.net/{canonical}",)


def test_recreated_object_does_not_inherit_deleted_handle(tmp_path) -> None:
    """An id reused after deletion gets a fresh handle of its own."""
    client = _client(tmp_path)
    canonical = client.create_object("a")
    client.create_version("a", "b")
    client.delete("b")

    handle = client.create_object("b")
    record = client.describe("b")

    assert handle == "123456789/2"
    assert record.descriptive_uris == ("http://hdl.handle.net/123456789/2",)
    assert client.resolve(canonical) == Found(client.describe("a").ref)


def test_restore_manifest_rebuilds_history(tmp_path) -> None:
    """Replaying an export restores versions and the canonical binding."""
    client = _client(tmp_path)

    bound = client.restore(str(fixture_path("restore/valid.yaml")))
    canonical = client.resolve("123456789/70")

    assert bound == ("123456789/70.2", "123456789/70.1", "123456789/71")
    assert isinstance(canonical, Found) and canonical.item.object_id == "restored-b"
    assert [version.item.object_id for version in client.history("restored-a")] == [
        "restored-a",
        "restored-b",
    ]


def test_restore_manifest_failure_leaves_repository_unchanged(tmp_path) -> None:
    """A failing entry discards every binding made by the manifest."""
    client = _client(tmp_path)

    with pytest.raises(IdentifierMintError):
        client.restore(str(fixture_path("restore/conflicting.yaml")))

    assert client.resolve("123456789/50") == NotFound("123456789/50")
    assert client.resolve("123456789/50.1") == NotFound("123456789/50.1")
