"""Unit tests for repository sessions and state persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import HandleConfig
from core.errors import HandleStoreError
from store.repository_state import read_state, state_path
from store.session import open_session


def _config(data_root: Path) -> HandleConfig:
    return HandleConfig(data_root=data_root, prefix="123456789")


def test_session_commits_on_clean_exit(tmp_path) -> None:
    """Changes made inside a session are visible to the next one."""
    with open_session(_config(tmp_path)) as session:
        item = session.catalog.create("a")
        handle = session.provider.register(item)

    with open_session(_config(tmp_path)) as session:
        resolved = session.provider.resolve(handle)

    assert resolved is not None and resolved.object_id == "a"


def test_session_discards_changes_on_error(tmp_path) -> None:
    """A failing block leaves the stored state untouched."""
    with pytest.raises(HandleStoreError):
        with open_session(_config(tmp_path)) as session:
            session.catalog.create("a")
            session.catalog.create("a")

    with open_session(_config(tmp_path)) as session:
        assert session.catalog.find("a") is None


def test_read_state_rejects_malformed_document(tmp_path) -> None:
    """Corrupt state files raise store errors."""
    state_path(tmp_path).write_text("{not json", encoding="utf-8")

    with pytest.raises(HandleStoreError):
        read_state(tmp_path)


def test_read_state_rejects_unknown_schema_version(tmp_path) -> None:
    """State written by another schema version is refused."""
    state_path(tmp_path).write_text('{"schema_version": 99}', encoding="utf-8")

    with pytest.raises(HandleStoreError):
        read_state(tmp_path)
