"""Unit tests for canonical handling when versions are deleted."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from core.config import HandleConfig
from core.errors import HandleStoreError, IdentifierManagementError
from core.types import ContentRef, VersionHistory
from identifiers.provider import VersionedHandleProvider
from tests.repository_fixtures import build_repository, new_version


class _BrokenHistories:
    """History tracker whose lookups always fail."""

    def find_by_object(self, item: ContentRef) -> VersionHistory | None:
        raise HandleStoreError(f"history table unavailable for {item.object_id}")


def test_delete_latest_moves_canonical_to_previous() -> None:
    """Removing the latest of two versions points X back at version one."""
    repository = build_repository()
    first = repository.catalog.create("a")
    canonical = repository.provider.register(first)
    second = new_version(repository, first, "b")
    repository.provider.register(second)

    repository.provider.delete(second)

    assert repository.provider.resolve(canonical) == first
    assert repository.provider.resolve(f"{canonical}.2") == second


def test_delete_non_latest_leaves_canonical() -> None:
    """Removing an older version never moves X."""
    repository = build_repository()
    first = repository.catalog.create("a")
    canonical = repository.provider.register(first)
    second = new_version(repository, first, "b")
    repository.provider.register(second)

    repository.provider.delete(first)

    assert repository.provider.resolve(canonical) == second


def test_delete_sole_version_leaves_canonical() -> None:
    """A one-version history has nothing to fall back to."""
    repository = build_repository()
    item = repository.catalog.create("a")
    canonical = repository.provider.register(item)
    history = repository.histories.create()
    repository.histories.create_version(history, item, "only", datetime.now(timezone.utc), 1)

    repository.provider.delete(item)

    assert repository.provider.resolve(canonical) == item


def test_delete_without_history_is_a_no_op() -> None:
    """Objects outside histories need no canonical changes."""
    repository = build_repository()
    item = repository.catalog.create("a")
    canonical = repository.provider.register(item)

    repository.provider.delete(item, canonical)

    assert repository.provider.resolve(canonical) == item


def test_delete_wraps_collaborator_failure() -> None:
    """Failures surface as identifier management errors keeping the cause."""
    repository = build_repository()
    provider = VersionedHandleProvider(
        HandleConfig(data_root=Path("unused")),
        repository.handles,
        _BrokenHistories(),  # type: ignore[arg-type]
        repository.catalog,
    )

    with pytest.raises(IdentifierManagementError) as error_info:
        provider.delete(ContentRef("a"))

    assert isinstance(error_info.value.__cause__, HandleStoreError)
