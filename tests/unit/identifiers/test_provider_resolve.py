"""Unit tests for resolve, lookup, and supports."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import HandleConfig
from core.errors import HandleStoreError, IdentifierNotFoundError, IdentifierNotResolvableError
from core.types import ContentRef, Found, NotFound, ResolutionFailed
from identifiers.provider import VersionedHandleProvider
from tests.repository_fixtures import build_repository


class _BrokenHandles:
    """Handle registry whose queries always fail."""

    def resolve_to_object(self, handle: str) -> ContentRef | None:
        raise HandleStoreError(f"handle table unavailable for {handle}")

    def find_bound_identifier(self, item: ContentRef) -> str | None:
        raise HandleStoreError(f"handle table unavailable for {item.object_id}")


def _broken_provider() -> VersionedHandleProvider:
    repository = build_repository()
    return VersionedHandleProvider(
        HandleConfig(data_root=Path("unused")),
        _BrokenHandles(),  # type: ignore[arg-type]
        repository.histories,
        repository.catalog,
    )


def test_resolve_identifier_reports_found_object() -> None:
    """Bound handles resolve to their object."""
    repository = build_repository()
    item = repository.catalog.create("a")
    handle = repository.provider.register(item)

    assert repository.provider.resolve_identifier(handle) == Found(item)


def test_resolve_accepts_scheme_and_resolver_url_forms() -> None:
    """hdl: and resolver URL forms resolve like the bare handle."""
    repository = build_repository()
    item = repository.catalog.create("a")
    handle = repository.provider.register(item)

    resolved = {
        repository.provider.resolve(f"hdl:{handle}"),
        repository.provider.resolve(f"http://hdl.handle.net/{handle}"),
    }

    assert resolved == {item}


def test_resolve_identifier_reports_not_found() -> None:
    """Unbound handles report NotFound and resolve to None."""
    repository = build_repository()

    outcome = repository.provider.resolve_identifier("123456789/404")

    assert outcome == NotFound("123456789/404")
    assert repository.provider.resolve("123456789/404") is None


def test_resolve_never_raises_on_registry_failure() -> None:
    """Registry failures become ResolutionFailed and a None resolve."""
    provider = _broken_provider()

    outcome = provider.resolve_identifier("123456789/1")

    assert isinstance(outcome, ResolutionFailed)
    assert provider.resolve("123456789/1") is None


def test_lookup_returns_bound_handle() -> None:
    """Lookup reports the object's own handle."""
    repository = build_repository()
    item = repository.catalog.create("a")
    handle = repository.provider.register(item)

    assert repository.provider.lookup(item) == handle


def test_lookup_raises_not_found_for_unregistered_object() -> None:
    """Objects without handles raise a not-found error."""
    repository = build_repository()

    with pytest.raises(IdentifierNotFoundError):
        repository.provider.lookup(repository.catalog.create("a"))


def test_lookup_raises_not_resolvable_on_registry_failure() -> None:
    """Registry failures are distinct from absence."""
    with pytest.raises(IdentifierNotResolvableError):
        _broken_provider().lookup(ContentRef("a"))


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("hdl:123456789/1", True),
        ("info:hdl/123456789/1", True),
        ("https://repo.example.org/handle/123456789/1", True),
        ("123456789/1", True),
        ("doi-without-slash", False),
        ("trailing/", False),
    ],
)
def test_supports_recognizes_handle_shapes(identifier: str, expected: bool) -> None:
    """Scheme prefixes and two-segment paths are supported."""
    repository = build_repository()

    assert repository.provider.supports(identifier) is expected
