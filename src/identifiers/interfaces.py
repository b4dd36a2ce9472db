"""Collaborator contracts consumed by the identifier provider.

The provider never touches storage directly. Anything that satisfies
these protocols can back it, including the filesystem stores in
``store`` and test doubles.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from core.types import ContentRef, Version, VersionHistory


class HandleResolver(Protocol):
    """Handle-to-object bindings."""

    def create(
        self,
        item: ContentRef,
        handle: str | None = None,
        force_overwrite: bool = False,
    ) -> str: ...

    def resolve_to_object(self, handle: str) -> ContentRef | None: ...

    def find_bound_identifier(self, item: ContentRef) -> str | None: ...

    def repoint(self, handle: str, item: ContentRef) -> None: ...


class VersionHistoryTracker(Protocol):
    """Ordered version histories of logical works."""

    def find_by_object(self, item: ContentRef) -> VersionHistory | None: ...

    def create(self) -> VersionHistory: ...

    def version_of(self, history: VersionHistory, item: ContentRef) -> Version | None: ...

    def previous(self, history: VersionHistory, version: Version) -> Version | None: ...

    def latest(self, history: VersionHistory) -> Version: ...

    def is_first(self, history: VersionHistory, version: Version | None) -> bool: ...

    def versions(self, history: VersionHistory) -> list[Version]: ...

    def create_version(
        self,
        history: VersionHistory,
        item: ContentRef,
        comment: str,
        timestamp: datetime,
        number: int,
    ) -> Version: ...


class MetadataSynchronizer(Protocol):
    """Descriptive metadata writes on content objects."""

    def set_descriptive_uri(self, item: ContentRef, uri: str) -> None: ...

    def clear_descriptive_uri(self, item: ContentRef) -> None: ...


@dataclass(frozen=True)
class ProviderCollaborators:
    """Bundle of collaborators driven by the provider."""

    handles: HandleResolver
    histories: VersionHistoryTracker
    metadata: MetadataSynchronizer
