"""Shared typed models.

This module defines immutable data models used by the identifier
provider, the reference stores, and the SDK to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from core.constants import DEFAULT_OBJECT_KIND, VERSIONABLE_KINDS


@dataclass(frozen=True)
class ContentRef:
    """Reference to an external content object.

    Attributes:
        object_id: Stable repository identity of the object.
        kind: Object kind such as ``item`` or ``collection``.
    """

    object_id: str
    kind: str = DEFAULT_OBJECT_KIND

    @property
    def versionable(self) -> bool:
        """Whether the object takes part in version histories."""
        return self.kind in VERSIONABLE_KINDS


@dataclass(frozen=True)
class ParsedIdentifier:
    """Structured form of an identifier string.

    Attributes:
        canonical: ``prefix/suffix`` part without version.
        version: Version number when the identifier is version-scoped.
    """

    canonical: str
    version: int | None = None

    @property
    def is_versioned(self) -> bool:
        """Whether the identifier carries a version suffix."""
        return self.version is not None


@dataclass(frozen=True)
class VersionHistory:
    """Handle to one logical work's version history."""

    history_id: str


@dataclass(frozen=True)
class Version:
    """One immutable version record inside a history.

    Attributes:
        history_id: Owning history identity.
        number: Version number, starting at 1.
        item: Content object that is this version.
        comment: Free-text summary recorded at creation.
        created_at: UTC creation timestamp.
    """

    history_id: str
    number: int
    item: ContentRef
    comment: str
    created_at: datetime


@dataclass(frozen=True)
class ObjectRecord:
    """Catalog view of a content object with its descriptive metadata."""

    ref: ContentRef
    descriptive_uris: tuple[str, ...]
    handle: str | None
    bound_handles: tuple[str, ...] = ()


@dataclass(frozen=True)
class Found:
    """Resolution outcome when an identifier is bound."""

    item: ContentRef


@dataclass(frozen=True)
class NotFound:
    """Resolution outcome when nothing is bound to an identifier."""

    identifier: str


@dataclass(frozen=True)
class ResolutionFailed:
    """Resolution outcome when the registry could not be queried."""

    identifier: str
    cause: Exception


Resolution = Union[Found, NotFound, ResolutionFailed]


@dataclass(frozen=True)
class RestoreEntry:
    """One object/identifier binding from a restore manifest."""

    object_id: str
    identifier: str
    kind: str = DEFAULT_OBJECT_KIND


@dataclass(frozen=True)
class RestoreManifest:
    """Validated restore manifest root object."""

    version: int
    entries: tuple[RestoreEntry, ...]
