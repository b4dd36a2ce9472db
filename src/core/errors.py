"""verhandle exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class HandleError(Exception):
    """Base exception for all verhandle failures."""


class HandleConfigError(HandleError):
    """Raised for invalid runtime configuration."""


class HandleStoreError(HandleError):
    """Raised for registry, history, and catalog persistence failures."""


class HandleDependencyError(HandleError):
    """Raised when an optional runtime dependency is missing."""


class RestoreManifestError(HandleError):
    """Raised for invalid or unreadable restore manifests."""


class IdentifierError(HandleError):
    """Base exception for identifier management failures."""


class IdentifierNotFoundError(IdentifierError):
    """Raised when no identifier is bound to the requested object."""


class IdentifierNotResolvableError(IdentifierError):
    """Raised when the handle registry itself fails to answer a query."""


class IdentifierMintError(IdentifierError):
    """Raised for unrecoverable mint, register, or reserve failures.

    Attributes:
        object_id: Identity of the object being processed.
    """

    def __init__(self, message: str, object_id: str | None) -> None:
        super().__init__(message)
        self.object_id = object_id


class IdentifierManagementError(IdentifierError):
    """Raised when moving identifiers during object deletion fails."""
