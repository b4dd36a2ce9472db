"""Public SDK surface for verhandle.

This module provides a stable import path for library users.
It re-exports the client, provider, and typed models.
"""

from __future__ import annotations

from core.config import HandleConfig
from core.errors import (
    HandleError,
    IdentifierManagementError,
    IdentifierMintError,
    IdentifierNotFoundError,
    IdentifierNotResolvableError,
)
from core.identifier_format import canonical_of, compose_identifier, parse_identifier
from core.types import ContentRef, Found, NotFound, ParsedIdentifier, ResolutionFailed
from identifiers.provider import VersionedHandleProvider
from store.repository_sdk import HandleClient
from store.session import open_session

__all__ = [
    "ContentRef",
    "Found",
    "HandleClient",
    "HandleConfig",
    "HandleError",
    "IdentifierManagementError",
    "IdentifierMintError",
    "IdentifierNotFoundError",
    "IdentifierNotResolvableError",
    "NotFound",
    "ParsedIdentifier",
    "ResolutionFailed",
    "VersionedHandleProvider",
    "canonical_of",
    "compose_identifier",
    "open_session",
    "parse_identifier",
]
