"""Rebuilding handle and version bindings from imported content.

Archival imports hand back objects together with the handle they had
when exported. A versioned handle ``X.N`` puts the object back into its
work's history as version N and moves ``X`` when N is the newest.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.constants import RESTORE_VERSION_COMMENT
from core.errors import IdentifierError
from core.identifier_format import parse_identifier
from core.logging_config import get_logger
from core.types import ContentRef, VersionHistory
from identifiers.interfaces import ProviderCollaborators
from identifiers.metadata_sync import HandleMetadataSync

_LOGGER = get_logger(__name__)


def restore_as_canonical(
    collaborators: ProviderCollaborators,
    sync: HandleMetadataSync,
    item: ContentRef,
    identifier: str,
) -> VersionHistory:
    """Start a new history with ``item`` and point the canonical at it.

    Args:
        collaborators: Provider collaborators.
        sync: Metadata synchronizer.
        item: Restored object.
        identifier: Versioned handle ``X.N`` carried by the object.

    Returns:
        The newly created history.
    """
    canonical, number = _split_versioned(identifier)
    collaborators.handles.create(item, identifier, force_overwrite=True)
    sync.populate(item)
    history = collaborators.histories.create()
    collaborators.histories.create_version(
        history, item, RESTORE_VERSION_COMMENT, datetime.now(timezone.utc), number
    )
    collaborators.handles.repoint(canonical, item)
    _LOGGER.info(
        "restored_as_canonical",
        object_id=item.object_id,
        handle=identifier,
        canonical=canonical,
        history_id=history.history_id,
    )
    return history


def restore_as_version(
    collaborators: ProviderCollaborators,
    sync: HandleMetadataSync,
    item: ContentRef,
    identifier: str,
    canonical: str,
    history: VersionHistory,
) -> bool:
    """Insert ``item`` into an existing history as version N.

    The canonical handle moves only when N is at least the highest
    version number recorded before the insert.

    Args:
        collaborators: Provider collaborators.
        sync: Metadata synchronizer.
        item: Restored object.
        identifier: Versioned handle ``X.N`` carried by the object.
        canonical: Canonical handle of the work.
        history: Existing history of the work.

    Returns:
        Whether the canonical handle was repointed.
    """
    _, number = _split_versioned(identifier)
    collaborators.handles.create(item, identifier, force_overwrite=True)
    sync.populate(item)
    latest_number = collaborators.histories.latest(history).number
    collaborators.histories.create_version(
        history, item, RESTORE_VERSION_COMMENT, datetime.now(timezone.utc), number
    )
    repointed = number >= latest_number
    if repointed:
        collaborators.handles.repoint(canonical, item)
    _LOGGER.info(
        "restored_as_version",
        object_id=item.object_id,
        handle=identifier,
        canonical=canonical,
        history_id=history.history_id,
        previous_latest=latest_number,
        canonical_repointed=repointed,
    )
    return repointed


def _split_versioned(identifier: str) -> tuple[str, int]:
    parsed = parse_identifier(identifier)
    if parsed.version is None:
        raise IdentifierError(
            f"Identifier '{identifier}' has no version suffix. "
            "Restoring a version requires a handle of the form prefix/suffix.N."
        )
    return parsed.canonical, parsed.version
