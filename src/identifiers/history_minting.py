"""Handle minting for objects that belong to a version history.

The first time a work gets a second version, two versioned handles
appear: ``X.1`` for the original object and ``X.2`` for the new one.
Later versions only receive their own ``X.N``. The canonical ``X`` is
moved by the caller, not here.
"""

from __future__ import annotations

from core.errors import IdentifierError
from core.identifier_format import canonical_of, compose_identifier
from core.logging_config import get_logger
from core.types import ContentRef, Version, VersionHistory
from identifiers.interfaces import HandleResolver, ProviderCollaborators

_LOGGER = get_logger(__name__)


def mint_from_history(
    collaborators: ProviderCollaborators,
    item: ContentRef,
    history: VersionHistory,
) -> str | None:
    """Mint the versioned handle for ``item`` from its predecessor.

    Args:
        collaborators: Provider collaborators.
        item: Object being minted.
        history: History the object belongs to.

    Returns:
        The ``X.N`` handle bound to the object, or None when the object
        has no previous version to derive a canonical handle from.

    Raises:
        IdentifierError: If the object is missing from the history or no
            version of the work carries a handle.
    """
    histories = collaborators.histories
    version = histories.version_of(history, item)
    if version is None:
        raise IdentifierError(
            f"Object '{item.object_id}' is not part of history '{history.history_id}'. "
            "Add it as a version before minting."
        )
    previous = histories.previous(history, version)
    if previous is None:
        return None
    canonical = work_canonical(collaborators, history, previous)
    if histories.is_first(history, previous):
        _backfill_first_version(collaborators.handles, previous, canonical)
    versioned = compose_identifier(canonical, version.number)
    bind_version_identifier(collaborators.handles, item, versioned)
    return versioned


def work_canonical(
    collaborators: ProviderCollaborators,
    history: VersionHistory,
    anchor: Version,
) -> str:
    """Return the canonical handle of the work ``anchor`` belongs to.

    The anchor's own handle is preferred. Versions that lost their handle
    (legacy non-versioned data) fall back to any other version's handle,
    newest first.

    Raises:
        IdentifierError: If no version of the work carries a handle.
    """
    handles = collaborators.handles
    handle = handles.find_bound_identifier(anchor.item)
    if handle is not None:
        return canonical_of(handle)
    for version in sorted(
        collaborators.histories.versions(history),
        key=lambda candidate: candidate.number,
        reverse=True,
    ):
        handle = handles.find_bound_identifier(version.item)
        if handle is not None:
            _LOGGER.warning(
                "canonical_from_sibling_version",
                history_id=history.history_id,
                anchor_version=anchor.number,
                sibling_version=version.number,
            )
            return canonical_of(handle)
    raise IdentifierError(
        f"No version in history '{history.history_id}' carries a handle. "
        "Register the first version before minting later ones."
    )


def bind_version_identifier(handles: HandleResolver, item: ContentRef, identifier: str) -> None:
    """Bind ``identifier`` to ``item``, repointing a stale binding if present.

    A stale binding is left behind when a previous attempt at this version
    was discarded before being archived.
    """
    if handles.resolve_to_object(identifier) is None:
        handles.create(item, identifier)
        _LOGGER.info("version_handle_created", object_id=item.object_id, handle=identifier)
        return
    handles.repoint(identifier, item)
    _LOGGER.info("version_handle_repointed", object_id=item.object_id, handle=identifier)


def _backfill_first_version(handles: HandleResolver, first: Version, canonical: str) -> None:
    identifier = compose_identifier(canonical, first.number)
    if handles.resolve_to_object(identifier) is not None:
        return
    handles.create(first.item, identifier, force_overwrite=True)
    _LOGGER.info(
        "first_version_handle_backfilled",
        object_id=first.item.object_id,
        handle=identifier,
    )
