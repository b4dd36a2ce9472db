"""Version-aware handle provider.

This module owns every decision about which handle a content object
carries. Forward creation mints ``X.N`` handles and moves the canonical
``X`` to the newest version; imports rebuild the same bindings from the
handles objects carried when exported; deletion moves ``X`` back to the
previous version.
"""

from __future__ import annotations

from typing import NoReturn

from core.config import HandleConfig
from core.errors import (
    IdentifierManagementError,
    IdentifierMintError,
    IdentifierNotFoundError,
    IdentifierNotResolvableError,
)
from core.identifier_format import (
    canonical_of,
    compose_identifier,
    extract_handle_from_url,
    normalize_identifier,
    parse_identifier,
)
from core.logging_config import get_logger
from core.types import (
    ContentRef,
    Found,
    NotFound,
    Resolution,
    ResolutionFailed,
    VersionHistory,
)
from identifiers.history_minting import bind_version_identifier, mint_from_history, work_canonical
from identifiers.interfaces import (
    HandleResolver,
    MetadataSynchronizer,
    ProviderCollaborators,
    VersionHistoryTracker,
)
from identifiers.metadata_sync import HandleMetadataSync
from identifiers.restore import restore_as_canonical, restore_as_version

_LOGGER = get_logger(__name__)


class VersionedHandleProvider:
    """Mints, registers, resolves, and retires versioned handles.

    All calls run inside the caller's unit of work. Failures are not
    rolled back here; the enclosing session discards partial changes.
    """

    def __init__(
        self,
        config: HandleConfig,
        handles: HandleResolver,
        histories: VersionHistoryTracker,
        metadata: MetadataSynchronizer,
    ) -> None:
        """Initialize provider from config and collaborators.

        Args:
            config: Runtime configuration.
            handles: Handle registry.
            histories: Version history tracker.
            metadata: Descriptive metadata writer.
        """
        self._config = config
        self._collaborators = ProviderCollaborators(
            handles=handles,
            histories=histories,
            metadata=metadata,
        )
        self._sync = HandleMetadataSync(handles, metadata, config.canonical_url_prefix)

    @property
    def _handles(self) -> HandleResolver:
        return self._collaborators.handles

    @property
    def _histories(self) -> VersionHistoryTracker:
        return self._collaborators.histories

    def supports(self, identifier: str) -> bool:
        """Return whether ``identifier`` looks like a handle.

        Args:
            identifier: Candidate identifier string.

        Returns:
            True for configured scheme prefixes or handle-shaped URLs.
        """
        if any(identifier.startswith(scheme) for scheme in self._config.supported_schemes):
            return True
        return extract_handle_from_url(identifier) is not None

    def mint(self, item: ContentRef) -> str:
        """Return the handle ``item`` should carry, creating one if absent.

        Args:
            item: Content object.

        Returns:
            Existing handle, a versioned ``X.N`` handle for objects with a
            predecessor in their history, or a fresh handle.

        Raises:
            IdentifierMintError: If any collaborator fails.
        """
        try:
            return self._mint(item)
        except Exception as error:
            self._fail("mint", item, error)

    def register(self, item: ContentRef, identifier: str | None = None) -> str:
        """Bind a handle to ``item`` and update the work's canonical handle.

        Without ``identifier`` the object is treated as newly created
        content. With ``identifier`` the object is being imported and the
        supplied handle is restored.

        Args:
            item: Content object.
            identifier: Optional caller-supplied handle.

        Returns:
            The handle now bound to the object.

        Raises:
            IdentifierMintError: If any collaborator fails.
        """
        try:
            if identifier is None:
                return self._register_new(item)
            return self._register_identifier(item, identifier)
        except Exception as error:
            self._fail("register", item, error)

    def reserve(self, item: ContentRef, identifier: str) -> None:
        """Bind ``identifier`` to ``item`` without any version handling.

        Raises:
            IdentifierMintError: If the registry rejects the binding.
        """
        try:
            self._handles.create(item, identifier)
        except Exception as error:
            self._fail("reserve", item, error)
        _LOGGER.info("handle_reserved", object_id=item.object_id, handle=identifier)

    def resolve_identifier(self, identifier: str) -> Resolution:
        """Resolve an identifier to an explicit outcome.

        Scheme prefixes and resolver URLs are stripped first.

        Args:
            identifier: Handle, ``hdl:`` form, or resolver URL.

        Returns:
            Found, NotFound, or ResolutionFailed.
        """
        handle = normalize_identifier(identifier, self._config.canonical_url_prefix)
        try:
            item = self._handles.resolve_to_object(handle)
        except Exception as error:
            _LOGGER.error("handle_resolve_failed", handle=handle, error=str(error))
            return ResolutionFailed(identifier=identifier, cause=error)
        if item is None:
            return NotFound(identifier=identifier)
        return Found(item=item)

    def resolve(self, identifier: str) -> ContentRef | None:
        """Best-effort resolution; never raises."""
        outcome = self.resolve_identifier(identifier)
        if isinstance(outcome, Found):
            return outcome.item
        return None

    def lookup(self, item: ContentRef) -> str:
        """Return the handle bound to ``item``.

        Raises:
            IdentifierNotFoundError: If no handle is bound.
            IdentifierNotResolvableError: If the registry query fails.
        """
        try:
            handle = self._handles.find_bound_identifier(item)
        except Exception as error:
            _LOGGER.error("handle_lookup_failed", object_id=item.object_id, error=str(error))
            raise IdentifierNotResolvableError(
                f"Failed to look up handle for object '{item.object_id}': {error}"
            ) from error
        if handle is None:
            raise IdentifierNotFoundError(
                f"No handle is bound to object '{item.object_id}'. Register the object first."
            )
        return handle

    def delete(self, item: ContentRef, identifier: str | None = None) -> None:
        """Move the canonical handle away from a version being removed.

        Only the latest version of a history with at least two versions
        causes a repoint; its own ``X.N`` handle is left in place.

        Args:
            item: Object being removed.
            identifier: Ignored; accepted for interface symmetry.

        Raises:
            IdentifierManagementError: If any collaborator fails.
        """
        if not item.versionable:
            return
        try:
            self._repoint_to_previous(item)
        except Exception as error:
            _LOGGER.error(
                "handle_delete_failed",
                object_id=item.object_id,
                identifier=identifier,
                error=str(error),
            )
            raise IdentifierManagementError(
                f"Failed to move canonical handle away from object '{item.object_id}'."
            ) from error

    def _mint(self, item: ContentRef) -> str:
        existing = self._handles.find_bound_identifier(item)
        if existing is not None:
            return existing
        history = self._history_of(item)
        if history is not None:
            versioned = mint_from_history(self._collaborators, item, history)
            if versioned is not None:
                _LOGGER.info("handle_minted", object_id=item.object_id, handle=versioned)
                return versioned
        handle = self._handles.create(item)
        _LOGGER.info("handle_minted", object_id=item.object_id, handle=handle)
        return handle

    def _register_new(self, item: ContentRef) -> str:
        identifier = self._mint(item)
        if not item.versionable:
            return identifier
        history = self._histories.find_by_object(item)
        if history is not None:
            self._promote_to_canonical(item, history)
        self._sync.populate(item)
        return identifier

    def _promote_to_canonical(self, item: ContentRef, history: VersionHistory) -> None:
        histories = self._histories
        version = histories.version_of(history, item)
        if version is None or histories.latest(history).number != version.number:
            _LOGGER.info("canonical_promotion_skipped", object_id=item.object_id)
            return
        canonical = work_canonical(self._collaborators, history, version)
        self._handles.repoint(canonical, item)
        _LOGGER.info("canonical_repointed", object_id=item.object_id, canonical=canonical)
        previous = histories.previous(history, version)
        if previous is None:
            return
        previous_handle = compose_identifier(canonical, previous.number)
        if histories.is_first(history, previous):
            self._sync.replace(previous.item, previous_handle)
        if self._handles.find_bound_identifier(previous.item) is None:
            bind_version_identifier(self._handles, previous.item, previous_handle)
            _LOGGER.warning(
                "legacy_version_handle_repaired",
                object_id=previous.item.object_id,
                handle=previous_handle,
            )

    def _register_identifier(self, item: ContentRef, identifier: str) -> str:
        if not item.versionable:
            self._handles.create(item, identifier)
            return identifier
        parsed = parse_identifier(identifier)
        if parsed.version is None:
            history = self._history_bound_to(identifier)
            if history is None:
                self._handles.create(item, identifier)
                self._sync.populate(item)
                return identifier
            return self._resurrect_latest(item, identifier, history)
        canonical_item = self._handles.resolve_to_object(parsed.canonical)
        history = self._history_of(canonical_item) if canonical_item is not None else None
        if history is None:
            restore_as_canonical(self._collaborators, self._sync, item, identifier)
        else:
            restore_as_version(
                self._collaborators, self._sync, item, identifier, parsed.canonical, history
            )
        return identifier

    def _resurrect_latest(self, item: ContentRef, canonical: str, history: VersionHistory) -> str:
        latest = self._histories.latest(history)
        latest_handle = self._handles.find_bound_identifier(latest.item)
        if latest_handle is not None and canonical_of(latest_handle) != canonical:
            # TODO: decide whether to reject imports whose canonical handle
            # disagrees with the history they resolve into.
            _LOGGER.warning(
                "restore_canonical_mismatch",
                object_id=item.object_id,
                canonical=canonical,
                latest_handle=latest_handle,
            )
        versioned = compose_identifier(canonical, latest.number + 1)
        restore_as_version(self._collaborators, self._sync, item, versioned, canonical, history)
        return versioned

    def _repoint_to_previous(self, item: ContentRef) -> None:
        histories = self._histories
        history = histories.find_by_object(item)
        if history is None:
            return
        latest = histories.latest(history)
        if latest.item != item or len(histories.versions(history)) <= 1:
            return
        previous = histories.previous(history, latest)
        if previous is None:
            return
        canonical = work_canonical(self._collaborators, history, previous)
        self._handles.repoint(canonical, previous.item)
        _LOGGER.info(
            "canonical_repointed",
            object_id=previous.item.object_id,
            canonical=canonical,
            removed_object_id=item.object_id,
        )

    def _history_bound_to(self, identifier: str) -> VersionHistory | None:
        bound = self._handles.resolve_to_object(identifier)
        if bound is None:
            return None
        return self._history_of(bound)

    def _history_of(self, item: ContentRef) -> VersionHistory | None:
        if not item.versionable:
            return None
        return self._histories.find_by_object(item)

    def _fail(self, operation: str, item: ContentRef, error: Exception) -> NoReturn:
        if isinstance(error, IdentifierMintError):
            raise error
        _LOGGER.error(
            "handle_operation_failed",
            operation=operation,
            object_id=item.object_id,
            error=str(error),
        )
        raise IdentifierMintError(
            f"Error while attempting to {operation} identifier for object '{item.object_id}'.",
            object_id=item.object_id,
        ) from error
