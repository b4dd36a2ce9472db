"""Python SDK for handle operations.

This module exposes high-level APIs for creating objects and versions,
assigning and resolving handles, deleting versions, and replaying
restore manifests. Every call runs in its own repository session.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import HandleConfig
from core.constants import DEFAULT_OBJECT_KIND, NEW_VERSION_COMMENT
from core.errors import HandleStoreError
from core.logging_config import get_logger
from core.restore_manifest import load_restore_manifest
from core.types import ObjectRecord, Resolution, Version
from store.session import open_session

_LOGGER = get_logger(__name__)


class HandleClient:
    """Primary SDK entry point for handle workflows."""

    def __init__(self, config: HandleConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or HandleConfig.from_env()

    @property
    def config(self) -> HandleConfig:
        """Configuration used by this client."""
        return self._config

    def with_data_root(self, data_root: str) -> "HandleClient":
        """Clone the client with a different data root."""
        resolved_root = Path(data_root).expanduser().resolve()
        return HandleClient(replace(self._config, data_root=resolved_root))

    def create_object(self, object_id: str, kind: str = DEFAULT_OBJECT_KIND) -> str:
        """Create a content object and register a handle for it.

        Returns:
            The handle assigned to the new object.
        """
        with open_session(self._config) as session:
            item = session.catalog.create(object_id, kind)
            return session.provider.register(item)

    def create_version(
        self,
        previous_object_id: str,
        object_id: str,
        comment: str = NEW_VERSION_COMMENT,
    ) -> str:
        """Create ``object_id`` as the next version of a work.

        Args:
            previous_object_id: Any existing version of the work.
            object_id: Identity of the new version's object.
            comment: Version summary.

        Returns:
            The versioned handle assigned to the new object.
        """
        with open_session(self._config) as session:
            previous_item = session.catalog.get(previous_object_id)
            if not previous_item.versionable:
                raise HandleStoreError(
                    f"Object '{previous_object_id}' is a {previous_item.kind}; "
                    "only items can have versions."
                )
            item = session.catalog.create(object_id, previous_item.kind)
            session.histories.add_next_version(previous_item, item, comment)
            return session.provider.register(item)

    def mint(self, object_id: str) -> str:
        """Return the object's handle, creating one without moving canonicals."""
        with open_session(self._config) as session:
            return session.provider.mint(session.catalog.get(object_id))

    def register(self, object_id: str, identifier: str | None = None) -> str:
        """Register an existing object, optionally with a supplied handle."""
        with open_session(self._config) as session:
            return session.provider.register(session.catalog.get(object_id), identifier)

    def reserve(self, object_id: str, identifier: str) -> None:
        """Bind a handle to an object without version handling."""
        with open_session(self._config) as session:
            session.provider.reserve(session.catalog.get(object_id), identifier)

    def resolve(self, identifier: str) -> Resolution:
        """Resolve a handle, ``hdl:`` form, or resolver URL."""
        with open_session(self._config) as session:
            return session.provider.resolve_identifier(identifier)

    def lookup(self, object_id: str) -> str:
        """Return the handle bound to an object."""
        with open_session(self._config) as session:
            return session.provider.lookup(session.catalog.get(object_id))

    def supports(self, identifier: str) -> bool:
        """Return whether an identifier looks like a handle."""
        with open_session(self._config) as session:
            return session.provider.supports(identifier)

    def delete(self, object_id: str) -> None:
        """Remove an object, moving its work's canonical handle if needed.

        The object's own versioned handle stays registered and resolvable,
        but a later object reusing the id does not inherit it.
        """
        with open_session(self._config) as session:
            item = session.catalog.get(object_id)
            session.provider.delete(item)
            session.histories.remove_version(item)
            session.handles.forget_object(item)
            session.catalog.remove(item)
        _LOGGER.info("object_deleted", object_id=object_id)

    def history(self, object_id: str) -> list[Version]:
        """Return every version of the object's work, oldest first."""
        with open_session(self._config) as session:
            item = session.catalog.get(object_id)
            history = session.histories.find_by_object(item)
            if history is None:
                return []
            return session.histories.versions(history)

    def describe(self, object_id: str) -> ObjectRecord:
        """Return the object's own handle, every bound handle, and descriptive URIs."""
        with open_session(self._config) as session:
            item = session.catalog.get(object_id)
            return ObjectRecord(
                ref=item,
                descriptive_uris=session.catalog.descriptive_uris(item),
                handle=session.handles.find_bound_identifier(item),
                bound_handles=tuple(session.handles.handles_of(item)),
            )

    def restore(self, manifest_path: str) -> tuple[str, ...]:
        """Replay a restore manifest in one session.

        Missing objects are created. Any failing entry discards every
        change made by the manifest.

        Args:
            manifest_path: Path to YAML restore manifest.

        Returns:
            Handles bound to each entry, in manifest order.
        """
        manifest = load_restore_manifest(manifest_path)
        bound: list[str] = []
        with open_session(self._config) as session:
            for entry in manifest.entries:
                item = session.catalog.find(entry.object_id)
                if item is None:
                    item = session.catalog.create(entry.object_id, entry.kind)
                bound.append(session.provider.register(item, entry.identifier))
        _LOGGER.info("restore_manifest_applied", path=manifest_path, entries=len(bound))
        return tuple(bound)
