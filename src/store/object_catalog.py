"""Content object catalog with descriptive metadata.

This module stands in for the repository's item store. It records
object kinds and the resolver URIs advertised in each object's
descriptive metadata.
"""

from __future__ import annotations

from typing import Any, cast

from core.constants import DEFAULT_OBJECT_KIND
from core.errors import HandleStoreError
from core.types import ContentRef


class ObjectCatalog:
    """Content objects and their descriptive URIs."""

    def __init__(self, state: dict[str, Any]) -> None:
        self._state = state

    @property
    def _objects(self) -> dict[str, dict[str, Any]]:
        return cast(dict[str, dict[str, Any]], self._state["objects"])

    def create(self, object_id: str, kind: str = DEFAULT_OBJECT_KIND) -> ContentRef:
        """Register a new content object.

        Raises:
            HandleStoreError: If the object id is blank or already used.
        """
        if not object_id.strip():
            raise HandleStoreError("Object id must be a non-empty string.")
        if object_id in self._objects:
            raise HandleStoreError(
                f"Object '{object_id}' already exists. Use a different object id."
            )
        self._objects[object_id] = {"kind": kind, "descriptive_uris": []}
        return ContentRef(object_id=object_id, kind=kind)

    def find(self, object_id: str) -> ContentRef | None:
        """Return the object with ``object_id``, if any."""
        payload = self._objects.get(object_id)
        if payload is None:
            return None
        return ContentRef(object_id=object_id, kind=str(payload["kind"]))

    def get(self, object_id: str) -> ContentRef:
        """Return the object with ``object_id``.

        Raises:
            HandleStoreError: If the object does not exist.
        """
        item = self.find(object_id)
        if item is None:
            raise HandleStoreError(
                f"Object '{object_id}' not found. Create it before assigning handles."
            )
        return item

    def remove(self, item: ContentRef) -> None:
        """Remove an object from the catalog."""
        self._objects.pop(item.object_id, None)

    def descriptive_uris(self, item: ContentRef) -> tuple[str, ...]:
        """Return the URIs advertised by ``item``."""
        return tuple(self._payload(item)["descriptive_uris"])

    def set_descriptive_uri(self, item: ContentRef, uri: str) -> None:
        """Advertise ``uri`` unless it is already present."""
        uris = cast(list[str], self._payload(item)["descriptive_uris"])
        if uri not in uris:
            uris.append(uri)

    def clear_descriptive_uri(self, item: ContentRef) -> None:
        """Remove every advertised URI."""
        self._payload(item)["descriptive_uris"] = []

    def _payload(self, item: ContentRef) -> dict[str, Any]:
        payload = self._objects.get(item.object_id)
        if payload is None:
            raise HandleStoreError(
                f"Object '{item.object_id}' not found in catalog; cannot update metadata."
            )
        return payload
