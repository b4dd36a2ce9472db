"""Handle registry backed by the repository state document.

Each handle is bound to exactly one object. Each object additionally
records its own handle: the one created for it, which moves only when
a newer handle is created for the same object.
"""

from __future__ import annotations

from typing import Any, cast

from core.constants import HANDLE_SEPARATOR
from core.errors import HandleStoreError
from core.logging_config import get_logger
from core.types import ContentRef

_LOGGER = get_logger(__name__)


class HandleRegistry:
    """Handle-to-object bindings with sequential minting."""

    def __init__(self, state: dict[str, Any], prefix: str) -> None:
        """Initialize registry over shared state.

        Args:
            state: Repository state document.
            prefix: Naming authority for minted handles.
        """
        self._state = state
        self._prefix = prefix

    @property
    def _bindings(self) -> dict[str, dict[str, str]]:
        return cast(dict[str, dict[str, str]], self._state["handles"])

    @property
    def _own_handles(self) -> dict[str, str]:
        return cast(dict[str, str], self._state["object_handles"])

    def create(
        self,
        item: ContentRef,
        handle: str | None = None,
        force_overwrite: bool = False,
    ) -> str:
        """Bind a new handle to ``item``.

        Args:
            item: Object to bind.
            handle: Handle to bind; a fresh ``prefix/N`` when omitted.
            force_overwrite: Take the handle from another object.

        Returns:
            The bound handle.

        Raises:
            HandleStoreError: If the handle belongs to another object and
                overwriting is not forced.
        """
        if handle is None:
            handle = self._next_handle()
        holder = self._holder(handle)
        if holder is not None and holder != item.object_id:
            if not force_overwrite:
                raise HandleStoreError(
                    f"Handle '{handle}' is already bound to object '{holder}'. "
                    "Choose another handle or force the overwrite."
                )
            self._release(holder, handle)
            _LOGGER.warning(
                "handle_overwritten",
                handle=handle,
                previous_object_id=holder,
                object_id=item.object_id,
            )
        self._bind(handle, item)
        self._own_handles[item.object_id] = handle
        return handle

    def resolve_to_object(self, handle: str) -> ContentRef | None:
        """Return the object bound to ``handle``, if any."""
        binding = self._bindings.get(handle)
        if binding is None:
            return None
        return ContentRef(object_id=binding["object_id"], kind=binding["kind"])

    def find_bound_identifier(self, item: ContentRef) -> str | None:
        """Return the object's own handle, if any."""
        return self._own_handles.get(item.object_id)

    def repoint(self, handle: str, item: ContentRef) -> None:
        """Bind ``handle`` to ``item``, creating the binding when absent."""
        holder = self._holder(handle)
        if holder is not None and holder != item.object_id:
            self._release(holder, handle)
        self._bind(handle, item)
        self._own_handles.setdefault(item.object_id, handle)
        _LOGGER.debug("handle_repointed", handle=handle, object_id=item.object_id, previous_object_id=holder)

    def forget_object(self, item: ContentRef) -> None:
        """Drop the object's own handle record; its bindings stay resolvable."""
        self._own_handles.pop(item.object_id, None)

    def handles_of(self, item: ContentRef) -> list[str]:
        """Return every handle currently bound to ``item``, sorted."""
        return sorted(
            handle
            for handle, binding in self._bindings.items()
            if binding["object_id"] == item.object_id
        )

    def _next_handle(self) -> str:
        while True:
            self._state["handle_sequence"] = int(self._state["handle_sequence"]) + 1
            handle = f"{self._prefix}{HANDLE_SEPARATOR}{self._state['handle_sequence']}"
            if handle not in self._bindings:
                return handle

    def _holder(self, handle: str) -> str | None:
        binding = self._bindings.get(handle)
        return binding["object_id"] if binding is not None else None

    def _bind(self, handle: str, item: ContentRef) -> None:
        self._bindings[handle] = {"object_id": item.object_id, "kind": item.kind}

    def _release(self, object_id: str, handle: str) -> None:
        if self._own_handles.get(object_id) == handle:
            del self._own_handles[object_id]
