"""Version histories backed by the repository state document.

A history records which object is version N of a logical work.
Numbers are unique within a history and never invented here: forward
creation appends ``latest + 1`` and restores insert the number they
were given.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, cast

from core.constants import NEW_VERSION_COMMENT
from core.errors import HandleStoreError
from core.logging_config import get_logger
from core.types import ContentRef, Version, VersionHistory

_LOGGER = get_logger(__name__)


class VersionHistoryStore:
    """Ordered version histories for content objects."""

    def __init__(self, state: dict[str, Any]) -> None:
        self._state = state

    @property
    def _histories(self) -> dict[str, dict[str, Any]]:
        return cast(dict[str, dict[str, Any]], self._state["histories"])

    def find_by_object(self, item: ContentRef) -> VersionHistory | None:
        """Return the history containing ``item``, if any."""
        for history_id, payload in self._histories.items():
            if any(row["object_id"] == item.object_id for row in payload["versions"]):
                return VersionHistory(history_id=history_id)
        return None

    def create(self) -> VersionHistory:
        """Create an empty history."""
        self._state["history_sequence"] = int(self._state["history_sequence"]) + 1
        history_id = f"history-{self._state['history_sequence']}"
        self._histories[history_id] = {"versions": []}
        _LOGGER.info("history_created", history_id=history_id)
        return VersionHistory(history_id=history_id)

    def versions(self, history: VersionHistory) -> list[Version]:
        """Return versions ordered by number."""
        rows = self._rows(history)
        versions = [_version_from_row(history.history_id, row) for row in rows]
        return sorted(versions, key=lambda version: version.number)

    def version_of(self, history: VersionHistory, item: ContentRef) -> Version | None:
        """Return the version whose object is ``item``."""
        for version in self.versions(history):
            if version.item.object_id == item.object_id:
                return version
        return None

    def previous(self, history: VersionHistory, version: Version) -> Version | None:
        """Return the highest-numbered version below ``version``."""
        earlier = [item for item in self.versions(history) if item.number < version.number]
        return earlier[-1] if earlier else None

    def latest(self, history: VersionHistory) -> Version:
        """Return the highest-numbered version.

        Raises:
            HandleStoreError: If the history has no versions.
        """
        versions = self.versions(history)
        if not versions:
            raise HandleStoreError(f"History '{history.history_id}' has no versions.")
        return versions[-1]

    def is_first(self, history: VersionHistory, version: Version | None) -> bool:
        """Return whether ``version`` is the lowest-numbered version."""
        if version is None:
            return False
        versions = self.versions(history)
        return bool(versions) and versions[0].number == version.number

    def create_version(
        self,
        history: VersionHistory,
        item: ContentRef,
        comment: str,
        timestamp: datetime,
        number: int,
    ) -> Version:
        """Insert ``item`` as version ``number``.

        An existing version with the same number is replaced; restores use
        this to reconcile a history with imported content.

        Raises:
            HandleStoreError: If the number is not positive or the object
                already belongs to another history.
        """
        if number < 1:
            raise HandleStoreError(
                f"Version number {number} is invalid for history '{history.history_id}'. "
                "Version numbers start at 1."
            )
        owner = self.find_by_object(item)
        if owner is not None and owner != history:
            raise HandleStoreError(
                f"Object '{item.object_id}' already belongs to history '{owner.history_id}'."
            )
        rows = self._rows(history)
        replaced = [row for row in rows if row["number"] == number]
        kept = [
            row for row in rows if row["number"] != number and row["object_id"] != item.object_id
        ]
        row = {
            "number": number,
            "object_id": item.object_id,
            "kind": item.kind,
            "comment": comment,
            "created_at": timestamp.isoformat(),
        }
        kept.append(row)
        self._histories[history.history_id]["versions"] = kept
        if replaced:
            _LOGGER.warning(
                "version_replaced",
                history_id=history.history_id,
                number=number,
                previous_object_id=replaced[0]["object_id"],
                object_id=item.object_id,
            )
        return _version_from_row(history.history_id, row)

    def add_next_version(
        self,
        previous_item: ContentRef,
        new_item: ContentRef,
        comment: str = NEW_VERSION_COMMENT,
    ) -> Version:
        """Append ``new_item`` as the next version of ``previous_item``'s work.

        The history is created on first use with ``previous_item`` as
        version 1.
        """
        now = datetime.now(timezone.utc)
        history = self.find_by_object(previous_item)
        if history is None:
            history = self.create()
            self.create_version(history, previous_item, comment, now, 1)
        number = self.latest(history).number + 1
        return self.create_version(history, new_item, comment, now, number)

    def remove_version(self, item: ContentRef) -> None:
        """Drop ``item`` from its history; empty histories are removed."""
        history = self.find_by_object(item)
        if history is None:
            return
        rows = [row for row in self._rows(history) if row["object_id"] != item.object_id]
        if rows:
            self._histories[history.history_id]["versions"] = rows
        else:
            del self._histories[history.history_id]
        _LOGGER.info("version_removed", history_id=history.history_id, object_id=item.object_id)

    def _rows(self, history: VersionHistory) -> list[dict[str, Any]]:
        payload = self._histories.get(history.history_id)
        if payload is None:
            raise HandleStoreError(
                f"History '{history.history_id}' not found. "
                "It may have been removed in this session."
            )
        return cast(list[dict[str, Any]], payload["versions"])


def _version_from_row(history_id: str, row: dict[str, Any]) -> Version:
    return Version(
        history_id=history_id,
        number=int(row["number"]),
        item=ContentRef(object_id=str(row["object_id"]), kind=str(row["kind"])),
        comment=str(row["comment"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
