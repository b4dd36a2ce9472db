"""Repository unit of work.

A session loads the state document, wires the reference collaborators
and the provider over it, and writes it back only when the block
finishes without raising. A failed operation therefore leaves the
repository exactly as it was.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from core.config import HandleConfig
from core.logging_config import get_logger
from identifiers.provider import VersionedHandleProvider
from store.handle_registry import HandleRegistry
from store.object_catalog import ObjectCatalog
from store.repository_state import read_state, write_state
from store.version_history_store import VersionHistoryStore

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class RepositorySession:
    """Collaborators and provider sharing one state document."""

    handles: HandleRegistry
    histories: VersionHistoryStore
    catalog: ObjectCatalog
    provider: VersionedHandleProvider


@contextmanager
def open_session(config: HandleConfig) -> Iterator[RepositorySession]:
    """Open a unit of work over the repository at ``config.data_root``.

    Args:
        config: Runtime configuration.

    Yields:
        Session whose changes are committed on clean exit.
    """
    state = read_state(config.data_root)
    handles = HandleRegistry(state, config.prefix)
    histories = VersionHistoryStore(state)
    catalog = ObjectCatalog(state)
    provider = VersionedHandleProvider(config, handles, histories, catalog)
    try:
        yield RepositorySession(
            handles=handles,
            histories=histories,
            catalog=catalog,
            provider=provider,
        )
    except Exception as error:
        _LOGGER.warning("session_discarded", data_root=str(config.data_root), error=str(error))
        raise
    write_state(config.data_root, state)
