"""Descriptive URI synchronization.

Content objects advertise their handle as a resolver URL in their
descriptive metadata. Current versions advertise the canonical handle;
a first version that received its own ``X.1`` handle advertises that.
"""

from __future__ import annotations

from core.identifier_format import canonical_of, canonical_url
from core.logging_config import get_logger
from core.types import ContentRef
from identifiers.interfaces import HandleResolver, MetadataSynchronizer

_LOGGER = get_logger(__name__)


class HandleMetadataSync:
    """Writes resolver URLs into object metadata."""

    def __init__(
        self,
        handles: HandleResolver,
        metadata: MetadataSynchronizer,
        canonical_url_prefix: str,
    ) -> None:
        self._handles = handles
        self._metadata = metadata
        self._canonical_url_prefix = canonical_url_prefix

    def populate(self, item: ContentRef) -> None:
        """Advertise the canonical form of the object's own handle.

        Existing URIs are kept; the synchronizer ignores duplicates.
        """
        handle = self._handles.find_bound_identifier(item)
        if handle is None:
            _LOGGER.warning("metadata_sync_skipped", object_id=item.object_id, reason="no_handle")
            return
        uri = canonical_url(self._canonical_url_prefix, canonical_of(handle))
        self._metadata.set_descriptive_uri(item, uri)

    def replace(self, item: ContentRef, handle: str) -> None:
        """Replace every advertised URI with the URL of ``handle``."""
        uri = canonical_url(self._canonical_url_prefix, handle)
        self._metadata.clear_descriptive_uri(item)
        self._metadata.set_descriptive_uri(item, uri)
        _LOGGER.info("metadata_uri_replaced", object_id=item.object_id, uri=uri)
