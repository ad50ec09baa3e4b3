"""
Document Identifiers

Hands out the small rotating integer ids that replace the document ids
configured in a template. Multipart uploads need every document in an
envelope to carry a distinct id, even when two composite entries come
from the same template.
"""

import logging
import threading

logger = logging.getLogger(__name__)

# Ids rotate through 1..MAX_DOCUMENT_ID
MAX_DOCUMENT_ID = 999


class IdentifierAllocator:
    """
    Thread-safe rotating id generator.

    Usage:
        allocator = IdentifierAllocator()
        allocator.next()  # 1
        allocator.next()  # 2
    """

    def __init__(self, start: int = 1):
        self._lock = threading.Lock()
        self._last_id = start

    def next(self) -> int:
        """Return the current id and advance, wrapping from 999 back to 1."""
        with self._lock:
            value = self._last_id
            self._last_id = max((self._last_id + 1) % (MAX_DOCUMENT_ID + 1), 1)

        logger.debug(f"Allocated document id {value}")
        return value


# Shared by every Document created without an explicit allocator
default_allocator = IdentifierAllocator()


def unique_document_id() -> int:
    """Convenience wrapper around the process-wide allocator."""
    return default_allocator.next()
