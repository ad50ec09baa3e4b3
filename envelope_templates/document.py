"""
Template Documents

A Document is one PDF of a template plus its declared metadata. It
decides whether the blank PDF can be sent as-is or whether field values
must be burned into it first, and builds its composite template entry.
"""

import base64
import copy
import logging
import os
from typing import Any, Callable, Dict, List, Optional

from .identifiers import IdentifierAllocator, default_allocator
from .pdf_writer import apply_fields

logger = logging.getLogger(__name__)

# (document, recipients) -> PDF bytes
PdfRenderer = Callable[['Document', List[Any]], bytes]


class Document:
    """
    A document in a template.

    Attributes:
        data: Owned copy of the document definition
        base_directory: Directory the document path is relative to
        document_id: Wire id, unique across documents built from one allocator
    """

    def __init__(
        self,
        data: Dict[str, Any],
        base_directory: str,
        allocator: Optional[IdentifierAllocator] = None,
        pdf_renderer: Optional[PdfRenderer] = None
    ):
        self.data = copy.deepcopy(data)
        self.base_directory = base_directory
        self.document_id = (allocator or default_allocator).next()
        self._pdf_renderer = pdf_renderer or apply_fields
        self._blank_pdf_data = None

    def __repr__(self) -> str:
        return f"<Document {self.document_id} {self.data.get('path')!r}>"

    def merge(self, other_data: Dict[str, Any]) -> None:
        self.data.update(other_data)

    def serialize(self, recipients: List[Any], multipart: bool = False) -> Dict[str, Any]:
        """
        Build the composite template entry for this document.

        In multipart mode the PDF travels as a separate part, so the entry
        only carries the document_id the part is matched by.
        """
        entry = {k: v for k, v in self.data.items() if k != 'path'}
        entry['document_id'] = self.document_id

        if not multipart:
            entry['document_base64'] = base64.b64encode(self.to_pdf(recipients)).decode('ascii')

        return entry

    @property
    def path(self) -> str:
        return os.path.join(self.base_directory, self.data['path'])

    @property
    def name(self) -> Optional[str]:
        return self.data.get('name')

    @property
    def original_document_id(self) -> Any:
        """
        The document_id from the template. Never sent on the wire, but used
        to match recipient tabs to this document.
        """
        return self.data.get('document_id')

    def fields_for_recipient(self, recipient) -> List[Any]:
        return recipient.fields_for_document(self)

    def tabs_for_recipient(self, recipient) -> List[Any]:
        return recipient.tabs_for_document(self)

    @property
    def blank_pdf_data(self) -> bytes:
        """Raw file contents, read on first access."""
        if self._blank_pdf_data is None:
            with open(self.path, 'rb') as handle:
                self._blank_pdf_data = handle.read()
            logger.debug(f"Read {len(self._blank_pdf_data)} bytes from {self.path}")
        return self._blank_pdf_data

    def is_static(self, recipients: List[Any]) -> bool:
        # can use the static PDF if recipients only have tabs here
        return all(not self.fields_for_recipient(recipient) for recipient in recipients)

    def to_pdf(self, recipients: List[Any]) -> bytes:
        if self.is_static(recipients):
            logger.debug(f"{self!r} is static, sending blank PDF")
            return self.blank_pdf_data
        return self._pdf_renderer(self, recipients)

    def save_pdf(self, path: str, recipients: List[Any]) -> None:
        with open(path, 'wb') as handle:
            handle.write(self.to_pdf(recipients))
        logger.info(f"Saved {self!r} to {path}")

