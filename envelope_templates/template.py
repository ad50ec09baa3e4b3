"""
Envelope Template

Loads a template definition and assembles composite template entries
for the signing API from its documents and recipients.

Usage:
    template = Template('path/to/templates', 'purchase-agreement')

    signer = template.recipient_for_role('buyer')
    signer.field_for_label('Buyer Name').value = 'Jane Doe'

    entry = template.serialize_composite_entry({'signers': [signer]}, 1)

    # or, with the PDFs as separate multipart parts
    entry, parts = template.serialize_composite_entry(
        {'signers': [signer]}, 1, multipart=True
    )
"""

import logging
import os
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .document import Document, PdfRenderer
from .field import Field
from .identifiers import IdentifierAllocator
from .loader import load_template
from .recipient import Recipient

logger = logging.getLogger(__name__)

CompositeEntry = Dict[str, Any]
DocumentPart = Dict[str, Any]


class Template:
    """
    A loaded template: recipients grouped by type plus ordered documents.

    Attributes:
        base_directory: Absolute directory of the template file and its PDFs
        template_name: Template file name without extension
        data: Loaded template data
        recipients: Recipient type (e.g. "signers") -> Recipients
        documents: Documents in declaration order
    """

    def __init__(
        self,
        base_directory: str,
        template_name: str,
        allocator: Optional[IdentifierAllocator] = None,
        pdf_renderer: Optional[PdfRenderer] = None
    ):
        self.base_directory = os.path.abspath(base_directory)
        self.template_name = template_name
        self._allocator = allocator
        self._pdf_renderer = pdf_renderer
        self.data = load_template(self.base_directory, template_name)

        self.recipients = self._parse_recipients()
        self.documents = self._parse_documents()
        self._documents_by_original_id = self._index_documents()

        logger.info(
            f"Loaded template '{template_name}' with {len(self.documents)} document(s) "
            f"and {sum(len(r) for r in self.recipients.values())} recipient(s)"
        )

    @property
    def name(self) -> Optional[str]:
        return self.data.get('name')

    @property
    def template_options(self) -> Optional[Dict[str, Any]]:
        return self.data.get('template_options')

    @property
    def signers(self) -> List[Recipient]:
        return self.recipients.get('signers') or []

    def document_for_original_id(self, original_document_id: Any) -> Optional[Document]:
        """Find the document declared with the given template document_id."""
        return self._documents_by_original_id.get(str(original_document_id))

    def recipients_for_roles(self, roles) -> List[Recipient]:
        """All recipients whose role is in `roles`, regardless of type."""
        return [
            recipient
            for type_recipients in self.recipients.values()
            for recipient in type_recipients
            if recipient.role_name in roles
        ]

    def recipient_for_role(self, role: str) -> Optional[Recipient]:
        return next(
            (
                recipient
                for type_recipients in self.recipients.values()
                for recipient in type_recipients
                if recipient.role_name == role
            ),
            None
        )

    def iter_recipient_tabs(self, recipients: List[Recipient]) -> Iterator[Field]:
        """Yield every tab, then every field, of each recipient in turn."""
        for recipient in recipients:
            for tabs in recipient.tabs.values():
                yield from tabs
            for fields in recipient.fields.values():
                yield from fields

    def for_each_recipient_tab(self, recipients: List[Recipient], visit: Callable[[Field], Any]) -> None:
        for field in self.iter_recipient_tabs(recipients):
            visit(field)

    def serialize_composite_entry(
        self,
        recipients: Dict[str, List[Recipient]],
        sequence: Any,
        multipart: bool = False
    ) -> Union[CompositeEntry, Tuple[CompositeEntry, List[DocumentPart]]]:
        """
        Build one composite template entry.

        Args:
            recipients: Recipient type (e.g. "signers") -> Recipients to include
            sequence: Position of this entry in the envelope
            multipart: Leave PDFs out of the entry and return them separately

        Returns:
            The entry, or (entry, parts) in multipart mode where each part is
            {'id': document_id, 'filename': name, 'data': pdf bytes}
        """
        all_type_recipients = [r for type_recipients in recipients.values() for r in type_recipients]

        composite_entry = {
            'sequence': str(sequence),
            'recipients': self._serialize_recipients(recipients),
            'documents': [
                document.serialize(all_type_recipients, multipart=multipart)
                for document in self.documents
            ]
        }

        if not multipart:
            return composite_entry

        document_data = []
        for document, entry in zip(self.documents, composite_entry['documents']):
            document_data.append({
                'id': entry['document_id'],
                'filename': entry.get('name'),
                'data': document.to_pdf(all_type_recipients)
            })

        logger.debug(f"Built multipart entry {sequence} with {len(document_data)} part(s)")
        return composite_entry, document_data

    def _serialize_recipients(self, recipients: Dict[str, List[Recipient]]) -> Optional[Dict[str, Any]]:
        if not recipients:
            return None

        return {
            type_name: [recipient.serialize() for recipient in type_recipients]
            for type_name, type_recipients in recipients.items()
        }

    def _parse_recipients(self) -> Dict[str, List[Recipient]]:
        return {
            type_name: [Recipient(recipient, self) for recipient in type_recipients]
            for type_name, type_recipients in self.data['recipients'].items()
        }

    def _parse_documents(self) -> List[Document]:
        return [
            Document(
                document,
                self.base_directory,
                allocator=self._allocator,
                pdf_renderer=self._pdf_renderer
            )
            for document in self.data['documents']
        ]

    def _index_documents(self) -> Dict[str, Document]:
        index = {}
        for document in self.documents:
            # first declaration wins on duplicate ids
            index.setdefault(str(document.original_document_id), document)
        return index
