"""
Envelope Templates

Turns YAML envelope templates (documents, recipients and the tabs placed
on them) into composite template entries for an e-signature API, with
the PDFs either inline as base64 or as separate multipart parts.

Usage:
    from envelope_templates import Template

    template = Template('templates', 'listing-agreement')
    entry = template.serialize_composite_entry({'signers': template.signers}, 1)
"""

from .exceptions import (
    TemplateError,
    ConfigurationError,
    PdfRenderError
)

from .identifiers import IdentifierAllocator, default_allocator, unique_document_id
from .field import Field, FieldType
from .document import Document
from .recipient import Recipient
from .template import Template
from .loader import load_template, normalize_keys
from .pdf_writer import apply_fields
from .multipart import build_multipart_request, collect_parts

__all__ = [
    # Exceptions
    'TemplateError',
    'ConfigurationError',
    'PdfRenderError',

    # Identifiers
    'IdentifierAllocator',
    'default_allocator',
    'unique_document_id',

    # Model
    'Field',
    'FieldType',
    'Document',
    'Recipient',
    'Template',

    # Loading and output
    'load_template',
    'normalize_keys',
    'apply_fields',
    'build_multipart_request',
    'collect_parts',
]
