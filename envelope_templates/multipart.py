"""
Multipart Envelope Requests

Prepares (but never sends) the multipart/form-data request that carries
an envelope definition as JSON followed by one PDF part per document.
Each PDF part is named after the document_id the composite entries
refer to.

Usage:
    entry, parts = template.serialize_composite_entry(recipients, 1, multipart=True)
    request = build_multipart_request(
        url, {'composite_templates': [entry], 'status': 'sent'}, parts
    )
    requests.Session().send(request)
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

ENVELOPE_PART_NAME = 'envelope_definition'


def collect_parts(results: List[Tuple[Dict[str, Any], List[Dict[str, Any]]]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Split several multipart serialize_composite_entry() results into the
    composite entries and one flat, ordered list of document parts.
    """
    entries = []
    parts = []
    for entry, entry_parts in results:
        entries.append(entry)
        parts.extend(entry_parts)
    return entries, parts


def build_multipart_request(
    url: str,
    envelope_definition: Dict[str, Any],
    parts: List[Dict[str, Any]],
    headers: Optional[Dict[str, str]] = None
) -> requests.PreparedRequest:
    """
    Build the multipart POST for an envelope.

    Args:
        url: Envelope creation endpoint
        envelope_definition: JSON body, typically holding composite entries
        parts: Document parts as returned in multipart mode
        headers: Extra headers such as authorization

    Returns:
        A PreparedRequest ready for requests.Session.send()
    """
    seen_ids = set()
    files = [
        (ENVELOPE_PART_NAME, (None, json.dumps(envelope_definition), 'application/json'))
    ]

    for part in parts:
        document_id = str(part['id'])
        if document_id in seen_ids:
            logger.warning(f"Duplicate document id {document_id} in multipart request")
        seen_ids.add(document_id)

        filename = part.get('filename') or f"document-{document_id}.pdf"
        files.append((document_id, (filename, part['data'], 'application/pdf')))

    request = requests.Request('POST', url, headers=headers or {}, files=files)
    prepared = request.prepare()

    logger.debug(f"Prepared multipart request with {len(parts)} document part(s) for {url}")
    return prepared
