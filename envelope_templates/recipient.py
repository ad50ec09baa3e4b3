"""
Template Recipients

A Recipient is one signer, carbon copy, etc. declared in a template,
together with the tabs assigned to them. Tabs come in two groups:

    pdf_fields: PDF form fields (text, checkbox, radio group, list)
    tabs:       annotation marks (signature, initials, ...)

Both are mappings of tab type (e.g. "text_tabs") to a list of tab
definitions.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from .field import Field

logger = logging.getLogger(__name__)


class Recipient:
    """
    A template recipient and its fields.

    Attributes:
        data: Recipient definition without pdf_fields and tabs
        fields: Tab type -> PDF form Fields
        tabs: Tab type -> annotation Fields
    """

    def __init__(self, data: Dict[str, Any], template=None):
        data = copy.deepcopy(data)
        self.template = template
        self.fields = self._build_fields(data.pop('pdf_fields', None))
        self.tabs = self._build_fields(data.pop('tabs', None))
        self.data = data

        logger.debug(
            f"Built {self!r} with {len(self.all_fields())} field(s) "
            f"and {len(self.all_tabs())} tab(s)"
        )

    def __repr__(self) -> str:
        return f"<Recipient {self.recipient_id} {self.role_name!r}>"

    def _build_fields(self, raw: Optional[Dict[str, List[Dict[str, Any]]]]) -> Dict[str, List[Field]]:
        result = {}
        for tab_type, entries in (raw or {}).items():
            result[tab_type] = [Field(entry, self.template) for entry in entries or []]
        return result

    @property
    def role_name(self) -> Optional[str]:
        return self.data.get('role_name')

    @property
    def recipient_id(self) -> Optional[str]:
        return self.data.get('recipient_id')

    def all_fields(self) -> List[Field]:
        return [field for fields in self.fields.values() for field in fields]

    def all_tabs(self) -> List[Field]:
        return [tab for tabs in self.tabs.values() for tab in tabs]

    def fields_for_document(self, document) -> List[Field]:
        return [field for field in self.all_fields() if field.document is document]

    def tabs_for_document(self, document) -> List[Field]:
        return [tab for tab in self.all_tabs() if tab.document is document]

    def field_for_label(self, label: str) -> Optional[Field]:
        """Find a field or tab by its label (group name or tab label)."""
        return next(
            (field for field in self.all_fields() + self.all_tabs() if field.label == label),
            None
        )

    def serialize(self) -> Dict[str, Any]:
        """
        Build the composite template entry for this recipient.

        Only uploadable, enabled entries are sent as tabs. Everything
        else is burned into the PDF by the document.
        """
        tabs: Dict[str, List[Dict[str, Any]]] = {}

        for groups in (self.tabs, self.fields):
            for tab_type, fields in groups.items():
                entries = [
                    field.serialize() for field in fields
                    if field.uploadable and not field.disabled
                ]
                if entries:
                    tabs.setdefault(tab_type, []).extend(entries)

        entry = dict(self.data)
        entry['tabs'] = tabs
        return entry
