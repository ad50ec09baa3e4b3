"""
Template Fields

A Field wraps one tab definition from a template: a PDF form field
(text, checkbox, radio group, list) or an annotation mark (signature,
initials). Radio groups and lists own their radios / list items as
child Fields.

Tab positions in downloaded templates are systematically off for PDF
fields, so positions are corrected once on construction and the original
values are restored when the field is uploaded again as a raw tab.
"""

import copy
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 10
DEFAULT_FONT_COLOR = 'black'

# (x, y) offsets applied to PDF fields and radios on load
PDF_FIELD_CORRECTION = (3, 1)


class FieldType(str, Enum):
    """Tab types as they appear in `tab_type`."""
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO_GROUP = "radiogroup"
    SSN = "ssn"
    LIST = "list"
    SIGNATURE = "signhere"
    INITIAL = "initialhere"


def _to_int(value: Any) -> int:
    """Lenient integer parsing: "12", "12.5" and 12 all give 12, junk gives 0."""
    if value is None:
        return 0
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return 0


class Field:
    """
    One tab on one document.

    Attributes:
        data: Owned copy of the tab definition (positions already corrected)
        template: Template used to resolve the owning document
        disabled: Disabled fields are neither rendered nor uploaded
    """

    def __init__(self, data: Dict[str, Any], template=None, is_radio: bool = False):
        self.data = copy.deepcopy(data)
        self.template = template
        self.disabled = False
        self._is_radio = is_radio
        self._uploadable = False

        self._radios = self._build_children('radios') if self.is_radio_group else []
        self._list_items = self._build_children('list_items') if self.is_list else []

        self._original_positions = self._correct_positions()

    def __repr__(self) -> str:
        return f"<Field {self.tab_type} {self.label!r}>"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> Dict[str, Any]:
        """Build the composite template tab entry for this field."""
        entry = dict(self.data)
        entry['document_id'] = self.document_id

        if self.is_radio_group:
            entry['radios'] = [radio.serialize() for radio in self.radios]
        elif self.is_list:
            entry.update(self._original_positions)
            entry['list_items'] = [item.serialize() for item in self.list_items]
        elif self.is_pdf_field or self.is_radio:
            # PDF fields need positions un-corrected when uploaded
            entry.update(self._original_positions)

        return entry

    def merge(self, other_data: Dict[str, Any]) -> None:
        self.data.update(other_data)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    @property
    def value(self) -> Any:
        if self.is_checkbox:
            return self.selected
        if self.is_radio_group or self.is_list:
            item = self.selected_item
            return item.value if item else None
        return self.data.get('value')

    @value.setter
    def value(self, new_value: Any) -> None:
        if self.is_checkbox:
            self.data['selected'] = 'true' if self._as_bool(new_value) else 'false'
        elif self.is_radio_group or self.is_list:
            # Select the matching child, deselect everything else
            wanted = str(new_value)
            for child in self.children:
                child.data['selected'] = 'true' if child.value == wanted else 'false'
        else:
            self.data['value'] = str(new_value)

    @staticmethod
    def _as_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() == 'true'
        return bool(value)

    @property
    def selected(self) -> bool:
        return str(self.data.get('selected')).lower() == 'true'

    @property
    def selected_item(self) -> Optional['Field']:
        return next((child for child in self.children if child.selected), None)

    @property
    def uploadable(self) -> bool:
        """Whether the field is sent as a tab instead of being burned into the PDF."""
        if self.is_pdf_field:
            return self._uploadable
        return True

    @uploadable.setter
    def uploadable(self, flag: Any) -> None:
        self._uploadable = bool(flag)
        locked = 'true' if self._uploadable else 'false'

        if self.is_radio_group:
            for radio in self.radios:
                radio.data['locked'] = locked
        else:
            self.data['locked'] = locked

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def tab_type(self) -> str:
        return str(self.data.get('tab_type') or '').lower()

    @property
    def label(self) -> Optional[str]:
        return self.data.get('group_name') or self.data.get('tab_label')

    @property
    def name(self) -> Optional[str]:
        return self.data.get('name') or self.data.get('text')

    @property
    def recipient_id(self) -> Optional[str]:
        return self.data.get('recipient_id')

    @property
    def original_document_id(self) -> Any:
        """The document_id as configured in the template, used to find the document."""
        return self.data.get('document_id')

    @property
    def document(self):
        """The owning Document, or None when the reference does not resolve."""
        if self.template is None or self.original_document_id is None:
            return None

        document = self.template.document_for_original_id(self.original_document_id)
        if document is None:
            logger.debug(f"No document matches id {self.original_document_id!r} for {self!r}")
        return document

    @property
    def document_id(self) -> Optional[int]:
        """The document_id as emitted in serialize()."""
        document = self.document
        return document.document_id if document else None

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def x(self) -> int:
        return _to_int(self.data.get('x_position'))

    @property
    def y(self) -> int:
        return _to_int(self.data.get('y_position'))

    @property
    def width(self) -> int:
        # some fields only list height
        if self.data.get('width') is not None:
            return _to_int(self.data['width'])
        return self.height

    @property
    def height(self) -> int:
        height = _to_int(self.data.get('height'))
        return height if height else self.font_size

    @property
    def font_size(self) -> int:
        font_size = self.data.get('font_size')
        if not font_size:
            return DEFAULT_FONT_SIZE
        return _to_int(str(font_size).replace('size', ''))

    @property
    def font_color(self) -> str:
        return str(self.data.get('font_color') or DEFAULT_FONT_COLOR)

    @property
    def page_number(self) -> int:
        if self.is_radio_group and self.radios:
            return self.radios[0].page_number
        return _to_int(self.data.get('page_number'))

    @property
    def page_index(self) -> int:
        return self.page_number - 1

    # ------------------------------------------------------------------
    # Kinds
    # ------------------------------------------------------------------

    @property
    def is_radio(self) -> bool:
        return self._is_radio

    @property
    def is_radio_group(self) -> bool:
        return self.tab_type == FieldType.RADIO_GROUP

    @property
    def is_checkbox(self) -> bool:
        return self.tab_type == FieldType.CHECKBOX

    @property
    def is_text(self) -> bool:
        return self.tab_type in (FieldType.TEXT, FieldType.SSN)

    @property
    def is_list(self) -> bool:
        return self.tab_type == FieldType.LIST

    @property
    def is_pdf_field(self) -> bool:
        return self.is_radio_group or self.is_checkbox or self.is_text or self.is_list

    @property
    def is_signature(self) -> bool:
        return self.tab_type in (FieldType.SIGNATURE, FieldType.INITIAL)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    @property
    def radios(self) -> List['Field']:
        return self._radios

    @property
    def list_items(self) -> List['Field']:
        return self._list_items

    @property
    def children(self) -> List['Field']:
        return self._radios or self._list_items

    def _build_children(self, key: str) -> List['Field']:
        return [Field(child, self.template, is_radio=True) for child in self.data.get(key) or []]

    def _correct_positions(self) -> Dict[str, str]:
        """Shift positions in place and return the original values."""
        x_correction, y_correction = (
            PDF_FIELD_CORRECTION if self.is_pdf_field or self.is_radio else (0, 0)
        )
        original_positions = {}

        if self.data.get('x_position') is not None:
            old_x = self.x
            self.data['x_position'] = str(old_x + x_correction)
            original_positions['x_position'] = str(old_x)

        if self.data.get('y_position') is not None:
            old_y = self.y
            self.data['y_position'] = str(old_y + y_correction)
            original_positions['y_position'] = str(old_y)

        return original_positions
