"""
Field Tests

Covers value handling for each field shape, position correction and
reversal, geometry defaults and serialization.

Run with: python -m pytest tests/test_field.py -v
"""

from types import SimpleNamespace

import pytest

from envelope_templates import Field, FieldType

from conftest import signature_tab, text_field


class StubTemplate:
    """Resolves document ids the same way Template does."""

    def __init__(self, documents=None):
        self.documents = {str(key): value for key, value in (documents or {}).items()}

    def document_for_original_id(self, original_document_id):
        return self.documents.get(str(original_document_id))


@pytest.fixture
def document():
    return SimpleNamespace(document_id=7)


@pytest.fixture
def template(document):
    return StubTemplate({"42": document})


def radio_group(selected=None, document_id="42"):
    return {
        "tab_type": "radiogroup",
        "group_name": "Financing",
        "document_id": document_id,
        "radios": [
            {
                "value": value,
                "document_id": document_id,
                "page_number": "2",
                "x_position": str(10 * (index + 1)),
                "y_position": "50",
                "selected": "true" if value == selected else "false",
            }
            for index, value in enumerate(["cash", "loan", "other"])
        ],
    }


def list_field(selected="2"):
    return {
        "tab_type": "list",
        "tab_label": "Closing Month",
        "document_id": "42",
        "x_position": "5",
        "y_position": "6",
        "list_items": [
            {"text": f"Month {value}", "value": value, "selected": "true" if value == selected else "false"}
            for value in ["1", "2", "3"]
        ],
    }


class TestFieldKinds:
    """Kind predicates derived from tab_type."""

    def test_pdf_field_kinds(self):
        for tab_type in ["text", "ssn", "checkbox", "radiogroup", "list"]:
            assert Field({"tab_type": tab_type}).is_pdf_field

    def test_signature_kinds(self):
        for tab_type in [FieldType.SIGNATURE, FieldType.INITIAL]:
            field = Field({"tab_type": tab_type.value})
            assert field.is_signature
            assert not field.is_pdf_field

    def test_tab_type_is_case_insensitive(self):
        assert Field({"tab_type": "RadioGroup"}).is_radio_group
        assert Field({"tab_type": "signHere"}).is_signature

    def test_children_are_radios(self):
        field = Field(radio_group())
        assert [radio.is_radio for radio in field.radios] == [True, True, True]
        assert not field.is_radio


class TestFieldValues:
    """value / value= for each field shape."""

    def test_text_value(self):
        field = Field(text_field(value="Jane"))
        assert field.value == "Jane"

        field.value = 1234
        assert field.value == "1234"

    def test_text_value_defaults_to_none(self):
        assert Field(text_field()).value is None

    def test_checkbox_value(self):
        field = Field({"tab_type": "checkbox"})
        assert field.value is False

        field.value = True
        assert field.value is True
        assert field.data["selected"] == "true"

        field.value = "false"
        assert field.value is False

        field.value = 1
        assert field.value is True

    def test_selected_reads_yaml_booleans(self):
        assert Field({"tab_type": "checkbox", "selected": True}).selected
        assert not Field({"tab_type": "checkbox", "selected": "no"}).selected

    def test_radio_group_value(self):
        field = Field(radio_group(selected="loan"))
        assert field.value == "loan"
        assert field.selected_item is field.radios[1]

    def test_radio_group_without_selection(self):
        assert Field(radio_group()).value is None

    def test_radio_group_set_value_is_exclusive(self):
        field = Field(radio_group(selected="loan"))

        field.value = "other"

        assert [radio.selected for radio in field.radios] == [False, False, True]
        assert field.value == "other"

    def test_radio_group_set_unknown_value_deselects_all(self):
        field = Field(radio_group(selected="loan"))

        field.value = "barter"

        assert not any(radio.selected for radio in field.radios)
        assert field.value is None

    def test_list_value(self):
        field = Field(list_field(selected="2"))
        assert field.value == "2"

        field.value = 3
        assert field.value == "3"
        assert [item.selected for item in field.list_items] == [False, False, True]


class TestFieldPositions:
    """Correction on load and reversal on serialize."""

    def test_pdf_field_position_corrected(self):
        field = Field(text_field(x_position="100", y_position="200"))
        assert (field.x, field.y) == (103, 201)

    def test_pdf_field_serializes_original_position(self, template):
        field = Field(text_field(x_position="100", y_position="200"), template)
        entry = field.serialize()

        assert entry["x_position"] == "100"
        assert entry["y_position"] == "200"
        # in-memory position stays corrected
        assert (field.x, field.y) == (103, 201)

    def test_signature_position_not_corrected(self, template):
        field = Field(signature_tab(x_position="300", y_position="600"), template)

        assert (field.x, field.y) == (300, 600)
        assert field.serialize()["x_position"] == "300"

    def test_radio_children_corrected_and_restored(self, template):
        field = Field(radio_group(), template)

        assert [radio.x for radio in field.radios] == [13, 23, 33]
        assert [radio["x_position"] for radio in field.serialize()["radios"]] == ["10", "20", "30"]

    def test_list_restores_original_position(self, template):
        field = Field(list_field(), template)
        entry = field.serialize()

        assert (field.x, field.y) == (8, 7)
        assert (entry["x_position"], entry["y_position"]) == ("5", "6")
        assert len(entry["list_items"]) == 3

    def test_list_items_restore_original_position(self, template):
        data = list_field()
        for index, item in enumerate(data["list_items"]):
            item.update(x_position=str(20 + index), y_position="40")
        field = Field(data, template)

        entry = field.serialize()

        assert [item.x for item in field.list_items] == [23, 24, 25]
        assert [item["x_position"] for item in entry["list_items"]] == ["20", "21", "22"]
        assert [item["y_position"] for item in entry["list_items"]] == ["40", "40", "40"]

    def test_radio_group_keeps_corrected_group_position(self, template):
        """Only the radios are un-corrected, the group entry itself is not."""
        data = radio_group()
        data.update(x_position="10", y_position="20")
        field = Field(data, template)

        entry = field.serialize()

        assert (entry["x_position"], entry["y_position"]) == ("13", "21")
        assert entry["radios"][0]["x_position"] == "10"

    def test_missing_position_left_alone(self):
        field = Field({"tab_type": "text"})
        assert "x_position" not in field.data
        assert "x_position" not in field.serialize()

    def test_fractional_positions(self):
        field = Field(text_field(x_position="12.7", y_position=30))
        assert (field.x, field.y) == (15, 31)

    def test_unparseable_positions_treated_as_zero(self):
        field = Field(text_field(x_position="inf", y_position="nan"))
        assert (field.x, field.y) == (3, 1)


class TestFieldGeometry:
    """Width, height, font size and colour defaults."""

    def test_defaults(self):
        field = Field({"tab_type": "text"})

        assert field.font_size == 10
        assert field.height == 10
        assert field.width == 10
        assert field.font_color == "black"

    def test_font_size_descriptor(self):
        assert Field({"tab_type": "text", "font_size": "size14"}).font_size == 14

    def test_height_falls_back_to_font_size_when_zero(self):
        field = Field({"tab_type": "text", "height": "0", "font_size": "size12"})
        assert field.height == 12

    def test_width_falls_back_to_height(self):
        field = Field({"tab_type": "text", "height": "22"})
        assert field.width == 22

    def test_zero_width_is_not_absent(self):
        """Integer and string zero widths agree."""
        assert Field({"tab_type": "text", "height": "22", "width": 0}).width == 0
        assert Field({"tab_type": "text", "height": "22", "width": "0"}).width == 0

    def test_explicit_geometry(self):
        field = Field({"tab_type": "text", "width": "80", "height": "20", "font_color": "brightred"})
        assert (field.width, field.height) == (80, 20)
        assert field.font_color == "brightred"

    def test_page_number(self):
        assert Field(text_field(page_number="3")).page_index == 2
        # radio groups take the page of their first radio
        assert Field(radio_group()).page_number == 2


class TestFieldDocument:
    """Document lookup through the template index."""

    def test_document_resolves(self, template, document):
        field = Field(text_field(document_id="42"), template)

        assert field.document is document
        assert field.document_id == 7
        assert field.serialize()["document_id"] == 7

    def test_document_id_compared_as_string(self, template, document):
        assert Field(text_field(document_id=42), template).document is document

    def test_unresolved_document_is_none(self, template):
        field = Field(text_field(document_id="999"), template)

        assert field.document is None
        assert field.serialize()["document_id"] is None

    def test_no_template(self):
        assert Field(text_field()).document is None


class TestFieldSerialization:
    """Composite template entries for fields."""

    def test_serialize_is_idempotent(self, template):
        field = Field(radio_group(selected="cash"), template)
        assert field.serialize() == field.serialize()

    def test_radio_group_entry(self, template):
        entry = Field(radio_group(), template).serialize()

        assert entry["group_name"] == "Financing"
        assert entry["document_id"] == 7
        assert [radio["document_id"] for radio in entry["radios"]] == [7, 7, 7]

    def test_construction_copies_data(self):
        data = text_field(value="original")
        field = Field(data)

        field.value = "changed"

        assert data["value"] == "original"
        assert data["x_position"] == "100"

    def test_merge(self):
        field = Field(text_field())
        field.merge({"value": "merged", "bold": "true"})
        assert field.value == "merged"
        assert field.data["bold"] == "true"

    def test_label_and_name(self):
        assert Field(radio_group()).label == "Financing"
        assert Field(text_field(label="Price", name="price")).name == "price"


class TestFieldUploadable:
    """Uploadable flag and locked propagation."""

    def test_pdf_fields_default_not_uploadable(self):
        assert not Field(text_field()).uploadable

    def test_signatures_always_uploadable(self):
        field = Field(signature_tab())
        field.uploadable = False
        assert field.uploadable

    def test_set_uploadable_locks_field(self):
        field = Field(text_field())

        field.uploadable = True

        assert field.uploadable
        assert field.data["locked"] == "true"

    def test_set_uploadable_locks_radios(self):
        field = Field(radio_group())

        field.uploadable = "yes"

        assert field.uploadable
        assert [radio.data["locked"] for radio in field.radios] == ["true", "true", "true"]
        assert "locked" not in field.data
