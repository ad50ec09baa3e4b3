"""
Shared fixtures for the envelope template tests.

Templates and PDFs are written to tmp_path so every test works on its
own copy of the files.
"""

import sys
from pathlib import Path

import pytest
import yaml
from pypdf import PdfWriter

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from envelope_templates import IdentifierAllocator


TEMPLATE_NAME = "template_name"


@pytest.fixture
def write_template(tmp_path):
    """Write template data as YAML into tmp_path and return the directory."""
    def _write(data, name=TEMPLATE_NAME, extension="yml"):
        path = tmp_path / f"{name}.{extension}"
        path.write_text(yaml.safe_dump(data, sort_keys=False))
        return tmp_path
    return _write


@pytest.fixture
def write_pdf(tmp_path):
    """Write a blank letter-size PDF into tmp_path and return its bytes."""
    def _write(name="some_path.pdf", pages=1):
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        path = tmp_path / name
        with open(path, "wb") as handle:
            writer.write(handle)
        return path.read_bytes()
    return _write


@pytest.fixture
def allocator():
    """A fresh allocator so document ids start at 1 in every test."""
    return IdentifierAllocator()


@pytest.fixture
def template_data():
    """Two signers, one carbon copy and a single document, no fields."""
    return {
        "name": TEMPLATE_NAME,
        "template_options": {"some": "template", "options": True},
        "recipients": {
            "signers": [
                {
                    "recipient_id": str(index + 1),
                    "role_name": f"signer_{index}",
                    "pdf_fields": {},
                    "tabs": {},
                }
                for index in range(2)
            ],
            "carbon_copies": [
                {
                    "recipient_id": "123",
                    "role_name": "test",
                    "pdf_fields": {},
                    "tabs": {},
                }
            ],
        },
        "documents": [
            {"document_id": "42", "name": "some-name.pdf", "path": "some_path.pdf"}
        ],
    }


def text_field(label="Buyer Name", value=None, document_id="42", **extra):
    """Raw text tab definition as found in a template."""
    data = {
        "tab_type": "text",
        "tab_label": label,
        "document_id": document_id,
        "page_number": "1",
        "x_position": "100",
        "y_position": "200",
    }
    if value is not None:
        data["value"] = value
    data.update(extra)
    return data


def signature_tab(document_id="42", **extra):
    data = {
        "tab_type": "signhere",
        "tab_label": "Signature",
        "document_id": document_id,
        "page_number": "1",
        "x_position": "300",
        "y_position": "600",
    }
    data.update(extra)
    return data
