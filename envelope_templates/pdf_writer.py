"""PDF overlay writer: burns field values into a document using reportlab + pypdf."""

from __future__ import annotations

import logging
from collections import defaultdict
from io import BytesIO

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from .config import Config
from .exceptions import PdfRenderError

logger = logging.getLogger(__name__)

CHECK_MARK = "X"

# Tab font colours that reportlab does not know by name
FONT_COLORS = {
    "brightblue": colors.blue,
    "brightred": colors.red,
    "darkgreen": colors.darkgreen,
    "darkred": colors.darkred,
    "navyblue": colors.navy,
}


def apply_fields(document, recipients) -> bytes:
    """
    Render every recipient's PDF fields on `document` and return the PDF bytes.

    Uploadable fields are sent as tabs instead and disabled fields are
    skipped entirely.
    """
    fields = [
        field
        for recipient in recipients
        for field in document.fields_for_recipient(recipient)
        if not field.disabled and not field.uploadable
    ]
    source = document.blank_pdf_data

    try:
        reader = PdfReader(BytesIO(source))
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)

        fields_by_page = defaultdict(list)
        for field in fields:
            fields_by_page[field.page_index].append(field)

        for page_index, page_fields in sorted(fields_by_page.items()):
            if not 0 <= page_index < len(writer.pages):
                logger.warning(f"Skipping {len(page_fields)} field(s) on missing page {page_index + 1} of {document.path}")
                continue
            page = writer.pages[page_index]
            overlay = PdfReader(_build_overlay(page, page_fields))
            page.merge_page(overlay.pages[0])

        output = BytesIO()
        writer.write(output)
    except Exception as exc:
        raise PdfRenderError(f"Failed to render fields into {document.path}", document_path=document.path) from exc

    logger.debug(f"Rendered {len(fields)} field(s) into {document.path}")
    return output.getvalue()


def _build_overlay(page, fields) -> BytesIO:
    width = float(page.mediabox.width)
    height = float(page.mediabox.height)

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    for field in fields:
        _draw_field(pdf, field, height)
    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    return buffer


def _draw_field(pdf: canvas.Canvas, field, page_height: float) -> None:
    if field.is_radio_group:
        radio = field.selected_item
        if radio is not None:
            _draw_text(pdf, field, CHECK_MARK, page_height, anchor=radio)
    elif field.is_list:
        item = field.selected_item
        text = (item.data.get("text") or item.value) if item is not None else None
        if text not in (None, ""):
            _draw_text(pdf, field, text, page_height)
    elif field.is_checkbox:
        if field.value:
            _draw_text(pdf, field, CHECK_MARK, page_height)
    elif field.value not in (None, ""):
        _draw_text(pdf, field, str(field.value), page_height)


def _draw_text(pdf: canvas.Canvas, field, text, page_height: float, anchor=None) -> None:
    # Tab positions use a top-left origin, reportlab uses bottom-left
    anchor = anchor or field
    baseline = page_height - anchor.y - field.font_size

    pdf.setFont(Config.PDF_FONT, field.font_size)
    pdf.setFillColor(_font_color(field.font_color))
    pdf.drawString(anchor.x, baseline, str(text))


def _font_color(name: str):
    key = name.lower()
    if key in FONT_COLORS:
        return FONT_COLORS[key]
    try:
        return colors.toColor(key)
    except ValueError:
        logger.warning(f"Unknown font color {name!r}, using black")
        return colors.black
