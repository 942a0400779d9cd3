import io
from unittest.mock import MagicMock, patch

import pytest
from pypdf import PdfWriter

from app.errors import PdfExtractionError
from app.services.pdf import extract_text_from_pdf


def blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


class TestExtractTextFromPdf:
    @patch("app.services.pdf.PdfReader")
    def test_joins_pages_and_trims(self, mock_reader):
        page_one, page_two = MagicMock(), MagicMock()
        page_one.extract_text.return_value = "  Chapter 1"
        page_two.extract_text.return_value = "Chapter 2  \n"
        mock_reader.return_value = MagicMock(is_encrypted=False, pages=[page_one, page_two])

        assert extract_text_from_pdf(b"%PDF-fake") == "Chapter 1\nChapter 2"

    def test_pdf_without_text_layer(self):
        with pytest.raises(PdfExtractionError) as exc_info:
            extract_text_from_pdf(blank_pdf())
        assert exc_info.value.status_code == 500

    def test_unreadable_bytes(self):
        with pytest.raises(PdfExtractionError):
            extract_text_from_pdf(b"")
