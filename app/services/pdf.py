import io

import structlog
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from app.errors import PdfExtractionError

logger = structlog.get_logger()


def extract_text_from_pdf(content: bytes) -> str:
    """Extract the text layer of every page and return it trimmed."""
    try:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted:
            reader.decrypt("")
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
    except (PyPdfError, ValueError, KeyError, NotImplementedError) as e:
        logger.warning("pdf_parse_failed", error=str(e), size_bytes=len(content))
        raise PdfExtractionError() from e

    text = text.strip()
    if not text:
        logger.warning("pdf_has_no_text", size_bytes=len(content))
        raise PdfExtractionError("No extractable text found in PDF")
    return text
