"""
PDF handling for uploads: type check and text extraction.
"""
import logging

from pypdf import PdfReader

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = 'application/pdf'


class ExtractionError(Exception):
    """Raised when no text can be read from an uploaded PDF."""


def is_pdf(uploaded_file) -> bool:
    content_type = getattr(uploaded_file, 'content_type', '') or ''
    name = getattr(uploaded_file, 'name', '') or ''
    return content_type == PDF_CONTENT_TYPE or name.endswith('.pdf')


def extract_text_from_pdf(uploaded_file) -> str:
    """
    Read every page of the uploaded PDF and return the text, one page per line.

    Any failure from the reader is re-raised as ExtractionError carrying the
    reader's message, which is what the user sees.
    """
    try:
        uploaded_file.seek(0)
        reader = PdfReader(uploaded_file)
        pages = [page.extract_text() or '' for page in reader.pages]
    except Exception as e:
        logger.warning("PDF extraction failed for %s: %s", getattr(uploaded_file, 'name', '?'), e)
        raise ExtractionError(str(e) or "Could not read the PDF file.") from e
    text = "\n".join(pages)
    logger.info("Extracted %d characters from %d pages", len(text), len(pages))
    return text
