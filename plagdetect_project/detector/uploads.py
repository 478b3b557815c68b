"""
Turning an uploaded file into a pending Document.
"""
import logging

from django.conf import settings
from django.db import DatabaseError

from .extraction import ExtractionError, extract_text_from_pdf, is_pdf
from .models import Document

logger = logging.getLogger(__name__)

NOT_A_PDF_MESSAGE = "Please select a PDF file (.pdf)."
TOO_LARGE_MESSAGE = "File size exceeds the {limit} MB limit."
UPLOAD_FAILED_MESSAGE = "Error while uploading the document."


class UploadError(Exception):
    """An upload that could not be stored. `message` is shown to the user as is."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def validate_upload(uploaded_file):
    if uploaded_file is None or not is_pdf(uploaded_file):
        raise UploadError(NOT_A_PDF_MESSAGE)
    limit = settings.PLAGDETECT_MAX_UPLOAD_SIZE
    if uploaded_file.size > limit:
        raise UploadError(TOO_LARGE_MESSAGE.format(limit=limit // (1024 * 1024)))


def create_document(user, uploaded_file):
    """
    Validate the file, extract its text and store it as a pending Document.

    Raises UploadError for a wrong file type, an unreadable PDF (with the
    extraction message) or a failed insert (with a generic message).
    """
    validate_upload(uploaded_file)

    try:
        content = extract_text_from_pdf(uploaded_file)
    except ExtractionError as e:
        raise UploadError(str(e)) from e

    try:
        document = Document.objects.create(
            user=user,
            filename=uploaded_file.name,
            file_size=uploaded_file.size,
            content=content,
            status=Document.STATUS_PENDING,
        )
    except DatabaseError as e:
        logger.exception("Could not store document %s for user %s", uploaded_file.name, user.pk)
        raise UploadError(UPLOAD_FAILED_MESSAGE, status_code=500) from e

    logger.info("Document %s uploaded by user %s (%d bytes)", document.pk, user.pk, document.file_size)
    return document
