"""
Resume File Store - validate, write, read and delete uploaded resumes.

Resumes are PDFs stored on local disk under settings.upload_dir. The stored
path is what an applicant record keeps in its `resume` field.

Files are written before the applicant record exists, so every failure
path after save_resume() must call clear_resume(). Deletion is best-effort:
a failure is logged, never raised.
"""

import io
import logging
import os
import uuid
from PyPDF2 import PdfReader
from fastapi import UploadFile, HTTPException

from jobboard.core.config import get_settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.pdf'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def get_upload_dir() -> str:
    upload_dir = get_settings().upload_dir
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def validate_pdf(content: bytes) -> int:
    """Check the bytes are a readable PDF. Returns the page count."""
    try:
        pages = len(PdfReader(io.BytesIO(content)).pages)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")
    if pages == 0:
        raise HTTPException(status_code=400, detail="Resume PDF has no pages")
    return pages


async def save_resume(file: UploadFile) -> str:
    """
    Validate an uploaded resume and write it to the upload directory.

    Returns:
        Stored file path (forward slashes), to be kept on the applicant record

    Raises:
        HTTPException on validation errors (nothing is written in that case)
    """
    settings = get_settings()

    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF"
        )

    content = await file.read()

    if len(content) > settings.max_resume_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_resume_size_mb}MB"
        )

    validate_pdf(content)

    stored_name = f"{uuid.uuid4().hex}-{os.path.basename(file.filename)}"
    path = os.path.join(get_upload_dir(), stored_name).replace("\\", "/")
    with open(path, "wb") as out:
        out.write(content)

    logger.debug("Stored resume %s (%d bytes)", path, len(content))
    return path


def clear_resume(path: str) -> bool:
    """
    Delete a resume file. Never raises.
    Returns True if the file was removed.
    """
    if not path:
        return False
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.warning("Could not delete resume file %s: %s", path, e)
        return False


def resume_exists(path: str) -> bool:
    return bool(path) and os.path.isfile(path)
