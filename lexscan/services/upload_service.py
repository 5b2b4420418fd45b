"""Upload validation and temporary storage.

An upload is accepted only when both its extension and its declared mimetype
name a PDF, JPEG or PNG. The bytes live in a temporary file for the duration
of one request; `temporary_upload` removes it on every exit path.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import PyPDF2
from flask import current_app
from PIL import Image
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png")
ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|pdf")

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

TYPE_ERROR = "Only PDF and image files are allowed!"
NO_FILE_ERROR = "No file uploaded"
UNREADABLE_ERROR = "Uploaded file is not a readable PDF or image"


class UploadError(Exception):
    """Upload rejected before any analysis work"""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


def size_error(limit: int) -> str:
    return f"File too large. Maximum size is {limit // (1024 * 1024)}MB."


def file_extension(filename: str) -> str:
    return os.path.splitext((filename or "").strip())[1].lower()


def mime_type_for(extension: str) -> str:
    return MIME_TYPES.get(extension, "image/jpeg")


def validate_upload(filename: str, mimetype: str, size: int, limit: int) -> str:
    """Check name, declared type and size; return the normalized extension."""
    ext = file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS or not ALLOWED_TYPES.search((mimetype or "").lower()):
        raise UploadError(TYPE_ERROR)
    if size > limit:
        raise UploadError(size_error(limit))
    return ext


def inspect_upload(path: str, extension: str) -> Dict[str, Any]:
    """Open the stored file with the matching reader and return basic metadata."""
    try:
        if extension == ".pdf":
            reader = PyPDF2.PdfReader(path)
            return {"pages": len(reader.pages)}
        with Image.open(path) as img:
            img.verify()
            return {"width": img.width, "height": img.height}
    except Exception as e:
        raise UploadError(UNREADABLE_ERROR) from e


@contextmanager
def temporary_upload(data: bytes, filename: str, upload_dir: Optional[str] = None) -> Iterator[str]:
    """Write data to a temp file and yield its path; the file is always removed."""
    upload_dir = upload_dir or current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_dir, exist_ok=True)

    safe = secure_filename(filename or "") or "document"
    fd, path = tempfile.mkstemp(prefix="document-", suffix=f"-{safe}", dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.exception("Error deleting temp file %s", path)
