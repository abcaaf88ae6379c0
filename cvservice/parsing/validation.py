from __future__ import annotations

from io import BytesIO
from typing import BinaryIO

from cvservice.core.messages import msg
from cvservice.parsing.models import UploadedDocument

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

PDF_MAGIC = b"%PDF-"
PDF_EOF_MARKER = b"%%EOF"
PDF_ENCRYPT_MARKER = b"/Encrypt"

TAIL_WINDOW_BYTES = 1024
HEAD_WINDOW_BYTES = 4096

ALLOWED_CONTENT_TYPES = {"application/pdf", "application/octet-stream"}


class CvValidationError(ValueError):
    def __init__(self, message: str, *, code: str):
        super().__init__(message)
        self.code = code


def _read_window(stream: BinaryIO, offset: int, size: int) -> bytes | None:
    """Read exactly ``size`` bytes at ``offset``; ``None`` when the stream runs short."""
    stream.seek(offset)
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            return None
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _fail(locale: str | None, code: str, **kwargs) -> CvValidationError:
    return CvValidationError(msg(locale, code, **kwargs), code=code)


def validate_pdf_upload(document: UploadedDocument | None, *, locale: str | None = None) -> None:
    """Reject anything that is not a complete, unencrypted PDF within the size ceiling."""
    if document is None or document.declared_length <= 0 or not document.content:
        raise _fail(locale, "missing_file")

    filename = (document.filename or "").strip()
    if not filename.lower().endswith(".pdf"):
        raise _fail(locale, "invalid_extension")

    length = document.declared_length
    if length > MAX_FILE_SIZE_BYTES:
        raise _fail(locale, "file_too_large", max_mb=MAX_FILE_SIZE_BYTES // (1024 * 1024))

    content_type = (document.content_type or "").strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise _fail(locale, "invalid_content_type")

    stream = BytesIO(document.content)

    header = _read_window(stream, 0, len(PDF_MAGIC))
    if header is None or header != PDF_MAGIC:
        raise _fail(locale, "invalid_signature")

    tail_size = min(TAIL_WINDOW_BYTES, length)
    tail = _read_window(stream, length - tail_size, tail_size)
    if tail is None:
        raise _fail(locale, "truncated_file")
    if PDF_EOF_MARKER not in tail:
        raise _fail(locale, "missing_eof_marker")

    head = _read_window(stream, 0, min(HEAD_WINDOW_BYTES, length))
    if head is None:
        raise _fail(locale, "truncated_file")
    if PDF_ENCRYPT_MARKER in head:
        raise _fail(locale, "encrypted_pdf")
