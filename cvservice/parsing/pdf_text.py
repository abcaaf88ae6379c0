from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

from cvservice.normalize.text import normalize_extracted_text
from cvservice.parsing.limits import MAX_EXTRACTED_CHARACTERS
from cvservice.parsing.models import PdfBuffer

logger = logging.getLogger(__name__)


def extract_text_with_pypdf(buffer: PdfBuffer) -> str:
    """Walk the PDF object graph page by page. Any failure yields ``""``."""
    try:
        reader = PdfReader(BytesIO(buffer.data), strict=False)
        page_chunks: list[str] = []
        total = 0
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
                total += len(page_text) + 1
            if total > MAX_EXTRACTED_CHARACTERS:
                break
        return normalize_extracted_text("\n".join(page_chunks))
    except Exception as exc:
        logger.info("cv_pypdf_extraction_failed error=%s", exc.__class__.__name__)
        return ""
