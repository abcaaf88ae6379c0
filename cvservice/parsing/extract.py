from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar

from cvservice.normalize.text import normalize_extracted_text
from cvservice.parsing.content_stream import extract_text_from_content_streams
from cvservice.parsing.limits import MAX_EXTRACTED_CHARACTERS
from cvservice.parsing.models import PdfBuffer
from cvservice.parsing.pdf_text import extract_text_with_pypdf
from cvservice.parsing.raw_streams import decoded_pdf_content

logger = logging.getLogger(__name__)

SourceT = TypeVar("SourceT")
ExtractionTier = Callable[[PdfBuffer], str]


def first_non_empty(source: SourceT, tiers: Iterable[tuple[str, Callable[[SourceT], str]]]) -> tuple[str, str]:
    """Run tiers in order and return ``(tier_name, text)`` of the first non-blank result."""
    for name, tier in tiers:
        text = tier(source)
        if text and text.strip():
            return name, text
    return "none", ""


def _raw_content_text(content: str) -> str:
    return normalize_extracted_text(content[:MAX_EXTRACTED_CHARACTERS])


RAW_SCAN_TIERS: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("content_streams", extract_text_from_content_streams),
    ("raw_content", _raw_content_text),
)


def _raw_scan_tier(buffer: PdfBuffer) -> str:
    tier, text = first_non_empty(decoded_pdf_content(buffer), RAW_SCAN_TIERS)
    logger.debug("cv_raw_scan_result tier=%s chars=%s", tier, len(text))
    return text


EXTRACTION_TIERS: tuple[tuple[str, ExtractionTier], ...] = (
    ("pypdf", extract_text_with_pypdf),
    ("raw_scan", _raw_scan_tier),
)


def extract_pdf_text(content: bytes) -> str:
    """Extract normalized text from validated PDF bytes; never raises, ``""`` when nothing is found."""
    buffer = PdfBuffer(content)
    try:
        tier, text = first_non_empty(buffer, EXTRACTION_TIERS)
    except Exception as exc:  # pragma: no cover - guard rail
        logger.warning("cv_text_extraction_failed error=%s", exc)
        return ""
    logger.info("cv_text_extracted tier=%s chars=%s", tier, len(text))
    return text
