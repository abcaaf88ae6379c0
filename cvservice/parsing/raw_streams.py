from __future__ import annotations

import logging
import zlib
from typing import Iterator

from cvservice.parsing.limits import MAX_EXTRACTED_CHARACTERS
from cvservice.parsing.models import PdfBuffer, PdfStreamChunk

logger = logging.getLogger(__name__)

_STREAM_KEYWORD = "stream"
_ENDSTREAM_KEYWORD = "endstream"
_DICT_OPENER = "<<"
_FLATE_MARKERS = ("/FlateDecode", "/Fl")


def iter_pdf_streams(buffer: PdfBuffer) -> Iterator[PdfStreamChunk]:
    """Yield the raw payload of every ``stream ... endstream`` region in order.

    The cursor always moves past the matched ``endstream``, so the scan
    terminates on any input.
    """
    text = buffer.text
    index = 0
    while index < len(text):
        stream_pos = text.find(_STREAM_KEYWORD, index)
        if stream_pos == -1:
            return

        dict_start = text.rfind(_DICT_OPENER, 0, stream_pos)
        dictionary = text[dict_start:stream_pos] if dict_start >= 0 else ""
        is_flate = any(marker in dictionary for marker in _FLATE_MARKERS)

        data_start = stream_pos + len(_STREAM_KEYWORD)
        if text.startswith("\r\n", data_start):
            data_start += 2
        elif text.startswith(("\r", "\n"), data_start):
            data_start += 1

        end_pos = text.find(_ENDSTREAM_KEYWORD, data_start)
        if end_pos == -1:
            return

        byte_start = buffer.char_to_byte(data_start)
        byte_end = buffer.char_to_byte(end_pos)
        index = end_pos + len(_ENDSTREAM_KEYWORD)
        if byte_end <= byte_start:
            continue
        yield PdfStreamChunk(raw=buffer.byte_range(data_start, end_pos), is_flate=is_flate)


def _inflate(raw: bytes, wbits: int, max_chars: int) -> str | None:
    try:
        decompressor = zlib.decompressobj(wbits)
        # max_length bounds the output even for decompression bombs.
        data = decompressor.decompress(raw, max_chars)
    except zlib.error:
        return None
    return data.decode("latin-1")


def decode_stream(chunk: PdfStreamChunk, max_chars: int = MAX_EXTRACTED_CHARACTERS) -> str:
    """Inflate a Flate stream (zlib, then raw deflate) or read it as Latin-1."""
    max_chars = max(1, max_chars)
    if chunk.is_flate:
        for wbits in (zlib.MAX_WBITS, -zlib.MAX_WBITS):
            decoded = _inflate(chunk.raw, wbits, max_chars)
            if decoded is not None:
                return decoded
    return chunk.raw[:max_chars].decode("latin-1")


def extract_decoded_streams(buffer: PdfBuffer, limit: int = MAX_EXTRACTED_CHARACTERS) -> str:
    """Concatenate decoded stream payloads until ``limit`` characters are exceeded."""
    parts: list[str] = []
    total = 0
    stream_count = 0
    for chunk in iter_pdf_streams(buffer):
        stream_count += 1
        decoded = decode_stream(chunk, max_chars=limit - total + 1)
        if not decoded:
            continue
        parts.append(decoded)
        total += len(decoded) + 1
        if total > limit:
            break
    logger.debug("cv_raw_stream_scan streams=%s chars=%s", stream_count, total)
    if not parts:
        return ""
    return "\n".join(parts) + "\n"


def decoded_pdf_content(buffer: PdfBuffer, limit: int = MAX_EXTRACTED_CHARACTERS) -> str:
    """Decoded stream payloads, or the whole buffer as Latin-1 when it holds no streams."""
    return extract_decoded_streams(buffer, limit) or buffer.text
