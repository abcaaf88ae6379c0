from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property


@dataclass(frozen=True)
class UploadedDocument:
    content: bytes
    filename: str
    content_type: str
    length: int | None = None

    @property
    def declared_length(self) -> int:
        if self.length is None:
            return len(self.content)
        return self.length


@dataclass(frozen=True)
class PdfBuffer:
    """Immutable PDF bytes with a lazily decoded single-byte text view.

    The text view decodes every byte to exactly one character (Latin-1), so
    structural keywords can be located with ``str.find``. Offsets must still be
    converted explicitly with ``char_to_byte``/``byte_to_char`` before slicing
    the other representation.
    """

    data: bytes

    @cached_property
    def text(self) -> str:
        return self.data.decode("latin-1")

    def __len__(self) -> int:
        return len(self.data)

    def char_to_byte(self, index: int) -> int:
        # Latin-1 maps one character to one byte.
        return max(0, min(index, len(self.data)))

    def byte_to_char(self, index: int) -> int:
        return max(0, min(index, len(self.text)))

    def byte_range(self, char_start: int, char_end: int) -> bytes:
        return self.data[self.char_to_byte(char_start) : self.char_to_byte(char_end)]


@dataclass(frozen=True)
class PdfStreamChunk:
    raw: bytes
    is_flate: bool


@dataclass
class TextAccumulator:
    """Collects text fragments until ``limit`` characters have been exceeded."""

    limit: int
    parts: list[str] = field(default_factory=list)
    length: int = 0

    @property
    def exhausted(self) -> bool:
        return self.length > self.limit

    def add(self, text: str) -> bool:
        """Append non-blank ``text``; return whether accumulation may continue."""
        if text and text.strip():
            self.parts.append(text)
            self.length += len(text)
        return not self.exhausted

    def join(self, separator: str = "\n") -> str:
        return separator.join(self.parts)
