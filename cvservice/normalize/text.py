from __future__ import annotations

import re

_LINE_ENDING_RE = re.compile(r"\r\n?")
_HYPHEN_BREAK_RUN_RE = re.compile(r"[-\n]+")
_SOFT_SPACE_RE = re.compile(r"[\t\u00a0]")
_SPACE_RUN_RE = re.compile(r" {2,}")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def _join_hyphen_breaks(match: re.Match[str]) -> str:
    # Same result as deleting "-\n" until none is left ("a--\n\nb" -> "ab"), in one pass.
    kept: list[str] = []
    for char in match.group(0):
        if char == "\n" and kept and kept[-1] == "-":
            kept.pop()
        else:
            kept.append(char)
    return "".join(kept)


def normalize_extracted_text(text: str | None) -> str:
    """Clean up extracted PDF text. Idempotent."""
    if not text or not text.strip():
        return ""
    normalized = _LINE_ENDING_RE.sub("\n", text)
    normalized = _HYPHEN_BREAK_RUN_RE.sub(_join_hyphen_breaks, normalized)
    normalized = _SOFT_SPACE_RE.sub(" ", normalized)
    normalized = _SPACE_RUN_RE.sub(" ", normalized)
    normalized = _BLANK_RUN_RE.sub("\n\n", normalized)
    return normalized.strip()
