from __future__ import annotations

import re

from cvservice.core.config.scoring import get_scoring_value
from cvservice.core.messages import msg
from cvservice.normalize.profile_fields import PHONE_RE, SECTION_STOP_KEYWORDS
from cvservice.schemas.cv import ReadabilitySummary

SUMMARY_SECTION_KEYWORDS: tuple[str, ...] = SECTION_STOP_KEYWORDS
SCORE_SECTION_KEYWORDS: tuple[str, ...] = (*SECTION_STOP_KEYWORDS, "resumé", "resume")

_WORD_RE = re.compile(r"\b[\w.-]+\b")
_EMAIL_RE = re.compile(r"(?<![A-Z0-9._%+-])[A-Z0-9._%+-]+\s*@\s*[A-Z0-9.-]+\s*\.\s*[A-Z]{2,}", re.IGNORECASE)
_BULLET_RE = re.compile(r"(?:^|\n)[•*-] ?")


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"^[ \t]*{re.escape(keyword)}\b", re.IGNORECASE | re.MULTILINE)


_SUMMARY_KEYWORD_PATTERNS = tuple(_keyword_pattern(keyword) for keyword in SUMMARY_SECTION_KEYWORDS)
_SCORE_KEYWORD_PATTERNS = tuple(_keyword_pattern(keyword) for keyword in SCORE_SECTION_KEYWORDS)


def count_words(text: str) -> int:
    return sum(1 for _ in _WORD_RE.finditer(text))


def has_email(text: str) -> bool:
    return bool(_EMAIL_RE.search(text))


def has_phone(text: str) -> bool:
    return bool(PHONE_RE.search(text))


def count_bullets(text: str) -> int:
    return sum(1 for _ in _BULLET_RE.finditer(text))


def _count_matched(patterns: tuple[re.Pattern[str], ...], text: str) -> int:
    return sum(1 for pattern in patterns if pattern.search(text))


def _symbol_ratio(text: str) -> float:
    symbols = sum(1 for ch in text if not ch.isalnum() and not ch.isspace() and ch not in "-.")
    return symbols / len(text)


def build_readability_summary(text: str, *, locale: str | None = None) -> ReadabilitySummary:
    if not text or not text.strip():
        return ReadabilitySummary(
            total_section_keywords=len(SUMMARY_SECTION_KEYWORDS),
            note=msg(locale, "summary_no_text"),
        )

    return ReadabilitySummary(
        total_chars=len(text),
        total_words=count_words(text),
        total_lines=len(text.split("\n")),
        has_email=has_email(text),
        has_phone=has_phone(text),
        bullet_count=count_bullets(text),
        matched_sections=_count_matched(_SUMMARY_KEYWORD_PATTERNS, text),
        total_section_keywords=len(SUMMARY_SECTION_KEYWORDS),
    )


def _cfg(key: str, default: float) -> float:
    return float(get_scoring_value(f"readability.{key}", default))


def compute_readability_score(text: str) -> float:
    """Heuristic 0-100 score from the shape of the extracted text."""
    if not text or not text.strip():
        return 0.0

    score = _cfg("base_score", 50.0)

    words = count_words(text)
    if words < _cfg("min_words", 100) or words > _cfg("max_words", 1500):
        score -= _cfg("word_count_penalty", 10.0)
    else:
        score += _cfg("word_count_bonus", 5.0)

    if has_email(text):
        score += _cfg("email_bonus", 10.0)
    if has_phone(text):
        score += _cfg("phone_bonus", 5.0)

    score += min(_cfg("max_bullet_bonus", 10), count_bullets(text))
    score += _count_matched(_SCORE_KEYWORD_PATTERNS, text) * _cfg("section_bonus", 5.0)

    if _symbol_ratio(text) > _cfg("symbol_ratio_threshold", 0.2):
        score -= _cfg("symbol_ratio_penalty", 10.0)

    return max(0.0, min(100.0, score))
