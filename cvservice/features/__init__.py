from .readability import (
    SCORE_SECTION_KEYWORDS,
    SUMMARY_SECTION_KEYWORDS,
    build_readability_summary,
    compute_readability_score,
)

__all__ = [
    "SCORE_SECTION_KEYWORDS",
    "SUMMARY_SECTION_KEYWORDS",
    "build_readability_summary",
    "compute_readability_score",
]
