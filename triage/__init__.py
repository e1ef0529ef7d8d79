"""Document triage: segmentation, relevance scoring and token budgeting."""

from .analyzer import DocumentAnalyzer, TRUNCATION_MARKER
from .key_facts import extract_key_information
from .scoring import (
    calculate_relevance_score,
    categorize_content,
    estimate_tokens,
    extract_keywords,
)
from .segmenter import split_into_segments, Segment

__all__ = [
    "DocumentAnalyzer",
    "TRUNCATION_MARKER",
    "extract_key_information",
    "calculate_relevance_score",
    "categorize_content",
    "estimate_tokens",
    "extract_keywords",
    "split_into_segments",
    "Segment",
]
