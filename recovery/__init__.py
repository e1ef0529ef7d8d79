"""Response recovery: extraction cascade, line reconstruction and normalization."""

from .normalizer import (
    NormalizationReport,
    normalize_activities,
    normalize_payload,
    coerce_duration,
    parse_date,
    positional_id,
)
from .line_parser import parse_activity_lines
from .extraction import (
    ACTIVITY_KEYS,
    Extraction,
    Strategy,
    extract_payload,
    exhaustion_summary,
    strip_thinking,
    balanced_brace_candidates,
)
from .lookahead import filter_lookahead

__all__ = [
    "NormalizationReport",
    "normalize_activities",
    "normalize_payload",
    "coerce_duration",
    "parse_date",
    "positional_id",
    "parse_activity_lines",
    "ACTIVITY_KEYS",
    "Extraction",
    "Strategy",
    "extract_payload",
    "exhaustion_summary",
    "strip_thinking",
    "balanced_brace_candidates",
    "filter_lookahead",
]
