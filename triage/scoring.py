"""Relevance scoring, categorization and keyword extraction for sections.

Pure functions over text; the weights and keyword lists are heuristics
tuned for construction scheduling documents.
"""

import math
import re
from collections import Counter
from typing import Dict, List

from contracts import SectionCategory


# Scheduling vocabulary, weighted x3
HIGH_VALUE_KEYWORDS: List[str] = [
    "schedule", "duration", "milestone", "critical path", "completion",
    "activity", "task", "precedence", "logic", "relationship", "constraint",
]

# Generic project vocabulary, weighted x1
MEDIUM_VALUE_KEYWORDS: List[str] = [
    "project", "work", "scope", "phase", "contract", "deadline", "start", "finish",
]

HIGH_VALUE_WEIGHT = 3
MEDIUM_VALUE_WEIGHT = 1
DATE_WEIGHT = 2
QUANTITY_WEIGHT = 2

DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}")
QUANTITY_PATTERN = re.compile(r"\d+\s*(?:days?|weeks?|months?|hours?)", re.IGNORECASE)

CATEGORY_KEYWORDS: Dict[SectionCategory, List[str]] = {
    SectionCategory.PROJECT_DETAILS: [
        "project name", "project description", "scope", "overview", "summary",
        "client", "contractor", "owner", "architect", "engineer",
    ],
    SectionCategory.SCHEDULE: [
        "schedule", "timeline", "duration", "completion", "milestone", "phase",
        "critical path", "gantt", "calendar", "working days", "substantial completion",
    ],
    SectionCategory.SPECIFICATIONS: [
        "specification", "technical", "materials", "equipment", "installation",
        "quality", "performance", "standard", "code", "requirement",
    ],
    SectionCategory.CONSTRAINTS: [
        "constraint", "restriction", "limitation", "weather", "permit", "access",
        "safety", "environmental", "noise", "hours", "season",
    ],
    SectionCategory.DATES: [
        "date", "deadline", "completion", "start", "finish", "notice to proceed",
        "ntp", "substantial completion", "final completion", "milestone",
    ],
    SectionCategory.SCOPE: [
        "work", "activity", "task", "demolition", "construction", "installation",
        "excavation", "foundation", "structure", "mechanical", "electrical",
    ],
}

_WORD_SPLIT = re.compile(r"[^\w\s]")


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters."""
    return math.ceil(len(text) / 4)


def calculate_relevance_score(text: str) -> int:
    """Score a section for scheduling relevance, clamped to [0, 100]."""
    lower_text = text.lower()
    score = 0

    for keyword in HIGH_VALUE_KEYWORDS:
        score += lower_text.count(keyword) * HIGH_VALUE_WEIGHT
    for keyword in MEDIUM_VALUE_KEYWORDS:
        score += lower_text.count(keyword) * MEDIUM_VALUE_WEIGHT

    score += len(DATE_PATTERN.findall(text)) * DATE_WEIGHT
    score += len(QUANTITY_PATTERN.findall(text)) * QUANTITY_WEIGHT

    return max(0, min(100, score))


def categorize_content(text: str) -> SectionCategory:
    """Pick the category whose keyword set has the most hits.

    A tie for the top count (including zero hits) resolves to OTHER.
    """
    lower_text = text.lower()
    scores = {
        category: sum(1 for keyword in keywords if keyword in lower_text)
        for category, keywords in CATEGORY_KEYWORDS.items()
    }
    best = max(scores.values())
    if best == 0:
        return SectionCategory.OTHER
    winners = [category for category, score in scores.items() if score == best]
    if len(winners) > 1:
        return SectionCategory.OTHER
    return winners[0]


def extract_keywords(text: str, limit: int = 10) -> List[str]:
    """Most frequent words longer than three characters."""
    words = [w for w in _WORD_SPLIT.sub(" ", text.lower()).split() if len(w) > 3]
    return [word for word, _count in Counter(words).most_common(limit)]
