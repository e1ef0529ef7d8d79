"""Regex scans for coarse project facts.

Scalar fields are first-match-wins across the whole document; milestones
and constraints accumulate because several can co-exist.
"""

import re
from typing import List, Optional, Tuple

from contracts import KeyInformation


_DATE = r"(\d{1,2}/\d{1,2}/\d{4})"

# Gaps between a keyword and its value are bounded so a long single-line
# document is scanned in linear time.
_GAP = r".{0,200}?"
_SHORT_GAP = r".{0,40}?"

DURATION_PATTERNS: List[re.Pattern] = [
    re.compile(r"(\d+)\s*(?:calendar\s*)?days?", re.IGNORECASE),
    re.compile(r"(\d+)\s*working\s*days?", re.IGNORECASE),
    re.compile(r"(\d+)\s*months?", re.IGNORECASE),
    re.compile(r"substantial\s*completion" + _GAP + r"(\d+" + _SHORT_GAP + r"days?)", re.IGNORECASE),
    re.compile(r"contract\s*time" + _GAP + r"(\d+" + _SHORT_GAP + r"days?)", re.IGNORECASE),
]

PROJECT_TYPE_PATTERNS: List[re.Pattern] = [
    re.compile(r"residential", re.IGNORECASE),
    re.compile(r"commercial", re.IGNORECASE),
    re.compile(r"industrial", re.IGNORECASE),
    re.compile(r"infrastructure", re.IGNORECASE),
    re.compile(r"renovation", re.IGNORECASE),
    re.compile(r"new\s*construction", re.IGNORECASE),
]

START_DATE_PATTERN = re.compile(r"(?:start|begin|commence)" + _GAP + _DATE, re.IGNORECASE)
END_DATE_PATTERN = re.compile(r"(?:complete|finish|end)" + _GAP + _DATE, re.IGNORECASE)
NTP_PATTERN = re.compile(r"notice\s*to\s*proceed" + _GAP + _DATE, re.IGNORECASE)

# (pattern, uses capture group)
MILESTONE_PATTERNS: List[Tuple[re.Pattern, bool]] = [
    (re.compile(r"milestone" + _GAP + r":(.+)", re.IGNORECASE), True),
    (re.compile(r"substantial\s*completion", re.IGNORECASE), False),
    (re.compile(r"final\s*completion", re.IGNORECASE), False),
    (re.compile(r"phase\s*\d+" + _GAP + r"completion", re.IGNORECASE), False),
]

CONSTRAINT_PATTERNS: List[Tuple[re.Pattern, bool]] = [
    (re.compile(r"weather" + _GAP + r"restriction", re.IGNORECASE), False),
    (re.compile(r"permit" + _GAP + r"required", re.IGNORECASE), False),
    (re.compile(r"noise" + _GAP + r"restriction", re.IGNORECASE), False),
    (re.compile(r"working\s*hours" + _GAP + r"(\d+" + _SHORT_GAP + r"\d+)", re.IGNORECASE), True),
    (re.compile(r"seasonal" + _GAP + r"restriction", re.IGNORECASE), False),
]


def _first_match(patterns: List[re.Pattern], text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def _first_group(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def extract_key_information(text: str) -> KeyInformation:
    """Scan the full document text for duration, type, dates, milestones and constraints."""
    contract_duration = _first_match(DURATION_PATTERNS, text)
    project_type = _first_match(PROJECT_TYPE_PATTERNS, text)

    start_date = _first_group(START_DATE_PATTERN, text)
    if not start_date:
        start_date = _first_group(NTP_PATTERN, text)
    end_date = _first_group(END_DATE_PATTERN, text)

    milestones: List[str] = []
    for pattern, has_capture in MILESTONE_PATTERNS:
        for match in pattern.finditer(text):
            value = match.group(1) if has_capture else match.group(0)
            if value and value.strip():
                milestones.append(value.strip())

    constraints: List[str] = []
    for pattern, has_capture in CONSTRAINT_PATTERNS:
        for match in pattern.finditer(text):
            if has_capture:
                if match.group(1) and match.group(1).strip():
                    constraints.append(f"Working hours: {match.group(1).strip()}")
            else:
                constraints.append(match.group(0).strip())

    return KeyInformation(
        contract_duration=contract_duration,
        project_type=project_type.lower() if project_type else None,
        start_date=start_date,
        end_date=end_date,
        milestones=milestones,
        constraints=constraints,
    )
