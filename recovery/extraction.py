"""Extraction cascade over untrusted model output.

Strategies run in order and the first one that yields a JSON object with
one of the wanted keys wins:

1. the whole text
2. a ```json fenced block
3. any fenced block
4. balanced {...} substrings, longest first
5. line-by-line reconstruction (lossy last resort)

Exhaustion is an ``Err`` carrying a diagnostic, never an exception.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from contracts import Err, FailureKind, Ok, PipelineFailure, Result
from recovery.line_parser import parse_activity_lines


ACTIVITY_KEYS = ("activities", "schedule", "tasks")
PREVIEW_CHARS = 200

THINKING_PATTERNS = [
    re.compile(r"thinking\.{3,}", re.IGNORECASE),
    re.compile(r"let me think\.{0,3}", re.IGNORECASE),
    re.compile(r"i'm thinking\.{0,3}", re.IGNORECASE),
    re.compile(r"i am thinking\.{0,3}", re.IGNORECASE),
    re.compile(r"hmm\.{3,}", re.IGNORECASE),
    re.compile(r"\.{3,}thinking\.{0,3}", re.IGNORECASE),
    re.compile(r"one moment\.{0,3}", re.IGNORECASE),
    re.compile(r"analyzing\.{3,}", re.IGNORECASE),
    re.compile(r"processing\.{3,}", re.IGNORECASE),
]

JSON_FENCE = re.compile(r"```json[ \t]*\n?(.*?)```", re.DOTALL | re.IGNORECASE)
ANY_FENCE = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)


class Strategy(str, Enum):
    """Which cascade step recovered the payload."""
    WHOLE_TEXT = "whole_text"
    JSON_FENCE = "json_fence"
    ANY_FENCE = "any_fence"
    BALANCED_BRACES = "balanced_braces"
    LINE_SCAN = "line_scan"


@dataclass
class Extraction:
    payload: Dict[str, Any]
    strategy: Strategy


def strip_thinking(text: str) -> str:
    """Remove "thinking..." filler some models emit. Whitespace is left alone."""
    for pattern in THINKING_PATTERNS:
        text = pattern.sub("", text)
    return text


def _load_object(candidate: str, keys: Sequence[str]) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    if isinstance(data, dict) and any(key in data for key in keys):
        return data
    return None


def balanced_brace_candidates(text: str) -> List[str]:
    """Every balanced {...} substring, longest first.

    Braces inside double-quoted strings are ignored once a brace is open.
    """
    starts: List[int] = []
    found: List[str] = []
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and starts:
            in_string = True
        elif ch == "{":
            starts.append(i)
        elif ch == "}" and starts:
            found.append(text[starts.pop():i + 1])

    unique = list(dict.fromkeys(found))
    return sorted(unique, key=len, reverse=True)


def exhaustion_summary(raw: str) -> str:
    """Diagnostic used when nothing could be recovered."""
    size = len(raw.encode("utf-8"))
    preview = raw.strip()[:PREVIEW_CHARS]
    return (
        f"Could not recover a schedule from model output ({size} bytes). "
        f"Preview: {preview!r}"
    )


def extract_payload(
    raw: str,
    keys: Sequence[str] = ACTIVITY_KEYS,
    line_scan: bool = True,
) -> Result[Extraction]:
    """Run the cascade over raw model output.

    Args:
        raw: Untrusted model text
        keys: A recovered object must expose at least one of these keys
        line_scan: Whether to fall back to line-by-line reconstruction

    Returns:
        Ok(Extraction) for the first successful strategy, otherwise
        Err(MALFORMED_OUTPUT) with a diagnostic message.
    """
    text = strip_thinking(raw or "")

    data = _load_object(text.strip(), keys)
    if data is not None:
        return Ok(Extraction(data, Strategy.WHOLE_TEXT))

    for match in JSON_FENCE.finditer(text):
        data = _load_object(match.group(1).strip(), keys)
        if data is not None:
            return Ok(Extraction(data, Strategy.JSON_FENCE))

    for match in ANY_FENCE.finditer(text):
        data = _load_object(match.group(1).strip(), keys)
        if data is not None:
            return Ok(Extraction(data, Strategy.ANY_FENCE))

    for candidate in balanced_brace_candidates(text):
        data = _load_object(candidate, keys)
        if data is not None:
            return Ok(Extraction(data, Strategy.BALANCED_BRACES))

    if line_scan:
        records = parse_activity_lines(text)
        if records:
            logger.warning(f"Rebuilt {len(records)} activities from unstructured model output")
            payload = {
                "activities": records,
                "summary": f"Schedule reconstructed from unstructured model output ({len(records)} activities)",
                "recommendations": [
                    "Model output was not valid JSON; activities were rebuilt line by line and may be incomplete.",
                ],
            }
            return Ok(Extraction(payload, Strategy.LINE_SCAN))

    summary = exhaustion_summary(raw or "")
    logger.warning(summary)
    return Err(PipelineFailure(FailureKind.MALFORMED_OUTPUT, summary))
