"""Split raw document text into candidate sections.

Structural splitting on heading-like lines is tried first; a pattern is
only trusted when it finds more than two headings. Otherwise the text is
cut into fixed-size windows with no structural awareness.
"""

import re
from dataclasses import dataclass
from typing import List, Optional


HEADING_PATTERNS: List[re.Pattern] = [
    re.compile(r"^[\d.]+[ \t]+[A-Z][^.\n]*$", re.MULTILINE),  # "1.1 SECTION TITLE"
    re.compile(r"^[A-Z][A-Z ]{2,}$", re.MULTILINE),          # "GENERAL CONDITIONS"
    re.compile(r"^[ \t]*SECTION[ \t]+\d+.*$", re.MULTILINE),  # "SECTION 01"
    re.compile(r"^[ \t]*PART[ \t]+\d+.*$", re.MULTILINE),     # "PART 1"
    re.compile(r"^[ \t]*CHAPTER[ \t]+\d+.*$", re.MULTILINE),  # "CHAPTER 1"
]

MIN_HEADINGS = 3
TITLE_MAX_CHARS = 50


@dataclass
class Segment:
    """A raw slice of the document before scoring."""
    index: int
    title: str
    content: str


def _split_on_headings(text: str) -> Optional[List[str]]:
    for pattern in HEADING_PATTERNS:
        starts = [m.start() for m in pattern.finditer(text)]
        if len(starts) < MIN_HEADINGS:
            continue
        bounds = ([0] if starts[0] > 0 else []) + starts + [len(text)]
        return [text[a:b] for a, b in zip(bounds, bounds[1:])]
    return None


def _split_fixed(text: str, chunk_size: int) -> List[str]:
    return [text[i:i + chunk_size] for i in range(0, len(text), chunk_size)]


def _make_title(content: str, index: int) -> str:
    first_line = content.strip().split("\n", 1)[0].strip()
    if not first_line:
        return f"Section {index + 1}"
    if len(first_line) > TITLE_MAX_CHARS:
        return first_line[:TITLE_MAX_CHARS - 3] + "..."
    return first_line


def split_into_segments(text: str, chunk_size: int = 2000, min_chars: int = 100) -> List[Segment]:
    """Segment text, dropping pieces shorter than `min_chars` once stripped.

    Segment indices reflect position in the document, so ids derived from
    them stay stable even when noise segments are dropped.
    """
    pieces = _split_on_headings(text)
    if pieces is None:
        pieces = _split_fixed(text, chunk_size)

    segments = []
    for index, piece in enumerate(pieces):
        if len(piece.strip()) < min_chars:
            continue
        segments.append(Segment(index=index, title=_make_title(piece, index), content=piece))
    return segments
