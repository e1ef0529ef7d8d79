"""Line-by-line activity reconstruction.

Last resort when model output contains no parseable JSON. Scans for
id / name / duration / predecessor markers and groups consecutive markers
into minimal records. Lossy: anything not matching a marker is ignored.
"""

import re
from typing import Any, Dict, List

from recovery.normalizer import positional_id


ID_MARKER = re.compile(r"""\b(?:activity[ _]?id|id)["']?\s*[:=]\s*["']?([A-Za-z0-9][\w.-]*)""", re.IGNORECASE)
NAME_MARKER = re.compile(r"""\b(?:activity[ _]?name|name|title)["']?\s*[:=]\s*["']?([^"'\n,}]+)""", re.IGNORECASE)
DURATION_MARKER = re.compile(
    r"""\b(?:original[ _]?duration|duration[ _]?days|duration)["']?\s*[:=]\s*["']?(\d+)""",
    re.IGNORECASE,
)
PREDECESSOR_MARKER = re.compile(r"""\bpredecessors?["']?\s*[:=]\s*(.*)$""", re.IGNORECASE)
# "A001: Site Preparation (5 days)" / "- A002 - Foundation Work - 10d"
INLINE_ACTIVITY = re.compile(
    r"^\s*(?:[-*•]|\d+[.)])?\s*([A-Z]{1,3}-?\d{2,})\s*[:\-]\s*(.+?)\s*[(\-]\s*(\d+)\s*(?:d|days?)\b\)?",
)
REFERENCE = re.compile(r"\b[A-Za-z]{1,3}-?\d{2,}\b")


def _flush(current: Dict[str, Any], records: List[Dict[str, Any]]) -> Dict[str, Any]:
    if current.get("activityId") or current.get("name"):
        records.append(current)
    return {}


def parse_activity_lines(text: str) -> List[Dict[str, Any]]:
    """Rebuild activity records from marker lines.

    A new id marker, or a second name marker, starts a new record. When no
    predecessor marker appears anywhere, records are chained in order.
    """
    records: List[Dict[str, Any]] = []
    current: Dict[str, Any] = {}
    saw_links = False

    for line in text.splitlines():
        inline = INLINE_ACTIVITY.match(line)
        if inline:
            current = _flush(current, records)
            records.append({
                "activityId": inline.group(1),
                "name": inline.group(2).strip(),
                "durationDays": int(inline.group(3)),
            })
            continue

        id_match = ID_MARKER.search(line)
        if id_match:
            if current.get("activityId"):
                current = _flush(current, records)
            current["activityId"] = id_match.group(1)

        name_match = NAME_MARKER.search(line)
        if name_match:
            if current.get("name"):
                current = _flush(current, records)
            current["name"] = name_match.group(1).strip()

        duration_match = DURATION_MARKER.search(line)
        if duration_match:
            current["durationDays"] = int(duration_match.group(1))

        pred_match = PREDECESSOR_MARKER.search(line)
        if pred_match:
            saw_links = True
            current["predecessors"] = REFERENCE.findall(pred_match.group(1))

    _flush(current, records)

    if records and not saw_links:
        _chain(records)
    return records


def _chain(records: List[Dict[str, Any]]) -> None:
    taken = {r["activityId"] for r in records if r.get("activityId")}
    for index, record in enumerate(records):
        if not record.get("activityId"):
            record["activityId"] = positional_id(index, taken)
            taken.add(record["activityId"])
    for previous, record in zip(records, records[1:]):
        record["predecessors"] = [previous["activityId"]]
    records[0]["predecessors"] = []
