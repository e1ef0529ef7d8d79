"""Normalize recovered records into canonical Activity objects.

Handles field-name synonyms, type coercion, id assignment, WBS defaults and
referential integrity. Normalizing an already-canonical list is a no-op.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from loguru import logger

from config import settings
from contracts import Activity, ActivityStatus, ScheduleResult


NAME_KEYS = ("name", "activityName", "title")
DURATION_KEYS = ("durationDays", "originalDuration", "duration")
START_KEYS = ("earlyStart", "startDate", "start")
FINISH_KEYS = ("earlyFinish", "finishDate")
TOTAL_FLOAT_KEYS = ("totalFloatDays", "totalFloat")
FREE_FLOAT_KEYS = ("freeFloatDays", "freeFloat")
REFERENCE_KEYS = ("activityId", "id", "predecessorId")

STATUS_SYNONYMS = {
    "notstarted": ActivityStatus.NOT_STARTED,
    "pending": ActivityStatus.NOT_STARTED,
    "planned": ActivityStatus.NOT_STARTED,
    "inprogress": ActivityStatus.IN_PROGRESS,
    "started": ActivityStatus.IN_PROGRESS,
    "active": ActivityStatus.IN_PROGRESS,
    "completed": ActivityStatus.COMPLETED,
    "complete": ActivityStatus.COMPLETED,
    "done": ActivityStatus.COMPLETED,
    "finished": ActivityStatus.COMPLETED,
}

DEFAULT_SUMMARY = "Schedule generated with {count} activities"


@dataclass
class NormalizationReport:
    """Repairs made while normalizing one batch."""
    dropped_references: int = 0
    reassigned_ids: int = 0
    defaulted_durations: int = 0


def positional_id(index: int, taken: Set[str]) -> str:
    """Zero-padded id for position `index` that avoids ids already in use."""
    n = index
    while f"A{n:03d}" in taken:
        n += 1
    return f"A{n:03d}"


# --- coercion helpers ------------------------------------------------------

def _first(record: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def coerce_duration(value: Any, default: Optional[int] = None) -> Tuple[int, bool]:
    """Integer duration in days, and whether the default was used.

    Missing, non-numeric, non-finite, zero and negative values fall back to
    the default.
    """
    fallback = settings.default_activity_duration_days if default is None else default
    days = _to_int(value)
    if days is None or days <= 0:
        return fallback, True
    return days, False


def parse_date(value: Any) -> Optional[date]:
    """Parse a date, a datetime, or an ISO string (time part ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _first_date(record: Dict[str, Any], keys: Sequence[str]) -> Optional[date]:
    for key in keys:
        parsed = parse_date(record.get(key))
        if parsed is not None:
            return parsed
    return None


def coerce_status(value: Any) -> ActivityStatus:
    if isinstance(value, ActivityStatus):
        return value
    if not isinstance(value, str):
        return ActivityStatus.NOT_STARTED
    key = value.lower().replace(" ", "").replace("_", "").replace("-", "")
    return STATUS_SYNONYMS.get(key, ActivityStatus.NOT_STARTED)


def coerce_references(value: Any) -> List[str]:
    """String ids from a list of strings and/or dicts. Anything else is []."""
    if not isinstance(value, list):
        return []
    refs = []
    for entry in value:
        if isinstance(entry, dict):
            entry = _first(entry, REFERENCE_KEYS)
        if entry is None or isinstance(entry, (list, dict, bool)):
            continue
        ref = str(entry).strip()
        if ref:
            refs.append(ref)
    return refs


def _coerce_strings(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and not isinstance(v, (list, dict))]


def _percent(value: Any) -> float:
    try:
        pct = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(pct):
        return 0.0
    return min(max(pct, 0.0), 100.0)


def _finish_for(start: date, duration: int, activity_id: str) -> date:
    try:
        return start + timedelta(days=duration)
    except OverflowError:
        logger.warning(f"Finish of {activity_id} falls past the calendar; using its start date")
        return start


def _as_record(item: Union[Activity, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if isinstance(item, Activity):
        return item.model_dump(by_alias=True)
    if isinstance(item, dict):
        return item
    return None


# --- normalization ---------------------------------------------------------

def normalize_activities(
    items: Iterable[Union[Activity, Dict[str, Any]]],
    start_date: Optional[date] = None,
) -> Tuple[List[Activity], NormalizationReport]:
    """Turn loosely-typed records into canonical activities.

    Args:
        items: Raw dict records and/or Activity instances; other entries are skipped
        start_date: Start used when a record has no parseable start (defaults to today)

    Returns:
        The canonical activities and a report of the repairs made.
    """
    report = NormalizationReport()
    fallback_start = start_date or date.today()
    records = [r for r in (_as_record(item) for item in items) if r is not None]

    # Pass 1: explicit ids, first occurrence wins
    ids: List[Optional[str]] = []
    taken: Set[str] = set()
    for record in records:
        raw_id = _first(record, ("activityId", "activity_id"))
        explicit = str(raw_id).strip() if raw_id is not None else ""
        if explicit and explicit not in taken:
            taken.add(explicit)
            ids.append(explicit)
        else:
            if explicit:
                report.reassigned_ids += 1
            ids.append(None)

    # Pass 2: positional ids for the rest
    for index, assigned in enumerate(ids):
        if assigned is None:
            ids[index] = positional_id(index, taken)
            taken.add(ids[index])

    activities = []
    for index, record in enumerate(records):
        activity_id = ids[index]

        duration, defaulted = coerce_duration(_first(record, DURATION_KEYS))
        if defaulted:
            report.defaulted_durations += 1

        start = _first_date(record, START_KEYS) or fallback_start
        finish = _first_date(record, FINISH_KEYS)
        if finish is None or finish < start:
            finish = _finish_for(start, duration, activity_id)

        predecessors = []
        for ref in coerce_references(record.get("predecessors")):
            if ref == activity_id or ref not in taken:
                report.dropped_references += 1
                continue
            if ref not in predecessors:
                predecessors.append(ref)

        name = _first(record, NAME_KEYS)

        activities.append(Activity(
            activity_id=activity_id,
            name=str(name) if name is not None else "Unnamed Activity",
            duration_days=duration,
            start_date=start,
            finish_date=finish,
            predecessors=predecessors,
            successors=coerce_references(record.get("successors")),
            status=coerce_status(record.get("status")),
            percent_complete=_percent(record.get("percentComplete", 0)),
            total_float_days=_to_int(_first(record, TOTAL_FLOAT_KEYS)) or 0,
            free_float_days=_to_int(_first(record, FREE_FLOAT_KEYS)) or 0,
            wbs=str(record.get("wbs") or f"1.{index + 1}"),
            resources=_coerce_strings(record.get("resources")),
        ))

    if report.dropped_references or report.reassigned_ids:
        logger.info(
            f"Normalized {len(activities)} activities: dropped {report.dropped_references} "
            f"dangling references, reassigned {report.reassigned_ids} duplicate ids"
        )
    return activities, report


def activity_records(payload: Dict[str, Any]) -> List[Any]:
    """The activity list under whichever activities-like key the payload uses."""
    for key in ("activities", "schedule", "tasks"):
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return []


def normalize_payload(
    payload: Dict[str, Any],
    start_date: Optional[date] = None,
) -> Tuple[ScheduleResult, NormalizationReport]:
    """Build a ScheduleResult from a recovered JSON object.

    The critical path is always recomputed; whatever the payload claims is ignored.
    """
    activities, report = normalize_activities(activity_records(payload), start_date)

    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = DEFAULT_SUMMARY.format(count=len(activities))

    result = ScheduleResult(
        activities=activities,
        summary=summary,
        recommendations=_coerce_strings(payload.get("recommendations")),
    )
    return result, report
