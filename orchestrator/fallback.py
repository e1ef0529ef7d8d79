"""Fixed fallback schedule used when the generator cannot be reached."""

import json
from datetime import date, timedelta
from typing import Optional


FALLBACK_SUMMARY = "Demo schedule generated (AI service temporarily unavailable)"
FALLBACK_RECOMMENDATION = (
    "This is a demo schedule. The AI service is currently unavailable. "
    "Check the model configuration and API credentials, then retry."
)

# (id, name, duration, crew)
FALLBACK_CHAIN = [
    ("A001", "Site Preparation", 5, "Crew A"),
    ("A002", "Foundation Work", 10, "Crew B"),
    ("A003", "Structure Assembly", 15, "Crew C"),
]


def fallback_output(start_date: Optional[date] = None) -> str:
    """Three-activity finish-to-start chain as raw model-style JSON text.

    Returned as text so it passes through the same recovery and
    normalization as real output.
    """
    cursor = start_date or date.today()
    activities = []
    previous = None
    for index, (activity_id, name, duration, crew) in enumerate(FALLBACK_CHAIN):
        finish = cursor + timedelta(days=duration)
        following = FALLBACK_CHAIN[index + 1][0] if index + 1 < len(FALLBACK_CHAIN) else None
        activities.append({
            "activityId": activity_id,
            "name": name,
            "durationDays": duration,
            "startDate": cursor.isoformat(),
            "finishDate": finish.isoformat(),
            "predecessors": [previous] if previous else [],
            "successors": [following] if following else [],
            "status": "NotStarted",
            "percentComplete": 0,
            "totalFloatDays": 0,
            "freeFloatDays": 0,
            "wbs": f"1.{index + 1}",
            "resources": [crew],
        })
        previous = activity_id
        cursor = finish

    return json.dumps({
        "activities": activities,
        "summary": FALLBACK_SUMMARY,
        "recommendations": [FALLBACK_RECOMMENDATION],
    })
