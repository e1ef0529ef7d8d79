"""Deterministic lookahead window over a schedule."""

from datetime import date, timedelta
from typing import List, Optional

from config import settings
from contracts import Activity


def filter_lookahead(
    activities: List[Activity],
    window_start: Optional[date] = None,
    window_days: Optional[int] = None,
) -> List[Activity]:
    """Activities whose [start, finish] overlaps the window, in original order.

    Args:
        activities: Canonical activities
        window_start: First day of the window (defaults to today)
        window_days: Window length (defaults to settings.lookahead_window_days)
    """
    start = window_start or date.today()
    days = settings.lookahead_window_days if window_days is None else window_days
    try:
        end = start + timedelta(days=days)
    except OverflowError:
        end = date.max
    return [a for a in activities if a.start_date <= end and a.finish_date >= start]
