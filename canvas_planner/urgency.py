from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .models.assignment import Assignment
from .utils.dates import DateLike, parse_datetime

SECONDS_PER_DAY = 24 * 60 * 60
URGENT_DAYS = 2
THIS_WEEK_DAYS = 7


class Urgency(str, Enum):
    """Urgency tiers, valued by their Notion select option names."""

    OVERDUE = 'Overdue'
    URGENT = 'Urgent'
    THIS_WEEK = 'This Week'
    UPCOMING = 'Upcoming'


def calculate_urgency(due: DateLike, now: datetime) -> Urgency:
    """
    Buckets a due date relative to now.

    Days are compared as real-valued fractions; 2 and 7 days are the
    inclusive upper bounds of Urgent and This Week. Completed tasks must be
    filtered out by the caller.
    """
    due_dt = parse_datetime(due)
    if due_dt is None:
        return Urgency.UPCOMING

    days_until_due = (due_dt - parse_datetime(now)).total_seconds() / SECONDS_PER_DAY
    if days_until_due < 0:
        return Urgency.OVERDUE
    if days_until_due <= URGENT_DAYS:
        return Urgency.URGENT
    if days_until_due <= THIS_WEEK_DAYS:
        return Urgency.THIS_WEEK
    return Urgency.UPCOMING


def categorize_by_urgency(assignments: Iterable[Assignment], now: datetime) -> Dict[Urgency, List[Assignment]]:
    categories: Dict[Urgency, List[Assignment]] = {tier: [] for tier in Urgency}
    for assignment in assignments:
        categories[calculate_urgency(assignment.due_at, now)].append(assignment)
    return categories


def parse_urgency(name: Optional[str]) -> Optional[Urgency]:
    """Maps a stored select name back to a tier; unknown names give None."""
    try:
        return Urgency(name)
    except ValueError:
        return None
