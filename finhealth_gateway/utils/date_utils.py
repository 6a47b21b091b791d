"""Date manipulation utilities"""

from datetime import date, datetime, time, timedelta
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def as_local_datetime(value: date | datetime) -> datetime:
    """
    Normalize to a naive local datetime.

    Plain dates become local midnight; timezone-aware datetimes are converted
    to the local zone and stripped of tzinfo so they compare with naive ranges.
    """
    if not isinstance(value, datetime):
        return start_of_day(value)
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_iso_timestamp(value: str) -> datetime:
    """Parse ISO-8601, accepting the trailing 'Z' that JavaScript emits"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
