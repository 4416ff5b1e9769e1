# app/utils/intervals.py
"""Half-open time intervals and calendar helpers shared by the scheduling services"""
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Union

Instant = Union[datetime, time]


class TimeInterval(NamedTuple):
    """[start, end) - the end instant is excluded"""
    start: datetime
    end: datetime


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """True if [a.start, a.end) intersects [b.start, b.end). Touching ends do not overlap."""
    return a.start < b.end and a.end > b.start


def minutes_between(start: Instant, end: Instant) -> int:
    """Rounded number of minutes from start to end (datetimes or times of the same day)"""
    if isinstance(start, time):
        start = datetime.combine(date.min, start)
        end = datetime.combine(date.min, end)
    return int(round((end - start).total_seconds() / 60))


def duration_minutes(interval: TimeInterval) -> int:
    return minutes_between(interval.start, interval.end)


def weekday_of(day: date) -> int:
    """Schedule weekday for a date: 0=Sunday ... 6=Saturday"""
    return (day.weekday() + 1) % 7


def day_bounds(day: date) -> TimeInterval:
    start = datetime.combine(day, time.min)
    return TimeInterval(start, start + timedelta(days=1))


def iter_days(start_date: date, end_date: date):
    """Every calendar day in [start_date, end_date], inclusive"""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def parse_hhmm(value: str) -> time:
    """Parse 'HH:MM' (or 'HH:MM:SS') into a time, raising ValueError when malformed"""
    return time.fromisoformat(value.strip())
