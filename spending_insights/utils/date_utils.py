"""Date manipulation utilities"""

import calendar
from datetime import datetime


def add_months(from_date: datetime, months: int) -> datetime:
    """Shift a datetime by whole calendar months, clamping the day to the target month"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return from_date.replace(year=year, month=month, day=day)


def month_key(value: datetime) -> str:
    """Year-month bucket key, e.g. 2024-03"""
    return f"{value.year:04d}-{value.month:02d}"


def days_in_month(value: datetime) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def is_same_month(a: datetime, b: datetime) -> bool:
    return a.year == b.year and a.month == b.month


def to_wall_clock(value: datetime) -> datetime:
    """Drop the UTC offset of an aware datetime, keeping its local wall-clock reading"""
    if value.tzinfo is None:
        return value
    return value.replace(tzinfo=None)
