"""Date manipulation utilities"""

from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component, if any"""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_months(from_date: date, months: int) -> date:
    """Calendar month arithmetic; day-of-month clamps to the target month's last day"""
    return from_date + relativedelta(months=months)


def day_in_month(year: int, month: int, day: int) -> date:
    """Date for `day` of the given month, clamped to the month's last day"""
    return date(year, month, 1) + relativedelta(day=day)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from start to end, counting both ends"""
    return (end - start).days + 1
