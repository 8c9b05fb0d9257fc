"""Payment calendar rules for spend items."""
from __future__ import annotations

import calendar
from datetime import date

from .models import Frequency, SpendItem


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def fires(item: SpendItem, day: date) -> bool:
    """Return True when ``item`` charges a payment on ``day``.

    Nothing fires before the item's start date. Monthly items clamp a start
    day past the end of a shorter month to that month's last day, and yearly
    items started on Feb 29 fall on Feb 28 in non-leap years.
    """

    start = item.start_date
    if day < start:
        return False

    frequency = item.frequency
    if frequency == Frequency.ONE_OFF:
        return day == start
    if frequency == Frequency.DAILY:
        return True
    if frequency == Frequency.WORKDAYS:
        return day.weekday() < 5
    if frequency == Frequency.WEEKLY:
        return day.weekday() == start.weekday()
    if frequency == Frequency.MONTHLY:
        target_day = min(start.day, _days_in_month(day.year, day.month))
        return day.day == target_day
    if frequency == Frequency.YEARLY:
        if start.month == 2 and start.day == 29 and not calendar.isleap(day.year):
            return day.month == 2 and day.day == 28
        return day.month == start.month and day.day == start.day
    return False


__all__ = ["fires"]
