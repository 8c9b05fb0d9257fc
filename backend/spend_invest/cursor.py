"""Forward-only cursor over a dated price or FX series."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List

from .models import PricePoint


def prepare_series(points: Iterable[PricePoint]) -> List[PricePoint]:
    """Return a new ascending series with one point per date.

    The input is copied before sorting so a series shared between callers is
    never reordered. When a date repeats, the point seen last wins.
    """

    by_date: dict[date, PricePoint] = {}
    for point in points:
        by_date[point.date] = point
    return [by_date[d] for d in sorted(by_date)]


class SeriesCursor:
    """Forward-fill lookups for a monotonically increasing sequence of dates.

    ``advance_to`` returns the value of the latest point dated on or before
    the requested day, or ``default`` while the day precedes the first point.
    Each point is visited once over the life of the cursor.
    """

    def __init__(self, points: Iterable[PricePoint], default: float = 0.0):
        self._points = prepare_series(points)
        self._default = default
        self._index = -1
        self._last_day: date | None = None

    def __len__(self) -> int:
        return len(self._points)

    @property
    def has_value(self) -> bool:
        return self._index >= 0

    @property
    def last_date(self) -> date | None:
        """Date of the final point in the series."""

        if not self._points:
            return None
        return self._points[-1].date

    @property
    def value(self) -> float:
        if self._index < 0:
            return self._default
        return self._points[self._index].adj_close

    def advance_to(self, day: date) -> float:
        if self._last_day is not None and day < self._last_day:
            raise ValueError(
                f"Cursor cannot move backwards from {self._last_day.isoformat()} to {day.isoformat()}"
            )
        self._last_day = day
        points = self._points
        while self._index + 1 < len(points) and points[self._index + 1].date <= day:
            self._index += 1
        return self.value


__all__ = ["SeriesCursor", "prepare_series"]
