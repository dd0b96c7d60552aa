"""Calendar day classification for monthly hour projections."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Literal

from ...models.domain import DaysBreakdown, Holiday

DayType = Literal["workday", "weekend", "holiday"]

# date.weekday(): Monday=0 ... Sunday=6
_WEEKEND_WEEKDAYS = (5, 6)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return calendar.monthrange(year, month)[1]


def holiday_days(holidays: Iterable[Holiday], month: int, year: int) -> set[int]:
    """Day numbers of the holidays that fall in ``month``/``year``."""
    return {h.day for h in holidays if h.month == month and h.year == year}


def classify_day(year: int, month: int, day: int, holiday_day_numbers: set[int]) -> DayType:
    """Holiday wins over weekend; a holiday on a Sunday is only a holiday."""
    if day in holiday_day_numbers:
        return "holiday"
    if date(year, month, day).weekday() in _WEEKEND_WEEKDAYS:
        return "weekend"
    return "workday"


def month_days_breakdown(month: int, year: int, holidays: Iterable[Holiday] = ()) -> DaysBreakdown:
    """Count workdays, holidays and weekend days of a month."""
    holiday_day_numbers = holiday_days(holidays, month, year)
    breakdown = DaysBreakdown()
    for day in range(1, days_in_month(year, month) + 1):
        kind = classify_day(year, month, day, holiday_day_numbers)
        if kind == "holiday":
            breakdown.festivos += 1
        elif kind == "weekend":
            breakdown.fines_de_semana += 1
        else:
            breakdown.laborables += 1
    return breakdown
