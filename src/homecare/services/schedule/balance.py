"""Theoretical monthly hours of a user's active assignments versus their assigned hours."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from ...models.domain import WEEKDAYS, AssignmentRecord, Holiday
from .day_types import days_in_month, holiday_days
from .time_slots import ASSIGNMENT_TIME_KEYS, effective_day_hours, parse_slot, parse_weekly_schedule

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParsedAssignmentSchedule:
    weekday_hours: dict[str, float]
    holiday_hours_per_day: float


@dataclass(slots=True)
class MonthlyBalance:
    month: int
    year: int
    assigned_monthly_hours: float
    theoretical_monthly_hours: float
    difference: float
    laborables_monthly_hours: float = 0.0
    holidays_monthly_hours: float = 0.0
    user_id: str | None = None


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, TypeError, ValueError):
            return {}
    return raw if isinstance(raw, Mapping) else {}


def parse_assignment_schedule(raw: Any) -> ParsedAssignmentSchedule:
    """Hours per weekday plus the per-day hours of the holiday configuration.

    Assignment rows prefer ``start``/``end`` over ``startTime``/``endTime``.
    """
    data = _as_mapping(raw)
    weekly = parse_weekly_schedule(data, time_keys=ASSIGNMENT_TIME_KEYS)
    weekday_hours = {weekday: effective_day_hours(weekly[weekday]) for weekday in WEEKDAYS}

    holiday_hours = 0.0
    holiday_config = data.get("holiday_config")
    if isinstance(holiday_config, Mapping):
        slots_raw = holiday_config.get("holiday_timeSlots")
        for index, slot_raw in enumerate(slots_raw if isinstance(slots_raw, list) else []):
            if not isinstance(slot_raw, Mapping):
                continue
            slot = parse_slot(slot_raw, fallback_id=f"holiday-{index + 1}", time_keys=ASSIGNMENT_TIME_KEYS)
            if slot is not None:
                holiday_hours += slot.hours

    return ParsedAssignmentSchedule(weekday_hours=weekday_hours, holiday_hours_per_day=holiday_hours)


def compute_assignments_balance(
    assignments: Sequence[AssignmentRecord],
    month: int,
    year: int,
    assigned_hours: float,
    holidays: Iterable[Holiday] = (),
    user_id: str | None = None,
) -> MonthlyBalance:
    """Walk every day of the month and add the hours each active assignment covers.

    ``laborables`` assignments count their own weekday hours on Monday-Friday
    days that are neither weekend nor holiday. ``festivos`` assignments count
    their holiday slot hours on weekends and holidays. Other assignment types
    contribute nothing to the theoretical total.
    """
    holiday_numbers = holiday_days(holidays, month, year)
    parsed = [
        (a.assignment_type, parse_assignment_schedule(a.schedule))
        for a in assignments
        if a.status == "active"
    ]

    laborables_total = 0.0
    holidays_total = 0.0
    for day in range(1, days_in_month(year, month) + 1):
        weekday_index = date(year, month, day).weekday()
        holiday_context = weekday_index >= 5 or day in holiday_numbers
        weekday = WEEKDAYS[weekday_index]
        for assignment_type, schedule in parsed:
            if assignment_type == "laborables" and not holiday_context:
                laborables_total += schedule.weekday_hours[weekday]
            elif assignment_type == "festivos" and holiday_context:
                holidays_total += schedule.holiday_hours_per_day

    theoretical = laborables_total + holidays_total
    return MonthlyBalance(
        month=month,
        year=year,
        assigned_monthly_hours=assigned_hours,
        theoretical_monthly_hours=theoretical,
        difference=theoretical - assigned_hours,
        laborables_monthly_hours=laborables_total,
        holidays_monthly_hours=holidays_total,
        user_id=user_id,
    )


def unavailable_balance(month: int, year: int, assigned_hours: float, user_id: str | None = None) -> MonthlyBalance:
    """Balance reported when assignments could not be loaded."""
    logger.warning("Assignments unavailable for user %s in %02d/%d", user_id, month, year)
    return MonthlyBalance(
        month=month,
        year=year,
        assigned_monthly_hours=assigned_hours,
        theoretical_monthly_hours=0.0,
        difference=0.0 - assigned_hours,
        user_id=user_id,
    )
